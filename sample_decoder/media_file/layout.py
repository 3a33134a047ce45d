from dataclasses import dataclass

from ..errors import FormatRejection, InvalidSampleFormat
from ..format_descriptor import FormatDescriptor


@dataclass
class MediaLayout:
    """Where the audio data of a container lives

    Attributes:
        format (FormatDescriptor): Format reported by the container
        data_offset (int): Offset of the first audio byte
        data_size (int | None): Audio byte count, None if it runs to End of File
    """

    format: FormatDescriptor
    data_offset: int
    data_size: int | None


def format_unreadable(detail: str) -> InvalidSampleFormat:
    return InvalidSampleFormat(
        f"Can't read file format. {detail}", FormatRejection.CONTAINER
    )


def byte_count_unreadable(detail: str) -> InvalidSampleFormat:
    return InvalidSampleFormat(
        f"Can't read audio data byte count. {detail}", FormatRejection.CONTAINER
    )
