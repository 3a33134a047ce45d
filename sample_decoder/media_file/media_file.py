from dataclasses import dataclass
from logging import getLogger
import os
from typing import BinaryIO, Callable, Final

from ..errors import (
    CannotAllocateMemory,
    CannotReadFile,
    FormatRejection,
    InvalidSampleFormat,
)
from ..format_descriptor import FormatDescriptor
from .aiff import is_aiff, read_aiff_layout
from .caf import is_caf, read_caf_layout
from .layout import MediaLayout, byte_count_unreadable
from .wav import is_wav, read_wav_layout

SNIFF_LENGTH: Final[int] = 12

LAYOUT_READERS: Final[
    list[tuple[Callable[[bytes], bool], Callable[[BinaryIO], MediaLayout]]]
] = [
    (is_aiff, read_aiff_layout),
    (is_wav, read_wav_layout),
    (is_caf, read_caf_layout),
]

__logger = getLogger(__name__)


@dataclass
class MediaFile:
    """Raw audio data and the format the container reports for it"""

    format: FormatDescriptor
    data: bytes


def read_media_layout(stream: BinaryIO) -> MediaLayout:
    """Read Media Layout

    Args:
        stream (BinaryIO): Input stream

    Raises:
        CannotReadFile: Unknown container format.
        InvalidSampleFormat: Format or audio data byte count cannot be read.

    Returns:
        MediaLayout: Layout
    """

    position = stream.tell()
    header = stream.read(SNIFF_LENGTH)
    stream.seek(position)
    for is_container, read_layout in LAYOUT_READERS:
        if is_container(header):
            return read_layout(stream)
    raise CannotReadFile(f"Can't read file. Unknown container format. header={header!r}")


def read_media_data(
    stream: BinaryIO, layout: MediaLayout, max_data_bytes: int | None = None
) -> bytes:
    """Read Media Data

    Args:
        stream (BinaryIO): Input stream
        layout (MediaLayout): Layout
        max_data_bytes (int | None, optional): Byte count limit. Defaults to None.

    Raises:
        CannotAllocateMemory: Audio data is too large.
        InvalidSampleFormat: Audio data is truncated.

    Returns:
        bytes: Audio data
    """

    data_size = layout.data_size
    if data_size is None:
        data_size = stream.seek(0, os.SEEK_END) - layout.data_offset
    if data_size < 0:
        raise byte_count_unreadable(
            f"Audio data is out of file. data_offset={layout.data_offset}"
        )
    if max_data_bytes and data_size > max_data_bytes:
        raise CannotAllocateMemory(
            f"Can't allocate memory for audio data. data_size={data_size} max_data_bytes={max_data_bytes}"
        )

    stream.seek(layout.data_offset)
    try:
        data = stream.read(data_size)
    except MemoryError as e:
        raise CannotAllocateMemory(
            f"Can't allocate memory for audio data. data_size={data_size}"
        ) from e
    if len(data) < data_size:
        raise InvalidSampleFormat(
            f"Can't read audio data from file. expected={data_size} actual={len(data)}",
            FormatRejection.CONTAINER,
        )
    return data


def read_media_file(path: str, max_data_bytes: int | None = None) -> MediaFile:
    """Read Media File

    The file is closed before this function returns.

    Args:
        path (str): Audio file path
        max_data_bytes (int | None, optional): Byte count limit, None or 0 for unlimited. Defaults to None.

    Raises:
        CannotReadFile: File cannot be opened or read, or its container is unknown.
        InvalidSampleFormat: Format or audio data cannot be read from the container.
        CannotAllocateMemory: Audio data cannot be held in memory.

    Returns:
        MediaFile: Format and raw audio data
    """

    if not isinstance(path, (str, os.PathLike)):
        raise CannotReadFile(f"Can't read file. path={path!r}")

    try:
        with open(path, "rb") as stream:
            layout = read_media_layout(stream)
            data = read_media_data(stream, layout, max_data_bytes)
    except OSError as e:
        raise CannotReadFile(f"Can't read file. path={path} error={e}") from e

    __logger.info(
        f"Media file loaded. path={path} format={layout.format} data_size={len(data)}"
    )
    return MediaFile(layout.format, data)
