from functools import partial
from logging import getLogger
from typing import Callable

from .errors import CannotCreateBuffer, DecodeError
from .format_descriptor import SampleEncoding
from .format_validator import validate_format
from .ima4_adpcm import decode_ima4
from .media_file import MediaFile, read_media_file
from .sample_buffer import SampleBuffer

MediaFileReader = Callable[[str], MediaFile]


class SampleDecoder:
    """Sample Decoder

    Reads an audio file through a media file reader, validates its format
    and returns a linear PCM `SampleBuffer`. Holds no state between calls.
    """

    __logger = getLogger(__name__)

    def __init__(
        self,
        reader: MediaFileReader | None = None,
        max_data_bytes: int | None = None,
    ):
        """Constructor

        Args:
            reader (MediaFileReader | None, optional): Media file reader. Defaults to `read_media_file`.
            max_data_bytes (int | None, optional): Byte count limit passed to `read_media_file`. Defaults to None.
        """

        if reader is None:
            reader = partial(read_media_file, max_data_bytes=max_data_bytes)
        self.reader = reader

    def decode_file(self, path: str) -> SampleBuffer:
        """Decode File

        Args:
            path (str): Audio file path

        Raises:
            CannotReadFile: File cannot be opened or read.
            CannotAllocateMemory: Audio data cannot be held in memory.
            InvalidSampleFormat: Format is not supported or cannot be read.
            MalformedStream: IMA4 data is not made of whole packets.
            CannotCreateBuffer: Audio data cannot be turned into a sample buffer.

        Returns:
            SampleBuffer: Sample buffer
        """

        media_file = self.reader(path)
        format = media_file.format
        validate_format(format)

        if format.encoding == SampleEncoding.IMA4_ADPCM:
            self.__logger.info(f"IMA4 data detected. data_size={len(media_file.data)}")
            samples = decode_ima4(media_file.data, format.channel_count)
            format = format.as_linear_pcm()
        else:
            samples = media_file.data

        try:
            buffer = SampleBuffer(format, samples)
        except DecodeError as e:
            raise CannotCreateBuffer("Cannot create sound buffer.", e) from e

        self.__logger.info(
            f"Sample decoded. path={path} format={buffer.format} frame_count={buffer.frame_count}"
        )
        return buffer


def decode_sample(path: str, max_data_bytes: int | None = None) -> SampleBuffer:
    """Decode an audio file into a linear PCM sample buffer

    Args:
        path (str): Audio file path
        max_data_bytes (int | None, optional): Byte count limit. Defaults to None.

    Returns:
        SampleBuffer: Sample buffer
    """

    return SampleDecoder(max_data_bytes=max_data_bytes).decode_file(path)
