from logging import getLogger
import os
import struct
from typing import BinaryIO, Final

from ..format_descriptor import (
    IMA4_FORMAT_ID,
    LINEAR_PCM_FORMAT_ID,
    NATIVE_BYTE_ORDER,
    FormatDescriptor,
)
from .layout import MediaLayout, byte_count_unreadable, format_unreadable

CAF_FILE_TYPE: Final[bytes] = b"caff"
FILE_HEADER_LENGTH: Final[int] = 8
CHUNK_HEADER_LENGTH: Final[int] = 12

DESCRIPTION_CHUNK_ID: Final[bytes] = b"desc"
DATA_CHUNK_ID: Final[bytes] = b"data"
EDIT_COUNT_LENGTH: Final[int] = 4

# sample rate, format ID, format flags, bytes per packet, frames per packet,
# channels per frame, bits per channel
DESCRIPTION_STRUCT: Final[struct.Struct] = struct.Struct(">d4sIIIII")

LINEAR_PCM_FLAG_IS_FLOAT: Final[int] = 1 << 0
LINEAR_PCM_FLAG_IS_LITTLE_ENDIAN: Final[int] = 1 << 1

__logger = getLogger(__name__)


def is_caf(header: bytes) -> bool:
    return header[0:4] == CAF_FILE_TYPE


def read_description(payload: bytes) -> FormatDescriptor:
    """Read desc chunk

    Args:
        payload (bytes): desc chunk payload

    Raises:
        ValueError: Too less read bytes.

    Returns:
        FormatDescriptor: Format
    """

    if len(payload) < DESCRIPTION_STRUCT.size:
        raise ValueError("Too less read bytes.")

    (
        sample_rate,
        format_id,
        format_flags,
        _bytes_per_packet,
        _frames_per_packet,
        channel_count,
        bits_per_channel,
    ) = DESCRIPTION_STRUCT.unpack(payload[0 : DESCRIPTION_STRUCT.size])

    byte_order = "big"
    if format_id == LINEAR_PCM_FORMAT_ID:
        if format_flags & LINEAR_PCM_FLAG_IS_LITTLE_ENDIAN:
            byte_order = "little"
        if format_flags & LINEAR_PCM_FLAG_IS_FLOAT:
            format_id = b"lpcf"
        elif bits_per_channel == 8:
            byte_order = NATIVE_BYTE_ORDER
    elif format_id == IMA4_FORMAT_ID:
        byte_order = NATIVE_BYTE_ORDER
        bits_per_channel = 16

    return FormatDescriptor(
        sample_rate, channel_count, bits_per_channel, byte_order, format_id
    )


def read_caf_layout(stream: BinaryIO) -> MediaLayout:
    """Read CAF Layout

    Args:
        stream (BinaryIO): Input stream, positioned at the file header

    Raises:
        InvalidSampleFormat: desc chunk is missing or malformed.
        InvalidSampleFormat: data chunk is missing.

    Returns:
        MediaLayout: Layout
    """

    stream.read(FILE_HEADER_LENGTH)

    format: FormatDescriptor | None = None
    data_offset: int | None = None
    data_size: int | None = None
    while True:
        buffer = stream.read(CHUNK_HEADER_LENGTH)
        if len(buffer) < CHUNK_HEADER_LENGTH:
            break
        id = buffer[0:4]
        size = int.from_bytes(buffer[4:12], "big", signed=True)
        __logger.debug(f"CAF chunk found. id={id} size={size}")

        if id == DESCRIPTION_CHUNK_ID and format is None:
            try:
                format = read_description(stream.read(max(size, 0)))
            except ValueError as e:
                raise format_unreadable(f"Invalid desc chunk. {e}") from e
            continue

        if id == DATA_CHUNK_ID and data_offset is None:
            data_offset = stream.tell() + EDIT_COUNT_LENGTH
            if size == -1:
                # Runs to End of File
                break
            data_size = size - EDIT_COUNT_LENGTH
            if data_size < 0:
                raise byte_count_unreadable(f"Invalid data chunk. size={size}")

        if size < 0:
            break
        stream.seek(size, os.SEEK_CUR)

    if format is None:
        raise format_unreadable("desc chunk not found.")
    if data_offset is None:
        raise byte_count_unreadable("data chunk not found.")

    return MediaLayout(format, data_offset, data_size)
