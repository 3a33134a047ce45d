from logging import getLogger
import math
from typing import BinaryIO, Final

from ..format_descriptor import (
    IMA4_FORMAT_ID,
    LINEAR_PCM_FORMAT_ID,
    NATIVE_BYTE_ORDER,
    FormatDescriptor,
)
from .chunk import index_chunks
from .layout import MediaLayout, byte_count_unreadable, format_unreadable

FORM_ID: Final[bytes] = b"FORM"
AIFF_FORM_TYPES: Final[tuple[bytes, ...]] = (b"AIFF", b"AIFC")

COMMON_CHUNK_ID: Final[bytes] = b"COMM"
SOUND_DATA_CHUNK_ID: Final[bytes] = b"SSND"

AIFF_COMMON_LENGTH: Final[int] = 18
AIFC_COMMON_LENGTH: Final[int] = 22
SOUND_DATA_HEADER_LENGTH: Final[int] = 8

# Compression type -> (format ID, byte order, signed)
COMPRESSION_TYPES: Final[dict[bytes, tuple[bytes, str, bool]]] = {
    b"NONE": (LINEAR_PCM_FORMAT_ID, "big", True),
    b"twos": (LINEAR_PCM_FORMAT_ID, "big", True),
    b"sowt": (LINEAR_PCM_FORMAT_ID, "little", True),
    b"raw ": (LINEAR_PCM_FORMAT_ID, "big", False),
    b"ima4": (IMA4_FORMAT_ID, NATIVE_BYTE_ORDER, True),
}

__logger = getLogger(__name__)


def is_aiff(header: bytes) -> bool:
    return header[0:4] == FORM_ID and header[8:12] in AIFF_FORM_TYPES


def read_extended(buffer: bytes) -> float:
    """Read 80-bit IEEE 754 extended precision float

    Args:
        buffer (bytes): 10 bytes, big-endian

    Raises:
        ValueError: Infinite or NaN value.

    Returns:
        float: Value
    """

    exponent = int.from_bytes(buffer[0:2], "big")
    mantissa = int.from_bytes(buffer[2:10], "big")
    sign = -1.0 if exponent & 0x8000 else 1.0
    exponent &= 0x7FFF
    if exponent == 0 and mantissa == 0:
        return 0.0
    if exponent == 0x7FFF:
        raise ValueError("Infinite or NaN extended value.")
    return sign * math.ldexp(mantissa, exponent - 16383 - 63)


def read_common(payload: bytes, is_aifc: bool) -> FormatDescriptor:
    """Read COMM chunk

    Args:
        payload (bytes): COMM chunk payload
        is_aifc (bool): AIFF-C, which appends a compression type

    Raises:
        ValueError: Too less read bytes.

    Returns:
        FormatDescriptor: Format
    """

    if len(payload) < (AIFC_COMMON_LENGTH if is_aifc else AIFF_COMMON_LENGTH):
        raise ValueError("Too less read bytes.")

    channel_count = int.from_bytes(payload[0:2], "big", signed=True)
    bits_per_channel = int.from_bytes(payload[6:8], "big", signed=True)
    sample_rate = read_extended(payload[8:18])
    compression_type = payload[18:22] if is_aifc else b"NONE"

    format_id, byte_order, signed = COMPRESSION_TYPES.get(
        compression_type, (compression_type, "big", True)
    )
    if format_id == IMA4_FORMAT_ID:
        bits_per_channel = 16
    elif format_id == LINEAR_PCM_FORMAT_ID and bits_per_channel == 8:
        # Single bytes have no order
        byte_order = NATIVE_BYTE_ORDER

    return FormatDescriptor(
        sample_rate, channel_count, bits_per_channel, byte_order, format_id, signed
    )


def read_aiff_layout(stream: BinaryIO) -> MediaLayout:
    """Read AIFF / AIFF-C Layout

    Args:
        stream (BinaryIO): Input stream, positioned at the FORM header

    Raises:
        InvalidSampleFormat: COMM chunk is missing or malformed.
        InvalidSampleFormat: SSND chunk is missing or malformed.

    Returns:
        MediaLayout: Layout
    """

    form_header = stream.read(12)
    is_aifc = form_header[8:12] == b"AIFC"
    chunks = index_chunks(stream, "big")
    __logger.debug(f"AIFF chunks indexed. is_aifc={is_aifc} ids={list(chunks)}")

    common = chunks.get(COMMON_CHUNK_ID)
    if common is None:
        raise format_unreadable("COMM chunk not found.")
    try:
        format = read_common(common.read_payload(stream), is_aifc)
    except ValueError as e:
        raise format_unreadable(f"Invalid COMM chunk. {e}") from e

    sound_data = chunks.get(SOUND_DATA_CHUNK_ID)
    if sound_data is None:
        raise byte_count_unreadable("SSND chunk not found.")
    stream.seek(sound_data.offset)
    sound_data_header = stream.read(SOUND_DATA_HEADER_LENGTH)
    if len(sound_data_header) < SOUND_DATA_HEADER_LENGTH:
        raise byte_count_unreadable("Invalid SSND chunk.")
    offset = int.from_bytes(sound_data_header[0:4], "big")
    data_size = sound_data.size - SOUND_DATA_HEADER_LENGTH - offset
    if data_size < 0:
        raise byte_count_unreadable(f"Invalid SSND offset. offset={offset}")

    return MediaLayout(
        format, sound_data.offset + SOUND_DATA_HEADER_LENGTH + offset, data_size
    )
