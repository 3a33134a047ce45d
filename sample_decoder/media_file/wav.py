from logging import getLogger
from typing import BinaryIO, Final

from ..format_descriptor import LINEAR_PCM_FORMAT_ID, NATIVE_BYTE_ORDER
from ..format_descriptor import FormatDescriptor
from .chunk import index_chunks
from .layout import MediaLayout, byte_count_unreadable, format_unreadable

RIFF_ID: Final[bytes] = b"RIFF"
WAVE_FORM_TYPE: Final[bytes] = b"WAVE"

FORMAT_CHUNK_ID: Final[bytes] = b"fmt "
DATA_CHUNK_ID: Final[bytes] = b"data"

FORMAT_LENGTH: Final[int] = 16
EXTENSIBLE_FORMAT_LENGTH: Final[int] = 40

WAVE_FORMAT_PCM: Final[int] = 0x0001
WAVE_FORMAT_EXTENSIBLE: Final[int] = 0xFFFE

__logger = getLogger(__name__)


def is_wav(header: bytes) -> bool:
    return header[0:4] == RIFF_ID and header[8:12] == WAVE_FORM_TYPE


def format_id_from_tag(format_tag: int) -> bytes:
    """Format ID from WAVE format tag

    Non-PCM tags map to "ms" followed by the 16-bit tag, so 0x0011 (IMA
    ADPCM in Microsoft's block layout) becomes b"ms\\x00\\x11".

    Args:
        format_tag (int): WAVE format tag

    Returns:
        bytes: Format ID
    """

    if format_tag == WAVE_FORMAT_PCM:
        return LINEAR_PCM_FORMAT_ID
    return b"ms" + format_tag.to_bytes(2, "big")


def read_format(payload: bytes) -> FormatDescriptor:
    """Read fmt chunk

    Args:
        payload (bytes): fmt chunk payload

    Raises:
        ValueError: Too less read bytes.

    Returns:
        FormatDescriptor: Format
    """

    if len(payload) < FORMAT_LENGTH:
        raise ValueError("Too less read bytes.")

    format_tag = int.from_bytes(payload[0:2], "little")
    channel_count = int.from_bytes(payload[2:4], "little")
    sample_rate = float(int.from_bytes(payload[4:8], "little"))
    bits_per_channel = int.from_bytes(payload[14:16], "little")
    if format_tag == WAVE_FORMAT_EXTENSIBLE:
        if len(payload) < EXTENSIBLE_FORMAT_LENGTH:
            raise ValueError("Too less read bytes.")
        # First 2 bytes of the sub format GUID
        format_tag = int.from_bytes(payload[24:26], "little")

    format_id = format_id_from_tag(format_tag)
    byte_order = "little"
    # 8-bit WAVE samples are offset binary
    signed = bits_per_channel != 8
    if bits_per_channel == 8:
        byte_order = NATIVE_BYTE_ORDER

    return FormatDescriptor(
        sample_rate, channel_count, bits_per_channel, byte_order, format_id, signed
    )


def read_wav_layout(stream: BinaryIO) -> MediaLayout:
    """Read RIFF WAVE Layout

    Args:
        stream (BinaryIO): Input stream, positioned at the RIFF header

    Raises:
        InvalidSampleFormat: fmt chunk is missing or malformed.
        InvalidSampleFormat: data chunk is missing.

    Returns:
        MediaLayout: Layout
    """

    stream.read(12)
    chunks = index_chunks(stream, "little")
    __logger.debug(f"WAVE chunks indexed. ids={list(chunks)}")

    format_chunk = chunks.get(FORMAT_CHUNK_ID)
    if format_chunk is None:
        raise format_unreadable("fmt chunk not found.")
    try:
        format = read_format(format_chunk.read_payload(stream))
    except ValueError as e:
        raise format_unreadable(f"Invalid fmt chunk. {e}") from e

    data_chunk = chunks.get(DATA_CHUNK_ID)
    if data_chunk is None:
        raise byte_count_unreadable("data chunk not found.")

    return MediaLayout(format, data_chunk.offset, data_chunk.size)
