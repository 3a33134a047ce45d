from .errors import FormatRejection, InvalidSampleFormat
from .format_descriptor import FormatDescriptor, SampleEncoding

SUPPORTED_CHANNEL_COUNTS = (1, 2)
SUPPORTED_LINEAR_PCM_BITS = (8, 16)


def validate_format(format: FormatDescriptor) -> None:
    """Validate Sample Format

    Rules are checked in order and the first failure wins.

    Args:
        format (FormatDescriptor): Format reported by the container

    Raises:
        InvalidSampleFormat: Byte order is not native.
        InvalidSampleFormat: Channel count is not mono or stereo.
        InvalidSampleFormat: Linear PCM resolution is not 8-bit or 16-bit.
        InvalidSampleFormat: Encoding is not linear PCM or IMA4.
    """

    if not format.is_native_byte_order:
        raise InvalidSampleFormat(
            "Invalid sample endianity, only native endianity supported.",
            FormatRejection.ENDIANNESS,
        )

    if format.channel_count not in SUPPORTED_CHANNEL_COUNTS:
        raise InvalidSampleFormat(
            "Invalid number of sound channels, only mono and stereo supported.",
            FormatRejection.CHANNELS,
        )

    encoding = format.encoding
    if (
        encoding == SampleEncoding.LINEAR_PCM
        and format.bits_per_channel not in SUPPORTED_LINEAR_PCM_BITS
    ):
        raise InvalidSampleFormat(
            "Invalid sample resolution, only 8-bit and 16-bit supported.",
            FormatRejection.RESOLUTION,
        )

    if encoding is None:
        raise InvalidSampleFormat(
            f"Invalid sample encoding, only linear PCM and IMA4 supported. format_id={format.format_id!r}",
            FormatRejection.ENCODING,
        )
