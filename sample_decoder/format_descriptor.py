from dataclasses import dataclass, replace
from enum import Enum
import sys
from typing import Final, Self

NATIVE_BYTE_ORDER: Final[str] = sys.byteorder

LINEAR_PCM_FORMAT_ID: Final[bytes] = b"lpcm"
IMA4_FORMAT_ID: Final[bytes] = b"ima4"


class SampleEncoding(Enum):
    """Sample Encoding"""

    LINEAR_PCM = LINEAR_PCM_FORMAT_ID
    IMA4_ADPCM = IMA4_FORMAT_ID


@dataclass(frozen=True)
class FormatDescriptor:
    """Format Descriptor

    Describes a sample stream the way the container reports it. Nothing is
    checked on construction, see `validate_format`.
    """

    sample_rate: float
    channel_count: int
    bits_per_channel: int
    byte_order: str
    format_id: bytes
    signed: bool = True

    @property
    def encoding(self) -> SampleEncoding | None:
        """Encoding

        Returns:
            SampleEncoding | None: Encoding, None if `format_id` is unknown
        """

        try:
            return SampleEncoding(self.format_id)
        except ValueError:
            return None

    @property
    def is_native_byte_order(self) -> bool:
        return self.byte_order == NATIVE_BYTE_ORDER

    @property
    def bytes_per_frame(self) -> int:
        return self.channel_count * (self.bits_per_channel // 8)

    def as_linear_pcm(self) -> Self:
        """Layout of this stream after decompression

        Returns:
            Self: 16-bit native-endian linear PCM descriptor
        """

        return replace(
            self,
            bits_per_channel=16,
            byte_order=NATIVE_BYTE_ORDER,
            format_id=LINEAR_PCM_FORMAT_ID,
            signed=True,
        )

    def __str__(self) -> str:
        format_id = self.format_id.decode("latin-1")
        return (
            f"{format_id} {self.sample_rate:g}Hz {self.channel_count}ch "
            f"{self.bits_per_channel}bit {self.byte_order}-endian"
        )
