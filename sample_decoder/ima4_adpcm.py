from dataclasses import dataclass
from logging import getLogger
from typing import Final, Self

import numpy as np

from .errors import MalformedStream

PACKET_SIZE: Final[int] = 34
PREAMBLE_SIZE: Final[int] = 2
SAMPLES_PER_PACKET: Final[int] = (PACKET_SIZE - PREAMBLE_SIZE) * 2

STEP_INDEX_LIMIT: Final[int] = 88
PREDICTOR_MIN: Final[int] = -65536
PREDICTOR_MAX: Final[int] = 65535
SAMPLE_MIN: Final[int] = -32768
SAMPLE_MAX: Final[int] = 32767

INDEX_TABLE: Final[list[int]] = [
    -1, -1, -1, -1, 2, 4, 6, 8,
    -1, -1, -1, -1, 2, 4, 6, 8,
]
STEP_TABLE: Final[list[int]] = [
    7, 8, 9, 10, 11, 12, 13, 14, 16, 17,
    19, 21, 23, 25, 28, 31, 34, 37, 41, 45,
    50, 55, 60, 66, 73, 80, 88, 97, 107, 118,
    130, 143, 157, 173, 190, 209, 230, 253, 279, 307,
    337, 371, 408, 449, 494, 544, 598, 658, 724, 796,
    876, 963, 1060, 1166, 1282, 1411, 1552, 1707, 1878, 2066,
    2272, 2499, 2749, 3024, 3327, 3660, 4026, 4428, 4871, 5358,
    5894, 6484, 7132, 7845, 8630, 9493, 10442, 11487, 12635, 13899,
    15289, 16818, 18500, 20350, 22385, 24623, 27086, 29794, 32767,
]


def _clamp(value: int, lower: int, upper: int) -> int:
    if value > upper:
        return upper
    elif value < lower:
        return lower
    return value


@dataclass
class Ima4Packet:
    """IMA4 Packet

    2 bytes of big-endian preamble (9-bit predictor, 7-bit step index)
    followed by 32 bytes of nibbles, low nibble first.
    """

    predictor: int
    step_index: int
    nibbles: bytes

    @classmethod
    def read(cls, buffer: bytes) -> Self:
        """Read

        Args:
            buffer (bytes): 34 bytes packet

        Raises:
            MalformedStream: Invalid packet length.

        Returns:
            Self: Instance of this class
        """

        if len(buffer) != PACKET_SIZE:
            raise MalformedStream(
                f"Invalid IMA4 packet length. length={len(buffer)}",
                "packet size",
            )

        preamble = int.from_bytes(buffer[0:PREAMBLE_SIZE], "big")
        predictor = preamble & 0xFF80
        # Sign extension
        if predictor & 0x8000:
            predictor -= 0x10000
        step_index = _clamp(preamble & 0x007F, 0, STEP_INDEX_LIMIT)
        return cls(predictor, step_index, bytes(buffer[PREAMBLE_SIZE:PACKET_SIZE]))


class Ima4AdpcmDecoder:
    """IMA4 ADPCM Decoder

    Each packet is decoded from its own preamble, so a decoder carries no
    state from one `decode` call to the next.
    """

    __logger = getLogger(__name__)

    def __init__(self, channel_count: int = 1):
        """Constructor

        Args:
            channel_count (int, optional): Number of interleaved channels. Defaults to 1.

        Raises:
            MalformedStream: Invalid `channel_count`.
        """

        if not isinstance(channel_count, int) or channel_count < 1:
            raise MalformedStream(
                f"Invalid channel count. channel_count={channel_count}",
                "channel count",
            )
        self.channel_count = channel_count

    @staticmethod
    def __decode_nibble(
        predictor: int, step_index: int, nibble: int
    ) -> tuple[int, int, int]:
        """Decode Nibble

        Args:
            predictor (int): Current predictor
            step_index (int): Current step index
            nibble (int): Nibble

        Returns:
            tuple[int, int, int]: Sample, next predictor and next step index
        """

        step = STEP_TABLE[step_index]
        # (magnitude + 0.5) * step / 4, truncated
        diff = ((2 * (nibble & 0x07) + 1) * step) >> 3
        if nibble & 0x08:
            diff = -diff
        predictor = _clamp(predictor + diff, PREDICTOR_MIN, PREDICTOR_MAX)
        sample = _clamp(predictor, SAMPLE_MIN, SAMPLE_MAX)
        step_index = _clamp(step_index + INDEX_TABLE[nibble], 0, STEP_INDEX_LIMIT)
        return sample, predictor, step_index

    def decode_packet(self, packet: Ima4Packet) -> list[int]:
        """Decode Packet

        Args:
            packet (Ima4Packet): Packet

        Returns:
            list[int]: 64 decoded samples
        """

        decoded = [0] * SAMPLES_PER_PACKET
        predictor = packet.predictor
        step_index = packet.step_index
        for i, byte in enumerate(packet.nibbles):
            decoded[i * 2], predictor, step_index = Ima4AdpcmDecoder.__decode_nibble(
                predictor, step_index, byte & 0x0F
            )
            decoded[i * 2 + 1], predictor, step_index = (
                Ima4AdpcmDecoder.__decode_nibble(predictor, step_index, byte >> 4)
            )
        return decoded

    def decode(self, data: bytes) -> np.ndarray:
        """Decode

        Args:
            data (bytes): Packets, interleaved one per channel

        Raises:
            MalformedStream: Data is not made of whole packet groups.

        Returns:
            np.ndarray: Decoded samples, shape (frames, channels), dtype int16
        """

        group_size = PACKET_SIZE * self.channel_count
        if len(data) == 0 or len(data) % group_size != 0:
            raise MalformedStream(
                f"IMA4 data is not aligned to packets. length={len(data)} channel_count={self.channel_count}"
            )

        packet_count = len(data) // PACKET_SIZE
        self.__logger.debug(f"Decode IMA4 packets. packet_count={packet_count}")

        decoded = np.empty((packet_count, SAMPLES_PER_PACKET), dtype=np.int16)
        for i in range(packet_count):
            offset = i * PACKET_SIZE
            packet = Ima4Packet.read(data[offset : offset + PACKET_SIZE])
            decoded[i] = self.decode_packet(packet)

        # (group, channel, sample) -> (group, sample, channel)
        decoded = decoded.reshape(-1, self.channel_count, SAMPLES_PER_PACKET)
        decoded = decoded.transpose(0, 2, 1)
        return decoded.reshape(-1, self.channel_count)


def decode_ima4(data: bytes, channel_count: int) -> bytes:
    """Decode IMA4 to 16-bit native-endian linear PCM

    Args:
        data (bytes): IMA4 packets
        channel_count (int): Number of channels

    Raises:
        MalformedStream: Data is not made of whole packet groups.

    Returns:
        bytes: Frame-interleaved linear PCM, 128 bytes per input packet
    """

    decoder = Ima4AdpcmDecoder(channel_count)
    return decoder.decode(data).tobytes()
