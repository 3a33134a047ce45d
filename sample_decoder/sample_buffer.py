from dataclasses import dataclass
from enum import Enum
from typing import Self

import numpy as np
from pydub import AudioSegment

from .errors import MalformedBuffer
from .format_descriptor import FormatDescriptor


class SampleFormat(Enum):
    """Sample Format (channels, bits per channel)"""

    MONO8 = (1, 8)
    MONO16 = (1, 16)
    STEREO8 = (2, 8)
    STEREO16 = (2, 16)


@dataclass(frozen=True)
class SampleBuffer:
    """Sample Buffer

    Interleaved linear PCM frames with the format describing them. The
    length of `samples` is always a whole number of frames.
    """

    format: FormatDescriptor
    samples: bytes

    def __post_init__(self):
        bytes_per_frame = self.format.bytes_per_frame
        if self.format.bits_per_channel % 8 != 0:
            raise MalformedBuffer(
                f"Bits per channel is not a whole number of bytes. format={self.format}"
            )
        if bytes_per_frame <= 0:
            raise MalformedBuffer(
                f"Invalid frame size. format={self.format} bytes_per_frame={bytes_per_frame}"
            )
        if len(self.samples) % bytes_per_frame != 0:
            raise MalformedBuffer(
                f"Sample data is not aligned to frames. length={len(self.samples)} bytes_per_frame={bytes_per_frame}"
            )
        if not isinstance(self.samples, bytes):
            object.__setattr__(self, "samples", bytes(self.samples))

    @classmethod
    def build(cls, format: FormatDescriptor, samples: bytes) -> Self:
        """Build

        Args:
            format (FormatDescriptor): Linear PCM format
            samples (bytes): Interleaved sample bytes

        Raises:
            MalformedBuffer: Frame size is not a whole number of bytes, or length of
                `samples` is not a whole number of frames.

        Returns:
            Self: Instance of this class
        """

        return cls(format, samples)

    @property
    def frame_count(self) -> int:
        return len(self.samples) // self.format.bytes_per_frame

    @property
    def sample_rate(self) -> float:
        return self.format.sample_rate

    @property
    def duration(self) -> float:
        """Duration in seconds"""
        if self.format.sample_rate <= 0:
            return 0.0
        return self.frame_count / self.format.sample_rate

    @property
    def sample_format(self) -> SampleFormat:
        return SampleFormat((self.format.channel_count, self.format.bits_per_channel))

    def to_numpy(self) -> np.ndarray:
        """To NumPy array

        Returns:
            np.ndarray: Samples, shape (frames, channels)
        """

        if self.format.bits_per_channel == 16:
            dtype = np.int16
        elif self.format.signed:
            dtype = np.int8
        else:
            dtype = np.uint8
        samples = np.frombuffer(self.samples, dtype=dtype)
        return samples.reshape(-1, self.format.channel_count)

    def to_audio_segment(self) -> AudioSegment:
        """To AudioSegment

        Returns:
            AudioSegment: Audio segment sharing the sample layout
        """

        samples = self.samples
        # AudioSegment holds 8-bit samples as signed
        if self.format.bits_per_channel == 8 and not self.format.signed:
            samples = (np.frombuffer(samples, dtype=np.uint8) ^ 0x80).tobytes()
        return AudioSegment(
            samples,
            frame_rate=round(self.format.sample_rate),
            sample_width=self.format.bits_per_channel // 8,
            channels=self.format.channel_count,
        )
