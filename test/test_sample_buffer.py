import unittest

import numpy as np

from sample_decoder import (
    NATIVE_BYTE_ORDER,
    FormatDescriptor,
    MalformedBuffer,
    SampleBuffer,
    SampleFormat,
)


def linear_pcm(
    channel_count: int, bits_per_channel: int, signed: bool = True
) -> FormatDescriptor:
    return FormatDescriptor(
        22050.0, channel_count, bits_per_channel, NATIVE_BYTE_ORDER, b"lpcm", signed
    )


class TestSampleBuffer(unittest.TestCase):
    FRAME_COUNTS: list[tuple[int, int, int, int]] = [
        # channels, bits, length, frame count
        (1, 8, 0, 0),
        (1, 8, 7, 7),
        (1, 16, 88200, 44100),
        (2, 8, 10, 5),
        (2, 16, 256, 64),
    ]
    MISALIGNED: list[tuple[int, int, int]] = [
        (1, 16, 3),
        (2, 8, 5),
        (2, 16, 6),
        (2, 16, 1),
    ]

    def test_frame_count(self):
        for channel_count, bits, length, frame_count in TestSampleBuffer.FRAME_COUNTS:
            with self.subTest(channel_count=channel_count, bits=bits, length=length):
                buffer = SampleBuffer.build(
                    linear_pcm(channel_count, bits), b"\x00" * length
                )
                self.assertEqual(frame_count, buffer.frame_count)
                self.assertEqual(length, len(buffer.samples))

    def test_misaligned(self):
        for channel_count, bits, length in TestSampleBuffer.MISALIGNED:
            with self.subTest(channel_count=channel_count, bits=bits, length=length):
                with self.assertRaises(MalformedBuffer):
                    SampleBuffer(linear_pcm(channel_count, bits), b"\x00" * length)

        with self.assertRaises(MalformedBuffer):
            SampleBuffer(linear_pcm(0, 16), b"")

        # 12-bit mono would otherwise count one byte per frame
        for length in (0, 3, 4):
            with self.subTest(bits=12, length=length):
                with self.assertRaises(MalformedBuffer):
                    SampleBuffer.build(linear_pcm(1, 12), b"\x00" * length)

    def test_properties(self):
        buffer = SampleBuffer(linear_pcm(2, 16), bytearray(22050 * 4))
        self.assertIsInstance(buffer.samples, bytes)
        self.assertEqual(22050.0, buffer.sample_rate)
        self.assertAlmostEqual(1.0, buffer.duration)
        self.assertEqual(SampleFormat.STEREO16, buffer.sample_format)
        self.assertEqual(SampleFormat.MONO8, SampleBuffer(linear_pcm(1, 8), b"").sample_format)

    def test_immutable(self):
        buffer = SampleBuffer(linear_pcm(1, 16), b"\x00\x00")
        with self.assertRaises(AttributeError):
            buffer.samples = b""

    def test_to_numpy(self):
        samples = np.array([[1, -1], [32767, -32768]], dtype=np.int16)
        buffer = SampleBuffer(linear_pcm(2, 16), samples.tobytes())
        self.assertTrue(np.array_equal(samples, buffer.to_numpy()))

        buffer = SampleBuffer(linear_pcm(1, 8, signed=False), b"\x80\xff")
        self.assertEqual(np.uint8, buffer.to_numpy().dtype)
        self.assertEqual([[128], [255]], buffer.to_numpy().tolist())

        buffer = SampleBuffer(linear_pcm(1, 8), b"\x80\x7f")
        self.assertEqual([[-128], [127]], buffer.to_numpy().tolist())

    def test_to_audio_segment(self):
        buffer = SampleBuffer(linear_pcm(2, 16), b"\x00" * 2205 * 4)
        segment = buffer.to_audio_segment()
        self.assertEqual(22050, segment.frame_rate)
        self.assertEqual(2, segment.channels)
        self.assertEqual(2, segment.sample_width)
        self.assertEqual(buffer.samples, segment.raw_data)
        self.assertEqual(100, len(segment))

        silence = SampleBuffer(linear_pcm(1, 8, signed=False), b"\x80" * 16)
        segment = silence.to_audio_segment()
        self.assertEqual(1, segment.sample_width)
        self.assertEqual(0, segment.max)

        buffer = SampleBuffer(linear_pcm(1, 8, signed=False), b"\x80\xff\x00")
        segment = buffer.to_audio_segment()
        self.assertEqual([0, 127, -128], segment.get_array_of_samples().tolist())

        buffer = SampleBuffer(linear_pcm(1, 8), b"\x00\x7f\x80")
        segment = buffer.to_audio_segment()
        self.assertEqual(buffer.samples, segment.raw_data)


if __name__ == "__main__":
    unittest.main()
