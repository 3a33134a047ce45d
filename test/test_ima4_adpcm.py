import unittest

import numpy as np

from sample_decoder import (
    Ima4AdpcmDecoder,
    Ima4Packet,
    MalformedStream,
    decode_ima4,
)

from media_builders import ima4_packet


def samples_of(pcm: bytes) -> list[int]:
    return np.frombuffer(pcm, dtype=np.int16).tolist()


class TestIma4Packet(unittest.TestCase):
    PREAMBLES: list[tuple[int, int, int]] = [
        # preamble, predictor, step index
        (0x0000, 0, 0),
        (0x0100, 256, 0),
        (0x7FD8, 32640, 88),
        (0x8058, -32768, 88),
        (0xFF85, -128, 5),
        # Step index is clamped to 88
        (0x007F, 0, 88),
    ]

    def test_read(self):
        for preamble, predictor, step_index in TestIma4Packet.PREAMBLES:
            with self.subTest(preamble=hex(preamble)):
                packet = Ima4Packet.read(ima4_packet(preamble))
                self.assertEqual(predictor, packet.predictor)
                self.assertEqual(step_index, packet.step_index)
                self.assertEqual(32, len(packet.nibbles))

        with self.assertRaises(MalformedStream):
            Ima4Packet.read(b"\x00" * 33)


class TestIma4AdpcmDecoder(unittest.TestCase):
    def test_decode_lengths(self):
        for packet_count in [1, 2, 5]:
            with self.subTest(packet_count=packet_count):
                pcm = decode_ima4(ima4_packet(0x0000) * packet_count, 1)
                self.assertEqual(128 * packet_count, len(pcm))

        pcm = decode_ima4(ima4_packet(0x0000) * 4, 2)
        self.assertEqual(128 * 4, len(pcm))

    def test_decode_rejects_misaligned(self):
        inputs: list[tuple[bytes, int]] = [
            (b"", 1),
            (b"\x00" * 33, 1),
            (b"\x00" * 35, 1),
            (b"\x00" * 34, 2),
            (b"\x00" * 102, 2),
        ]
        for data, channel_count in inputs:
            with self.subTest(length=len(data), channel_count=channel_count):
                with self.assertRaises(MalformedStream) as context:
                    decode_ima4(data, channel_count)
                self.assertEqual("packet alignment", context.exception.reason)

        with self.assertRaises(MalformedStream):
            Ima4AdpcmDecoder(0)

    def test_decode_samples(self):
        # First nibble 4 moves the step index to 2
        samples = samples_of(decode_ima4(ima4_packet(0x0100, b"\x04" + b"\x00" * 31), 1))
        self.assertEqual([263, 264, 265, 265], samples[0:4])
        self.assertEqual([265] * 60, samples[4:])

    def test_decode_sign_extended_predictor(self):
        samples = samples_of(decode_ima4(ima4_packet(0xFF85), 1))
        self.assertEqual([-127, -126, -125, -124, -123, -123], samples[0:6])
        self.assertEqual(-123, samples[-1])

    def test_decode_clamped_step_index(self):
        samples = samples_of(decode_ima4(ima4_packet(0x007F), 1))
        self.assertEqual(4095, samples[0])

    def test_decode_clamps_predictor(self):
        samples = samples_of(decode_ima4(ima4_packet(0x7FD8, b"\x77" * 32), 1))
        self.assertEqual([32767] * 64, samples)

        samples = samples_of(decode_ima4(ima4_packet(0x8058, b"\xff" * 32), 1))
        self.assertEqual([-32768] * 64, samples)

        # Predictor is held at -65536, so a full positive step lands on -4098
        samples = samples_of(
            decode_ima4(ima4_packet(0x8058, b"\xff" * 31 + b"\x7f"), 1)
        )
        self.assertEqual([-32768] * 63, samples[0:63])
        self.assertEqual(-4098, samples[63])

        # Predictor is held at 65535, so a full negative step lands on 4097
        samples = samples_of(
            decode_ima4(ima4_packet(0x7FD8, b"\x77" * 31 + b"\xf7"), 1)
        )
        self.assertEqual([32767] * 63, samples[0:63])
        self.assertEqual(4097, samples[63])

    def test_decode_stereo_interleaves_frames(self):
        data = ima4_packet(0x0100) + ima4_packet(0xFF00)
        samples = np.frombuffer(decode_ima4(data, 2), dtype=np.int16).reshape(-1, 2)
        self.assertEqual((64, 2), samples.shape)
        self.assertTrue(np.all(samples[:, 0] == 256))
        self.assertTrue(np.all(samples[:, 1] == -256))

        decoded = Ima4AdpcmDecoder(2).decode(data * 2)
        self.assertEqual((128, 2), decoded.shape)
        self.assertEqual(np.int16, decoded.dtype)

    def test_decode_packets_are_independent(self):
        first = ima4_packet(0x7FD8, b"\x77" * 32)
        second = ima4_packet(0x0100)
        samples = samples_of(decode_ima4(first + second, 1))
        self.assertEqual([256] * 64, samples[64:])

    def test_decode_is_deterministic(self):
        data = ima4_packet(0x1234, bytes(range(32))) + ima4_packet(0xABCD, bytes(range(255, 223, -1)))
        decoder = Ima4AdpcmDecoder()
        self.assertEqual(decoder.decode(data).tobytes(), decoder.decode(data).tobytes())
        self.assertEqual(decode_ima4(data, 1), decode_ima4(data, 1))


if __name__ == "__main__":
    unittest.main()
