import os
import tempfile
import unittest

import numpy as np
import soundfile as sf

from sample_tools_cli.cli import Cli

from media_builders import aiff_bytes, ima4_packet


class TestCli(unittest.TestCase):
    def setUp(self):
        self.__directory = tempfile.TemporaryDirectory()
        self.addCleanup(self.__directory.cleanup)
        self.sample_path = self.path("sample.aifc")
        with open(self.sample_path, "wb") as file:
            file.write(
                aiff_bytes(2, 16, 22050, (ima4_packet(0x0100) + ima4_packet(0xFF00)) * 2, b"ima4")
            )
        self.cli = Cli("WARNING", self.path("missing.ini"))

    def path(self, name: str) -> str:
        return os.path.join(self.__directory.name, name)

    def test_to_wav(self):
        wav_path = self.path("sample.wav")
        self.cli.to_wav(self.sample_path, wav_path)
        samples, sample_rate = sf.read(wav_path, dtype="int16")
        self.assertEqual(22050, sample_rate)
        self.assertEqual((128, 2), samples.shape)
        self.assertTrue(np.all(samples[:, 0] == 256))
        self.assertTrue(np.all(samples[:, 1] == -256))

    def test_to_raw(self):
        raw_path = self.path("sample.raw")
        self.cli.to_raw(self.sample_path, raw_path)
        with open(raw_path, "rb") as raw_file:
            self.assertEqual(128 * 2 * 2, len(raw_file.read()))

    def test_info(self):
        with self.assertLogs("sample_tools_cli.cli", level="INFO") as logs:
            self.cli.info(self.sample_path)
        self.assertIn("frame_count=128", logs.output[0])

    def test_argument_types(self):
        with self.assertRaises(ValueError):
            self.cli.info(1)
        with self.assertRaises(ValueError):
            self.cli.to_wav(self.sample_path, None)
        with self.assertRaises(ValueError):
            self.cli.to_raw(None, self.path("sample.raw"))


if __name__ == "__main__":
    unittest.main()
