import fire
import logging
import numpy as np
import soundfile as sf

from sample_decoder import SampleBuffer, decode_sample, load_settings
from sample_decoder.settings import SETTING_FILE


def to_int16(buffer: SampleBuffer) -> np.ndarray:
    """Samples widened to 16-bit

    Args:
        buffer (SampleBuffer): Sample buffer

    Returns:
        np.ndarray: Samples, shape (frames, channels), dtype int16
    """

    samples = buffer.to_numpy()
    if samples.dtype == np.uint8:
        return (samples.astype(np.int16) - 128) << 8
    elif samples.dtype == np.int8:
        return samples.astype(np.int16) << 8
    return samples


class Cli:
    """Sample Tools CLI

    Args:
        log_level (str, optional): Log level. Defaults to "INFO". {CRITICAL|FATAL|ERROR|WARN|WARNING|INFO|DEBUG|NOTSET}
        settings_path (str, optional): Settings file path. Defaults to "settings.ini".
    """

    @staticmethod
    def __config_logger(level: str) -> None:
        """Config logger

        Args:
            level (str): Log level
        """

        logging.basicConfig(
            level=level,
            format="[%(asctime)s] %(levelname)s [%(name)s.%(funcName)s:%(lineno)d] %(message)s",
        )

    def __init__(self, log_level="INFO", settings_path=SETTING_FILE):
        """Sample Tools CLI

        Args:
            log_level (str, optional): Log level. Defaults to "INFO". {CRITICAL|FATAL|ERROR|WARN|WARNING|INFO|DEBUG|NOTSET}
            settings_path (str, optional): Settings file path. Defaults to "settings.ini".
        """

        Cli.__config_logger(log_level)
        self.__logger = logging.getLogger(__name__)
        self.__settings = load_settings(settings_path)

    def __decode(self, sample_path: str) -> SampleBuffer:
        return decode_sample(sample_path, self.__settings.max_data_bytes)

    def info(self, sample_path) -> None:
        """Show the format of a decoded sample

        Args:
            sample_path (str): Input audio file path

        Raises:
            ValueError: Argument `sample_path` must be str.
        """

        if not isinstance(sample_path, str):
            raise ValueError("Argument `sample_path` must be str.")

        buffer = self.__decode(sample_path)
        self.__logger.info(
            f"Sample info. format={buffer.format} sample_format={buffer.sample_format.name} frame_count={buffer.frame_count} duration={buffer.duration:.3f}s"
        )

    def to_wav(self, sample_path, wav_path) -> None:
        """Decode a sample into a WAV file

        Args:
            sample_path (str): Input audio file path
            wav_path (str): Output WAV path

        Raises:
            ValueError: Argument `sample_path` must be str.
            ValueError: Argument `wav_path` must be str.
        """

        if not isinstance(sample_path, str):
            raise ValueError("Argument `sample_path` must be str.")
        if not isinstance(wav_path, str):
            raise ValueError("Argument `wav_path` must be str.")

        buffer = self.__decode(sample_path)
        samples = to_int16(buffer)
        sf.write(
            wav_path,
            samples,
            round(buffer.sample_rate),
            subtype=self.__settings.export_subtype,
        )
        self.__logger.info(f"Write WAV. wav_path={wav_path}")

    def to_raw(self, sample_path, raw_path) -> None:
        """Decode a sample into raw interleaved PCM bytes

        Args:
            sample_path (str): Input audio file path
            raw_path (str): Output raw PCM path

        Raises:
            ValueError: Argument `sample_path` must be str.
            ValueError: Argument `raw_path` must be str.
        """

        if not isinstance(sample_path, str):
            raise ValueError("Argument `sample_path` must be str.")
        if not isinstance(raw_path, str):
            raise ValueError("Argument `raw_path` must be str.")

        buffer = self.__decode(sample_path)
        with open(raw_path, "wb") as raw_file:
            raw_file.write(buffer.samples)
        self.__logger.info(f"Write raw PCM. raw_path={raw_path} format={buffer.format}")


def main() -> None:
    fire.Fire(Cli)


if __name__ == "__main__":
    main()
