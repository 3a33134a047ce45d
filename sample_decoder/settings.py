import configparser
from dataclasses import dataclass
from logging import getLogger
from typing import Self

SETTING_FILE = "settings.ini"

__logger = getLogger(__name__)


@dataclass
class Settings:
    """Settings

    Attributes:
        max_data_bytes (int): Audio byte count limit, 0 for unlimited
        export_subtype (str): soundfile subtype of exported WAV files
    """

    max_data_bytes: int = 0
    export_subtype: str = "PCM_16"

    @classmethod
    def from_config(cls, config: configparser.ConfigParser) -> Self:
        """From ConfigParser

        Args:
            config (configparser.ConfigParser): Parsed settings

        Raises:
            ValueError: `MaxDataBytes` is negative.

        Returns:
            Self: Instance of this class
        """

        max_data_bytes = config.getint(
            "SampleDecoder", "MaxDataBytes", fallback=cls.max_data_bytes
        )
        if max_data_bytes < 0:
            raise ValueError("`MaxDataBytes` must not be negative.")
        export_subtype = config.get("Export", "Subtype", fallback=cls.export_subtype)
        return cls(max_data_bytes, export_subtype)


def load_settings(path: str = SETTING_FILE) -> Settings:
    """Loads Settings from ini

    Args:
        path (str, optional): Settings file path. Defaults to "settings.ini".

    Returns:
        Settings: Settings, defaults if the file does not exist
    """

    config = configparser.ConfigParser()
    read_paths = config.read(path, encoding="utf-8")
    if len(read_paths) == 0:
        __logger.debug(f"Settings file not found, using defaults. path={path}")
    return Settings.from_config(config)
