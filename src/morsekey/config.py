"""Configuration module for morsekey package."""

import json
import logging
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Optional, Union

from .errors import MorseKeyError
from .timing import DEFAULT_WPM, dot_duration_ms

logger = logging.getLogger(__name__)

CONFIG_DIR = Path("~/.morsekey")
DEFAULT_CONFIG_PATH = CONFIG_DIR / "settings.json"
DEFAULT_CUSTOM_MAP_PATH = CONFIG_DIR / "custom_map.json"


@dataclass
class MorseKeyConfig:
    """Configuration for the decoding pipeline and its command line front end."""

    # Speed
    wpm: int = DEFAULT_WPM

    # Input
    key: str = "space"  # Designated key, pynput name or single character
    bounce_ms: float = 50.0  # Shorter presses are contact bounce
    settle_ms: float = 50.0  # Delay before the next press is accepted

    # Lookup policy
    custom_lookup_enabled: bool = True
    represent_unknown_enabled: bool = True
    custom_map_path: str = str(DEFAULT_CUSTOM_MAP_PATH)

    # Sidetone
    audio: bool = False
    sidetone_hz: int = 800

    @property
    def dot_duration_ms(self) -> float:
        """Dot unit in milliseconds for the configured speed."""
        return dot_duration_ms(self.wpm)

    def set_wpm(self, wpm: int) -> None:
        """
        Set operating speed in WPM.

        Args:
            wpm: Words per minute, a positive integer
        """
        dot_duration_ms(wpm)
        self.wpm = wpm


def load_config(path: Union[str, Path, None] = None) -> MorseKeyConfig:
    """
    Load settings from a JSON file.

    Missing files give the defaults, and unknown keys are ignored.

    Args:
        path: Settings file, ~/.morsekey/settings.json if None

    Returns:
        Loaded configuration

    Raises:
        MorseKeyError: If the file cannot be parsed
    """
    path = Path(path or DEFAULT_CONFIG_PATH).expanduser()
    if not path.exists():
        return MorseKeyConfig()

    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        raise MorseKeyError(f"Cannot read settings from {path}: {e}") from e
    if not isinstance(raw, dict):
        raise MorseKeyError(f"Settings file {path} must contain a JSON object")

    known = {f.name for f in fields(MorseKeyConfig)}
    ignored = sorted(set(raw) - known)
    if ignored:
        logger.warning(f"Ignoring unknown settings in {path}: {', '.join(ignored)}")

    config = MorseKeyConfig(**{k: v for k, v in raw.items() if k in known})
    config.set_wpm(config.wpm)
    return config


def save_config(config: MorseKeyConfig, path: Optional[Union[str, Path]] = None) -> Path:
    """
    Write settings to a JSON file.

    Args:
        config: Configuration to save
        path: Settings file, ~/.morsekey/settings.json if None

    Returns:
        Path that was written
    """
    path = Path(path or DEFAULT_CONFIG_PATH).expanduser()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(asdict(config), indent=2), encoding="utf-8")
    return path
