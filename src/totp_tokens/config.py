"""Persisted default token parameters for the command-line tool."""

import json
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Union

from platformdirs import user_config_dir

from totp_tokens.hotp import Algorithm
from totp_tokens.totp import DEFAULT_ALGORITHM, DEFAULT_DIGITS, DEFAULT_PERIOD


APP_NAME = "totp-tokens"
APP_AUTHOR = "totp-tokens"
CONFIG_FILENAME = "config.json"


@dataclass(frozen=True)
class Settings:
    """Default period, digits and algorithm for generated tokens."""

    period: int = DEFAULT_PERIOD
    digits: int = DEFAULT_DIGITS
    algorithm: Algorithm = DEFAULT_ALGORITHM

    def __post_init__(self) -> None:
        for field_name in ("period", "digits"):
            value = getattr(self, field_name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                raise ValueError(f"{field_name} must be a positive integer, got {value!r}")
        object.__setattr__(self, "algorithm", Algorithm.parse(self.algorithm))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Settings":
        known = {key: data[key] for key in ("period", "digits", "algorithm") if key in data}
        return cls(**known)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["algorithm"] = self.algorithm.value
        return data


def get_config_dir() -> Path:
    """
    Get the cross-platform config directory.

    Returns:
        Path to the config directory.
    """
    return Path(user_config_dir(APP_NAME, APP_AUTHOR))


def get_config_path() -> Path:
    return get_config_dir() / CONFIG_FILENAME


def load_settings(path: Optional[Union[str, Path]] = None) -> Settings:
    """
    Load settings from disk, falling back to defaults.

    Args:
        path: Config file path (default: the per-user config file).

    Returns:
        The stored settings, or defaults if no config file exists.

    Raises:
        ValueError: If the config file is not valid JSON or holds invalid values.
    """
    config_path = Path(path) if path is not None else get_config_path()
    if not config_path.exists():
        return Settings()

    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid config file format: {e}") from e

    if not isinstance(data, dict):
        raise ValueError("Invalid config file format: expected a JSON object")
    return Settings.from_dict(data)


def save_settings(settings: Settings, path: Optional[Union[str, Path]] = None) -> Path:
    """
    Save settings to disk.

    Args:
        settings: Settings to store.
        path: Config file path (default: the per-user config file).

    Returns:
        The path written to.
    """
    config_path = Path(path) if path is not None else get_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)

    # Write atomically using a temporary file
    temp_path = config_path.with_suffix(".tmp")
    temp_path.write_text(json.dumps(settings.to_dict(), indent=2), encoding="utf-8")
    temp_path.replace(config_path)
    return config_path
