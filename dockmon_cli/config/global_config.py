"""
Global configuration for the dockmon CLI.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

import yaml


CONFIG_FILE_NAME = "dockmon-config.yml"
CONFIG_ENV_VAR = "DOCKMON_CONFIG"
COLOR_MODES = ("auto", "always", "never")


class ConfigError(Exception):
    """Exception raised when the configuration is invalid."""
    pass


@dataclass
class GlobalConfig:
    """Global configuration settings."""
    runtime: str = "docker"
    tail: int = 20
    wait_timeout: Optional[float] = 10.0
    color: str = "auto"

    def __post_init__(self):
        if not isinstance(self.runtime, str) or not self.runtime:
            raise ConfigError(f"runtime must be a non-empty string, got {self.runtime!r}")
        if self.tail < 0:
            raise ConfigError(f"tail must be zero or positive, got {self.tail}")
        if self.wait_timeout is not None and self.wait_timeout <= 0:
            raise ConfigError(f"wait_timeout must be positive, got {self.wait_timeout}")
        if self.color not in COLOR_MODES:
            raise ConfigError(f"color must be one of {', '.join(COLOR_MODES)}, got {self.color!r}")


def _parse_timeout(value) -> Optional[float]:
    if value is None or str(value).lower() in ("none", "null", ""):
        return None
    return float(value)


def _find_config_file(path: Optional[Union[str, Path]]) -> Optional[Path]:
    if path is not None:
        config_file = Path(path)
        if not config_file.exists():
            raise ConfigError(f"Config file not found: {config_file}")
        return config_file

    env_path = os.getenv(CONFIG_ENV_VAR)
    if env_path:
        return _find_config_file(env_path)

    config_file = Path(CONFIG_FILE_NAME)
    return config_file if config_file.exists() else None


def load_global_config(path: Optional[Union[str, Path]] = None) -> GlobalConfig:
    """
    Load global configuration from file and environment or use defaults.

    The file is the explicit ``path``, else ``$DOCKMON_CONFIG``, else
    ``dockmon-config.yml`` in the working directory. ``DOCKMON_*``
    environment variables override values from the file.

    Raises:
        ConfigError: If the file cannot be parsed or a value is invalid
    """
    data = {}
    config_file = _find_config_file(path)
    if config_file is not None:
        try:
            with open(config_file, 'r') as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Failed to parse {config_file}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"Expected a mapping in {config_file}")

    try:
        return GlobalConfig(
            runtime=os.getenv("DOCKMON_RUNTIME", data.get("runtime", "docker")),
            tail=int(os.getenv("DOCKMON_TAIL", data.get("tail", 20))),
            wait_timeout=_parse_timeout(os.getenv("DOCKMON_WAIT_TIMEOUT", data.get("wait_timeout", 10.0))),
            color=str(os.getenv("DOCKMON_COLOR", data.get("color", "auto"))).lower()
        )
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid configuration value: {e}") from e
