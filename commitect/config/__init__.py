"""Configuration Management Package

Looks for config in multiple places (in order):

1. .commitectrc in current directory (project-specific)
2. .commitectrc in home directory (global default)
3. Built-in defaults

Config format (JSON):
{
    "api_url": "https://localhost:5001/api/Commit/analyze",
    "timeout": 30000,
    "allow_insecure_ssl": true
}
"""

import json
import sys
from dataclasses import dataclass, asdict, replace
from pathlib import Path
from typing import Optional

DEFAULT_API_URL = "http://commitintentdetector.runasp.net/api/Commit/analyze"
DEFAULT_MAX_DIFF_SIZE = 5 * 1024 * 1024


@dataclass
class Config:
    """User configuration with sensible defaults. Times are milliseconds."""
    api_url: str = DEFAULT_API_URL
    timeout: int = 30000
    enabled: bool = True
    debounce_delay: int = 1000
    show_status_bar: bool = True
    allow_insecure_ssl: bool = False
    max_diff_size: int = DEFAULT_MAX_DIFF_SIZE

    def to_dict(self) -> dict:
        return {k: v for k, v in asdict(self).items() if v is not None}

    def snapshot(self) -> 'Config':
        """Independent copy handed to one pipeline run."""
        return replace(self)

    def validate(self) -> list[str]:
        """Validate config values and return list of warnings.

        Invalid values are replaced with defaults after warning.
        """
        warnings = []
        defaults = Config()

        if not isinstance(self.api_url, str) or not self.api_url.lower().startswith(('http://', 'https://')):
            warnings.append(f"Invalid api_url '{self.api_url}', using '{defaults.api_url}'")
            self.api_url = defaults.api_url

        if not _is_int(self.timeout) or self.timeout <= 0:
            warnings.append(f"Invalid timeout '{self.timeout}', using {defaults.timeout}")
            self.timeout = defaults.timeout

        if not _is_int(self.debounce_delay) or self.debounce_delay < 0:
            warnings.append(f"Invalid debounce_delay '{self.debounce_delay}', using {defaults.debounce_delay}")
            self.debounce_delay = defaults.debounce_delay

        if not _is_int(self.max_diff_size) or self.max_diff_size <= 0:
            warnings.append(f"Invalid max_diff_size '{self.max_diff_size}', using {defaults.max_diff_size}")
            self.max_diff_size = defaults.max_diff_size

        for name in ('enabled', 'show_status_bar', 'allow_insecure_ssl'):
            value = getattr(self, name)
            if not isinstance(value, bool):
                warnings.append(f"Invalid {name} '{value}', using {str(getattr(defaults, name)).lower()}")
                setattr(self, name, getattr(defaults, name))

        return warnings

    @classmethod
    def from_dict(cls, data: dict) -> 'Config':
        valid_keys = {f.name for f in cls.__dataclass_fields__.values()}
        filtered = {k: v for k, v in data.items() if k in valid_keys}
        config = cls(**filtered)
        for warning in config.validate():
            print(f"Config warning: {warning}", file=sys.stderr)
        return config


def _is_int(value) -> bool:
    # bool is an int subclass; "true" is not a timeout
    return isinstance(value, int) and not isinstance(value, bool)


class ConfigManager:
    """Manages loading and saving configuration."""

    CONFIG_FILENAME = ".commitectrc"

    def __init__(self):
        self._config: Optional[Config] = None
        self._config_path: Optional[Path] = None

    def load(self) -> Config:
        if self._config is not None:
            return self._config

        local_path = Path.cwd() / self.CONFIG_FILENAME
        if local_path.exists():
            self._config = self._load_from_file(local_path)
            self._config_path = local_path
            return self._config

        home_path = Path.home() / self.CONFIG_FILENAME
        if home_path.exists():
            self._config = self._load_from_file(home_path)
            self._config_path = home_path
            return self._config

        self._config = Config()
        return self._config

    def reload(self) -> Config:
        """Drop the cached config and read it again."""
        self._config = None
        self._config_path = None
        return self.load()

    def _load_from_file(self, path: Path) -> Config:
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (json.JSONDecodeError, IOError) as e:
            print(f"Warning: Could not load {path}: {e}", file=sys.stderr)
            return Config()
        if not isinstance(data, dict):
            print(f"Warning: Could not load {path}: expected a JSON object", file=sys.stderr)
            return Config()
        return Config.from_dict(data)

    def save(self, config: Config, global_config: bool = True) -> Path:
        path = Path.home() / self.CONFIG_FILENAME if global_config else Path.cwd() / self.CONFIG_FILENAME
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(config.to_dict(), f, indent=2)
        return path

    def get_config_path(self) -> Optional[Path]:
        return self._config_path


_manager = ConfigManager()


def load_config() -> Config:
    return _manager.load()


def reload_config() -> Config:
    return _manager.reload()


def save_config(config: Config, global_config: bool = True) -> Path:
    return _manager.save(config, global_config)


def get_config_path() -> Optional[Path]:
    return _manager.get_config_path()


__all__ = [
    "Config",
    "ConfigManager",
    "load_config",
    "reload_config",
    "save_config",
    "get_config_path",
    "DEFAULT_API_URL",
    "DEFAULT_MAX_DIFF_SIZE",
]
