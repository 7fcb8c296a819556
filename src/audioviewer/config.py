"""
Configuration loading and validation for the audioviewer package.

Loads an optional YAML configuration file on top of sensible defaults and
supports environment variable overrides for deployment settings.
"""

import copy
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from audioviewer.schemas import LOGICAL_FIELDS


DEFAULT_VIEWER_CONFIG = {
    "pagination": {
        "default_page_size": 10,
        "max_page_size": 100,
    },
    "display": {
        "preview_length": 120,
        "ellipsis": "…",
    },
    "columns": {
        "audio": "audio",
        "duration": "duration",
        "transcript": "transcription",
    },
    "server": {
        "host": "0.0.0.0",
        "port": 3000,
    },
    "audio": {
        "chunk_size": 65536,
    },
}

# Environment variable -> (section, key, converter)
ENV_OVERRIDES = {
    "AUDIOVIEWER_HOST": ("server", "host", str),
    "AUDIOVIEWER_PORT": ("server", "port", int),
    "AUDIOVIEWER_MAX_PAGE_SIZE": ("pagination", "max_page_size", int),
}


def deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """
    Deep merge two dictionaries, with override taking precedence.

    Args:
        base: Base dictionary
        override: Override dictionary (takes precedence)

    Returns:
        Merged dictionary
    """
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def load_yaml_file(file_path: Path) -> Dict[str, Any]:
    """
    Load a YAML file and return its contents as a dictionary.

    Args:
        file_path: Path to YAML file

    Returns:
        Dictionary with YAML contents

    Raises:
        FileNotFoundError: If file doesn't exist
        yaml.YAMLError: If file is not valid YAML
    """
    if not file_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {file_path}")

    with open(file_path, "r", encoding="utf-8") as f:
        config = yaml.safe_load(f)

    return config if config is not None else {}


def apply_env_overrides(config: Dict[str, Any]) -> Dict[str, Any]:
    """Apply AUDIOVIEWER_* environment variables onto a config dictionary."""
    for env_name, (section, key, convert) in ENV_OVERRIDES.items():
        raw = os.environ.get(env_name)
        if raw:
            try:
                config[section][key] = convert(raw)
            except ValueError as e:
                raise ValueError(f"Invalid value for {env_name}: {raw!r}") from e
    return config


def _is_positive_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def check_sections(config: Dict[str, Any]) -> None:
    """Every top-level section must stay a mapping after merging."""
    for section in DEFAULT_VIEWER_CONFIG:
        if not isinstance(config.get(section), dict):
            raise ValueError(f"{section} must be a mapping, got {config.get(section)!r}")


def validate_config(config: Dict[str, Any]) -> None:
    """
    Check the settings that the loader, query engine, and projector rely on.

    Raises:
        ValueError: If a size is not a positive integer, the default page
            size exceeds the maximum, a section is not a mapping, or a
            column name is empty
    """
    check_sections(config)

    pagination = config["pagination"]
    for key in ("default_page_size", "max_page_size"):
        value = pagination[key]
        if not _is_positive_int(value):
            raise ValueError(f"pagination.{key} must be a positive integer, got {value!r}")

    if pagination["default_page_size"] > pagination["max_page_size"]:
        raise ValueError(
            f"pagination.default_page_size ({pagination['default_page_size']}) "
            f"exceeds pagination.max_page_size ({pagination['max_page_size']})"
        )

    preview_length = config["display"]["preview_length"]
    if not _is_positive_int(preview_length):
        raise ValueError(f"display.preview_length must be a positive integer, got {preview_length!r}")

    chunk_size = config["audio"]["chunk_size"]
    if not _is_positive_int(chunk_size):
        raise ValueError(f"audio.chunk_size must be a positive integer, got {chunk_size!r}")

    columns = config["columns"]
    for field in LOGICAL_FIELDS:
        name = columns.get(field)
        if not isinstance(name, str) or not name:
            raise ValueError(f"columns.{field} must be a non-empty column name, got {name!r}")


def load_config(config_file: Optional[Union[str, Path]] = None) -> Dict[str, Any]:
    """
    Load configuration from an optional YAML file on top of the defaults.

    Without a file the defaults are used as-is. Environment overrides are
    applied last.

    Args:
        config_file: Optional path to a YAML config file

    Returns:
        Configuration dictionary

    Raises:
        FileNotFoundError: If config_file is given but does not exist
        ValueError: If a setting is invalid

    Example:
        >>> config = load_config(Path("config/viewer.yaml"))
        >>> config["pagination"]["max_page_size"]
        100
    """
    config = copy.deepcopy(DEFAULT_VIEWER_CONFIG)

    if config_file is not None:
        user_config = load_yaml_file(Path(config_file))
        if not isinstance(user_config, dict):
            raise ValueError(f"Configuration file {config_file} must contain a mapping")
        config = deep_merge(config, user_config)
        check_sections(config)

    config = apply_env_overrides(config)
    validate_config(config)

    return config


class Config:
    """
    Configuration manager for the viewer.

    Provides section accessors over the merged configuration dictionary.
    """

    def __init__(self, config_file: Optional[Union[str, Path]] = None, values: Optional[Dict[str, Any]] = None):
        """
        Initialize configuration manager.

        Args:
            config_file: Optional YAML file to load
            values: Explicit overrides merged on top of the loaded config
        """
        self.config_file = Path(config_file) if config_file else None
        data = load_config(self.config_file)
        if values:
            data = deep_merge(data, values)
            validate_config(data)
        self._data = data

    @property
    def pagination(self) -> Dict[str, Any]:
        return self._data["pagination"]

    @property
    def display(self) -> Dict[str, Any]:
        return self._data["display"]

    @property
    def columns(self) -> Dict[str, str]:
        return self._data["columns"]

    @property
    def server(self) -> Dict[str, Any]:
        return self._data["server"]

    @property
    def audio(self) -> Dict[str, Any]:
        return self._data["audio"]

    @property
    def default_page_size(self) -> int:
        return self.pagination["default_page_size"]

    @property
    def max_page_size(self) -> int:
        return self.pagination["max_page_size"]

    @property
    def preview_length(self) -> int:
        return self.display["preview_length"]

    def get(self, *keys: str, default: Any = None) -> Any:
        """
        Get a nested configuration value by key path.

        Args:
            *keys: Keys to traverse (e.g., "pagination", "max_page_size")
            default: Default value if key path not found

        Returns:
            Configuration value or default

        Example:
            >>> Config().get("display", "preview_length")
            120
        """
        value: Any = self._data
        for key in keys:
            if isinstance(value, dict) and key in value:
                value = value[key]
            else:
                return default
        return value

    def to_dict(self) -> Dict[str, Any]:
        return copy.deepcopy(self._data)
