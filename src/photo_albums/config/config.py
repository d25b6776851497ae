"""Configuration manager for Photo Albums."""

from __future__ import annotations

import copy
from pathlib import Path
from typing import Any

import yaml


DEFAULT_CONFIG: dict[str, Any] = {
    "storage": {
        "data_dir": "data",
        "users_dir": "users",
        "admin_file": "admin.yaml",
        "user_file_suffix": ".yaml",
    },
    "stock": {
        "album_name": "stock",
        "photos_dir": None,
    },
    "file_scanning": {
        "supported_formats": ["bmp", "gif", "jpeg", "jpg", "png"],
        "ignore_hidden_files": True,
        "verify_images": False,
    },
    "logging": {
        "level": "INFO",
        "log_to_file": False,
        "log_file": "photo_albums.log",
    },
}


def _deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge override into base, returning a new dict."""
    result = copy.deepcopy(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = copy.deepcopy(value)
    return result


def get_data_config_path(data_dir: str | Path) -> Path:
    """Return <data_dir>/config.yaml for a library directory."""
    return Path(data_dir) / "config.yaml"


class ConfigManager:
    """Load and access YAML configuration with defaults."""

    def __init__(self, config_path: str | Path | None = None):
        self._path = Path(config_path) if config_path else None
        self._config: dict[str, Any] = copy.deepcopy(DEFAULT_CONFIG)
        if self._path and self._path.exists():
            self.load()

    @property
    def config(self) -> dict[str, Any]:
        return self._config

    def load(self, config_path: str | Path | None = None) -> None:
        """Load config from YAML file, merging with defaults."""
        path = Path(config_path) if config_path else self._path
        if path is None:
            raise ValueError("No config path specified")
        self._path = path
        with open(path, "r", encoding="utf-8") as f:
            user_config = yaml.safe_load(f) or {}
        self._config = _deep_merge(DEFAULT_CONFIG, user_config)

    def get(self, dotted_key: str, default: Any = None) -> Any:
        """Get a config value using dotted notation (e.g. 'stock.album_name')."""
        keys = dotted_key.split(".")
        value = self._config
        for key in keys:
            if isinstance(value, dict) and key in value:
                value = value[key]
            else:
                return default
        return value

    def set(self, dotted_key: str, value: Any) -> None:
        """Set a config value using dotted notation."""
        keys = dotted_key.split(".")
        target = self._config
        for key in keys[:-1]:
            if key not in target or not isinstance(target[key], dict):
                target[key] = {}
            target = target[key]
        target[keys[-1]] = value

    def load_layered(
        self,
        data_config_path: str | Path | None = None,
        cli_config_path: str | Path | None = None,
    ) -> None:
        """Load config with layered priority: DEFAULT <- library config <- cli config.

        Missing files are skipped; nothing is created on disk.
        """
        self._config = copy.deepcopy(DEFAULT_CONFIG)
        for layer in (data_config_path, cli_config_path):
            if not layer:
                continue
            layer = Path(layer)
            if layer.exists():
                with open(layer, "r", encoding="utf-8") as f:
                    layer_config = yaml.safe_load(f) or {}
                self._config = _deep_merge(self._config, layer_config)
                self._path = layer

