"""
Configuration

YAML-backed settings with dotted-key lookup, e.g.
``config.get("notifications.grace_minutes", 5)``.
"""

import os
from pathlib import Path
from typing import Any, Optional

import yaml


DEFAULT_CONFIG_NAME = "config.yaml"
CONFIG_ENV_VAR = "LEAVETIME_CONFIG"


class Config:
    """Read-only view over a nested settings mapping."""

    def __init__(self, data: Optional[dict] = None, path: Optional[Path] = None):
        self._data = data or {}
        self.path = path

    def get(self, key: str, default: Any = None) -> Any:
        """Look up a dotted key, returning default if any segment is missing."""
        node = self._data
        for part in key.split("."):
            if not isinstance(node, dict) or part not in node:
                return default
            node = node[part]
        return node

    def __repr__(self):
        return f"Config(path={str(self.path) if self.path else None!r})"


def load_config(path=None) -> Config:
    """Load settings from ``path``, $LEAVETIME_CONFIG, or ./config.yaml.

    A missing file yields an empty Config so every caller falls back to its
    defaults. A file that is not a YAML mapping raises ValueError.
    """
    candidate = path or os.environ.get(CONFIG_ENV_VAR) or DEFAULT_CONFIG_NAME
    config_path = Path(candidate).expanduser()
    if not config_path.is_file():
        return Config({}, None)

    with open(config_path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file {config_path} must contain a mapping")
    return Config(data, config_path)
