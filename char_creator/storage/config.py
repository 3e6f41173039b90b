"""Persisted UI settings (theme, disclaimer, error display duration)."""

from __future__ import annotations

from typing import Any

from .core import CONFIG_KEY, StorageBackend, read_dict

_CONFIG_DEFAULTS: dict[str, Any] = {
    "dark_mode": False,
    "disclaimer_acknowledged": False,
    "error_display_seconds": 5,
}


def get_config(backend: StorageBackend) -> dict[str, Any]:
    """Read config, returning defaults merged with stored values."""
    config = dict(_CONFIG_DEFAULTS)
    stored = read_dict(backend, CONFIG_KEY)
    for key in _CONFIG_DEFAULTS:
        if key in stored:
            config[key] = stored[key]
    return config


def update_config(backend: StorageBackend, fields: dict[str, Any]) -> dict[str, Any]:
    """Merge known fields into config and persist. Returns full config."""
    config = get_config(backend)
    for key, value in fields.items():
        if key in _CONFIG_DEFAULTS:
            config[key] = value
    backend.write(CONFIG_KEY, config)
    return config
