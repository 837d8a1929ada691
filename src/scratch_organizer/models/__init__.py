"""Data models for scratch organizer."""

from .config import (
    DEFAULT_CONFIG,
    DOWN,
    UP,
    ScratchConfig,
    ScratchConfigPersistence,
    load_config,
    save_config,
)

__all__ = [
    "DEFAULT_CONFIG",
    "DOWN",
    "UP",
    "ScratchConfig",
    "ScratchConfigPersistence",
    "load_config",
    "save_config",
]
