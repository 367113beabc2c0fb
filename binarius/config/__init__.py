"""Configuration file handling for Binarius."""

from .parser import (
    PathConfig,
    UserConfig,
    default_config,
    load_config,
    save_config,
)

__all__ = [
    "PathConfig",
    "UserConfig",
    "default_config",
    "load_config",
    "save_config",
]
