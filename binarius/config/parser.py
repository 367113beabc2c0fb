"""YAML configuration for Binarius.

This module loads and saves config.yaml, which records the default
(active) version of each tool and the directories Binarius was initialized
with.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Union
import logging

import yaml

from binarius.core.directory import get_bin_dir, get_binarius_home, get_cache_dir
from binarius.core.exceptions import ConfigError
from binarius.core.filesystem import atomic_write

logger = logging.getLogger(__name__)


@dataclass
class PathConfig:
    """Directory paths recorded in config.yaml."""

    binarius_home: str = ""
    bin_dir: str = ""
    cache_dir: str = ""


@dataclass
class UserConfig:
    """Complete Binarius configuration."""

    defaults: Dict[str, str] = field(default_factory=dict)
    paths: PathConfig = field(default_factory=PathConfig)

    def set_default(self, tool_name: str, version: str) -> None:
        """Set the default version of a tool; an empty version removes it."""
        if version:
            self.defaults[tool_name] = version
        else:
            self.defaults.pop(tool_name, None)

    def get_default(self, tool_name: str) -> Optional[str]:
        """Default version of a tool, or None."""
        return self.defaults.get(tool_name)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "defaults": dict(self.defaults),
            "paths": {
                "binarius_home": self.paths.binarius_home,
                "bin_dir": self.paths.bin_dir,
                "cache_dir": self.paths.cache_dir,
            },
        }


def default_config(home: Optional[Path] = None) -> UserConfig:
    """
    Build the configuration written by 'binarius init'.

    Args:
        home: Binarius home (default: resolved from environment)
    """
    home = home or get_binarius_home()
    return UserConfig(
        paths=PathConfig(
            binarius_home=str(home),
            bin_dir=str(get_bin_dir()),
            cache_dir=str(get_cache_dir(home)),
        )
    )


def load_config(config_path: Union[str, Path]) -> UserConfig:
    """
    Parse config.yaml.

    Args:
        config_path: Path to config.yaml

    Returns:
        Parsed configuration, or defaults if the file doesn't exist

    Raises:
        ConfigError: If the file can't be read or has the wrong shape
    """
    config_path = Path(config_path)

    if not config_path.exists():
        logger.debug(f"Config file not found, using defaults: {config_path}")
        return default_config(config_path.parent)

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(
            "Failed to load configuration",
            f"failed to parse config file {config_path}: {e}",
        ) from e
    except OSError as e:
        raise ConfigError(
            "Failed to load configuration",
            f"failed to read config file {config_path}: {e}",
        ) from e

    return _parse_config(data or {}, config_path)


def _parse_config(data: Any, config_path: Path) -> UserConfig:
    if not isinstance(data, dict):
        raise ConfigError(
            "Failed to load configuration",
            f"{config_path} must contain a YAML mapping",
        )

    defaults = data.get("defaults") or {}
    if not isinstance(defaults, dict):
        raise ConfigError(
            "Failed to load configuration",
            f"'defaults' in {config_path} must be a mapping of tool to version",
        )

    paths = data.get("paths") or {}
    if not isinstance(paths, dict):
        raise ConfigError(
            "Failed to load configuration",
            f"'paths' in {config_path} must be a mapping",
        )

    return UserConfig(
        defaults={str(k): str(v) for k, v in defaults.items() if v},
        paths=PathConfig(
            binarius_home=str(paths.get("binarius_home") or ""),
            bin_dir=str(paths.get("bin_dir") or ""),
            cache_dir=str(paths.get("cache_dir") or ""),
        ),
    )


def save_config(config: UserConfig, config_path: Union[str, Path]) -> None:
    """
    Write config.yaml atomically.

    Raises:
        ConfigError: If the file can't be written
    """
    config_path = Path(config_path)
    content = yaml.safe_dump(config.to_dict(), default_flow_style=False, sort_keys=False)

    try:
        atomic_write(config_path, content)
    except OSError as e:
        raise ConfigError(
            "Failed to save configuration",
            f"failed to write config file {config_path}: {e}",
            "Ensure the Binarius home directory is writable",
        ) from e

    logger.debug(f"Saved config to {config_path}")
