"""
Tool version management for Binarius.

This module provides functionality for:
- Activation link management
- Installing, activating and uninstalling tool versions
"""

from binarius.toolchain.linking import ActivationLinkManager
from binarius.toolchain.installer import (
    InstallResult,
    ToolInstaller,
    UninstallResult,
)

__all__ = [
    "ActivationLinkManager",
    "InstallResult",
    "ToolInstaller",
    "UninstallResult",
]
