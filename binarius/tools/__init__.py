"""
Tool adapters for Binarius.

Each supported tool (terraform, tofu, terragrunt) is described by a Tool
subclass that knows its download URLs, packaging and version index.
"""

from .base import Tool, GitHubReleasesTool, sort_versions
from .registry import ToolRegistry, default_tool_registry
from .terraform import Terraform
from .terragrunt import Terragrunt
from .tofu import OpenTofu

__all__ = [
    "Tool",
    "GitHubReleasesTool",
    "sort_versions",
    "ToolRegistry",
    "default_tool_registry",
    "Terraform",
    "OpenTofu",
    "Terragrunt",
]
