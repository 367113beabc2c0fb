"""
Tool registry for looking up tool adapters by name.

The registry is an explicit object handed to the installer and the CLI
rather than a module-level global. Registration is exclusive; lookups may
run concurrently with each other and wait only for an in-progress
registration.
"""

import threading
from contextlib import contextmanager
from typing import Dict, List

from ..core.exceptions import ToolAlreadyRegisteredError, ToolNotRegisteredError
from .base import Tool
from .terraform import Terraform
from .terragrunt import Terragrunt
from .tofu import OpenTofu


class _ReadWriteLock:
    """Many readers or one writer."""

    def __init__(self):
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False

    @contextmanager
    def read(self):
        with self._cond:
            while self._writer:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @contextmanager
    def write(self):
        with self._cond:
            while self._writer or self._readers:
                self._cond.wait()
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()


class ToolRegistry:
    """
    Registry of tool adapters keyed by tool name.

    Example:
        registry = ToolRegistry()
        registry.register("terraform", Terraform())
        tool = registry.get("terraform")
    """

    def __init__(self):
        """Initialize empty registry."""
        self._tools: Dict[str, Tool] = {}
        self._lock = _ReadWriteLock()

    def register(self, name: str, tool: Tool) -> None:
        """
        Register a tool adapter.

        Args:
            name: Tool name; must equal tool.name
            tool: Tool adapter instance

        Raises:
            ToolAlreadyRegisteredError: If the name is taken
            ValueError: If name does not match tool.name
        """
        if tool.name != name:
            raise ValueError(
                f"tool name mismatch: registration name {name!r} != tool.name {tool.name!r}"
            )

        with self._lock.write():
            if name in self._tools:
                raise ToolAlreadyRegisteredError(
                    f"Tool '{name}' is already registered",
                    f"tool {name!r} is already registered",
                )
            self._tools[name] = tool

    def get(self, name: str) -> Tool:
        """
        Get registered tool by name.

        Raises:
            ToolNotRegisteredError: If tool not found
        """
        with self._lock.read():
            tool = self._tools.get(name)
            if tool is None:
                raise ToolNotRegisteredError(name, available=list(self._tools))
            return tool

    def list_tools(self) -> List[str]:
        """Registered tool names, sorted."""
        with self._lock.read():
            return sorted(self._tools)

    def __len__(self) -> int:
        with self._lock.read():
            return len(self._tools)


def default_tool_registry() -> ToolRegistry:
    """Build a registry holding the built-in terraform, tofu and terragrunt adapters."""
    registry = ToolRegistry()
    for tool in (Terraform(), OpenTofu(), Terragrunt()):
        registry.register(tool.name, tool)
    return registry
