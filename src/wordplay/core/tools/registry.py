"""
Tool Registry

Fixed catalog of named tools. Populated once at startup and read-only
afterwards.
"""

from __future__ import annotations

from typing import Any

from wordplay.core.domain.errors import DuplicateToolError, UnknownToolError
from wordplay.core.tools.base import ParamSpec, Tool


class ToolRegistry:
    def __init__(self, tools: list[Tool] | None = None):
        self._tools: dict[str, Tool] = {}
        for tool in tools or []:
            self.register(tool)

    def register(self, tool: Tool) -> None:
        if tool.name in self._tools:
            raise DuplicateToolError(tool.name)
        self._tools[tool.name] = tool

    def get(self, name: str) -> Tool:
        try:
            return self._tools[name]
        except KeyError:
            raise UnknownToolError(name) from None

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)

    def names(self) -> list[str]:
        return list(self._tools)

    def list(self) -> list[tuple[str, str, dict[str, ParamSpec]]]:
        return [(t.name, t.description, t.parameters) for t in self._tools.values()]

    def describe(self) -> list[dict[str, Any]]:
        """Render the catalog for prompts and listings."""
        return [
            {
                "name": tool.name,
                "description": tool.description,
                "parameters": tool.parameters_schema,
            }
            for tool in self._tools.values()
        ]
