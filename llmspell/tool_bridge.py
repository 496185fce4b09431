"""Exposes tool registration, execution and validation to scripts."""

from __future__ import annotations

import json
import threading
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, Protocol

from llmspell.tool_adapter import Tool


class ToolRegistry(Protocol):
    """A store of tools by name."""

    def register(self, tool: Tool) -> None:
        """Add a tool."""

    def get(self, name: str) -> Tool:
        """Return a tool; raise ``LookupError`` if unknown."""

    def list(self) -> list[Tool]:
        """All stored tools."""

    def remove(self, name: str) -> None:
        """Forget a tool; raise ``LookupError`` if unknown."""


@dataclass
class _FunctionTool:
    name: str
    description: str
    parameters: str
    fn: Callable[[dict[str, Any]], Any]

    def execute(self, params: dict[str, Any]) -> Any:
        return self.fn(params)


class _ToolTable:
    def __init__(self) -> None:
        self._tools: dict[str, Tool] = {}
        self._lock = threading.Lock()

    def register(self, tool: Tool) -> None:
        with self._lock:
            if tool.name in self._tools:
                raise ValueError(f"tool {tool.name} already registered")
            self._tools[tool.name] = tool

    def get(self, name: str) -> Tool:
        with self._lock:
            try:
                return self._tools[name]
            except KeyError:
                raise LookupError(f"tool {name} not found") from None

    def list(self) -> list[Tool]:
        with self._lock:
            return list(self._tools.values())

    def remove(self, name: str) -> None:
        with self._lock:
            if name not in self._tools:
                raise LookupError(f"tool {name} not found")
            del self._tools[name]


_shared_registry = _ToolTable()


def validate_type(value: Any, expected_type: str) -> None:
    """Raise ``TypeError`` if ``value`` does not match a JSON schema type name."""
    actual = type(value).__name__
    if expected_type == "string":
        if not isinstance(value, str):
            raise TypeError(f"expected string, got {actual}")
    elif expected_type == "number":
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise TypeError(f"expected number, got {actual}")
    elif expected_type == "boolean":
        if not isinstance(value, bool):
            raise TypeError(f"expected boolean, got {actual}")
    elif expected_type == "object":
        if not isinstance(value, Mapping):
            raise TypeError(f"expected object, got {actual}")
    elif expected_type == "array":
        if not isinstance(value, (list, tuple)):
            raise TypeError(f"expected array, got {actual}")


def _decoded_parameters(tool: Tool) -> Any:
    raw = tool.parameters
    try:
        return json.loads(raw)
    except (TypeError, ValueError):
        if isinstance(raw, (bytes, bytearray)):
            return bytes(raw).decode("utf-8", errors="replace")
        return str(raw)


def _describe(tool: Tool) -> dict[str, Any]:
    return {
        "name": tool.name,
        "description": tool.description,
        "parameters": _decoded_parameters(tool),
    }


class ToolBridge:
    """Script-facing access to a tool registry.

    Without a registry, a registry shared by all such bridges is used.
    """

    def __init__(self, registry: ToolRegistry | None = None) -> None:
        self.registry: ToolRegistry = registry if registry is not None else _shared_registry

    def register_tool(
        self,
        name: str,
        description: str,
        parameters: Mapping[str, Any],
        fn: Callable[[dict[str, Any]], Any],
    ) -> None:
        """Register a script function as a tool with a JSON parameter schema."""
        try:
            params_json = json.dumps(parameters)
        except (TypeError, ValueError) as exc:
            raise TypeError(f"failed to marshal parameters: {exc}") from exc
        self.registry.register(_FunctionTool(name, description, params_json, fn))

    def execute_tool(self, name: str, params: dict[str, Any]) -> Any:
        """Run a tool by name."""
        return self.registry.get(name).execute(params)

    def get_tool(self, name: str) -> dict[str, Any]:
        """Name, description and parameter schema of a tool."""
        return _describe(self.registry.get(name))

    def list_tools(self) -> list[dict[str, Any]]:
        """Name, description and parameter schema of every tool."""
        return [_describe(tool) for tool in self.registry.list()]

    def remove_tool(self, name: str) -> None:
        """Unregister a tool."""
        self.registry.remove(name)

    def validate_parameters(self, name: str, params: Mapping[str, Any]) -> None:
        """Check required parameters and declared types against the tool's schema.

        Raises ``ValueError`` for a missing parameter or unreadable schema and
        ``TypeError`` for a parameter of the wrong type.
        """
        tool = self.registry.get(name)
        schema = tool.parameters
        if not schema:
            return
        try:
            schema_map = json.loads(schema)
        except (TypeError, ValueError) as exc:
            raise ValueError(f"failed to parse parameter schema: {exc}") from exc
        if schema_map is None:
            return
        if not isinstance(schema_map, dict):
            raise ValueError("failed to parse parameter schema: not an object")

        properties = schema_map.get("properties")
        if not isinstance(properties, dict):
            return
        required = schema_map.get("required")
        if isinstance(required, list):
            for req in required:
                if isinstance(req, str) and req not in params:
                    raise ValueError(f"missing required parameter: {req}")

        for param_name, param_value in params.items():
            definition = properties.get(param_name)
            if not isinstance(definition, dict):
                continue
            prop_type = definition.get("type")
            if isinstance(prop_type, str):
                try:
                    validate_type(param_value, prop_type)
                except TypeError as exc:
                    raise TypeError(f"parameter {param_name}: {exc}") from exc