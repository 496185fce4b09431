from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import pytest

from llmspell.tool_bridge import ToolBridge, validate_type


class DictRegistry:
    def __init__(self):
        self.tools = {}

    def register(self, tool):
        if tool.name in self.tools:
            raise ValueError(f"tool {tool.name} already registered")
        self.tools[tool.name] = tool

    def get(self, name):
        try:
            return self.tools[name]
        except KeyError:
            raise LookupError(f"tool {name} not found") from None

    def list(self):
        return list(self.tools.values())

    def remove(self, name):
        if name not in self.tools:
            raise LookupError(f"tool {name} not found")
        del self.tools[name]


@dataclass
class RawTool:
    name: str
    description: str
    parameters: Any

    def execute(self, params):
        return params


def _add(params):
    x, y = params.get("x"), params.get("y")
    if not isinstance(x, float) or not isinstance(y, float):
        raise ValueError("invalid parameters")
    return x + y


ADD_SCHEMA = {
    "type": "object",
    "properties": {"x": {"type": "number"}, "y": {"type": "number"}},
    "required": ["x", "y"],
}

USER_SCHEMA = {
    "type": "object",
    "properties": {
        "name": {"type": "string"},
        "age": {"type": "number"},
        "active": {"type": "boolean"},
    },
    "required": ["name", "age"],
}


@pytest.fixture
def bridge():
    return ToolBridge(DictRegistry())


def test_basic_operations(bridge):
    bridge.register_tool("add", "Adds two numbers", ADD_SCHEMA, _add)

    assert bridge.execute_tool("add", {"x": 5.0, "y": 3.0}) == 8.0

    info = bridge.get_tool("add")
    assert info["name"] == "add"
    assert info["description"] == "Adds two numbers"
    assert info["parameters"] == ADD_SCHEMA

    tools = bridge.list_tools()
    assert len(tools) == 1
    assert tools[0]["name"] == "add"

    bridge.remove_tool("add")
    with pytest.raises(LookupError):
        bridge.get_tool("add")


def test_tool_error_propagates(bridge):
    bridge.register_tool("add", "Adds two numbers", ADD_SCHEMA, _add)
    with pytest.raises(ValueError, match="invalid parameters"):
        bridge.execute_tool("add", {"x": "5", "y": 3.0})


def test_parameter_validation(bridge):
    bridge.register_tool("user_info", "Process user information", USER_SCHEMA, lambda p: "processed")

    bridge.validate_parameters("user_info", {"name": "Alice", "age": 30.0, "active": True})

    with pytest.raises(ValueError, match="missing required parameter: age"):
        bridge.validate_parameters("user_info", {"name": "Bob"})

    with pytest.raises(TypeError, match="parameter age: expected number"):
        bridge.validate_parameters("user_info", {"name": "Charlie", "age": "thirty"})


def test_unparsable_schema(bridge):
    bridge.registry.register(RawTool("broken", "Broken schema", "not json"))
    with pytest.raises(ValueError, match="failed to parse parameter schema"):
        bridge.validate_parameters("broken", {})
    assert bridge.get_tool("broken")["parameters"] == "not json"


def test_unserializable_parameters(bridge):
    with pytest.raises(TypeError, match="failed to marshal parameters"):
        bridge.register_tool("bad", "Bad schema", {"x": object()}, lambda p: None)


def test_error_handling(bridge):
    with pytest.raises(LookupError):
        bridge.execute_tool("nonexistent", {})
    with pytest.raises(LookupError):
        bridge.get_tool("nonexistent")
    with pytest.raises(LookupError):
        bridge.remove_tool("nonexistent")
    with pytest.raises(LookupError):
        bridge.validate_parameters("nonexistent", {})


def test_default_registry_is_shared():
    first = ToolBridge()
    second = ToolBridge(None)
    assert first.registry is second.registry

    first.register_tool("shared_echo_tool", "Echo", {"type": "object"}, lambda p: p["v"])
    try:
        assert second.execute_tool("shared_echo_tool", {"v": "hi"}) == "hi"
        with pytest.raises(ValueError, match="already registered"):
            second.register_tool("shared_echo_tool", "Echo", {}, lambda p: None)
    finally:
        first.remove_tool("shared_echo_tool")
    with pytest.raises(LookupError):
        second.get_tool("shared_echo_tool")


@pytest.mark.parametrize(
    "expected_type, good, bad",
    [
        ("string", "hello", 123),
        ("number", 3.14, "123"),
        ("number", 42, True),
        ("boolean", True, 1),
        ("object", {"key": "value"}, ["a", "b"]),
        ("array", [1, 2, 3], "not an array"),
        ("array", ["a", "b", "c"], {"a": 1}),
    ],
)
def test_validate_type(expected_type, good, bad):
    validate_type(good, expected_type)
    with pytest.raises(TypeError, match=f"expected {expected_type}"):
        validate_type(bad, expected_type)