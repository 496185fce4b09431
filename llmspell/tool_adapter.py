"""Adapters between llmspell tools and agents and a backend agent runtime."""

from __future__ import annotations

import json
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from typing import Any, Protocol

from llmspell.agent_types import (
    Agent,
    ExecutionOptions,
    ExecutionResult,
    Message,
    StreamCallback,
    assistant_message,
    last_user_message,
    user_message,
)

UNCONVERTIBLE_RESPONSE = "Response could not be converted to string"


class Tool(Protocol):
    """A tool as kept in a tool registry."""

    name: str
    description: str
    parameters: str | bytes

    def execute(self, params: dict[str, Any]) -> Any:
        """Run the tool."""


class ToolSource(Protocol):
    """Anything tools can be looked up in by name."""

    def get(self, name: str) -> Tool:
        """Return the tool called ``name``; raise ``LookupError`` if unknown."""


class BackendAgent(Protocol):
    """Runtime that executes agent requests against an LLM provider."""

    def run(self, text: str) -> Any:
        """Run the agent on ``text`` and return its response."""

    def set_system_prompt(self, prompt: str) -> None:
        """Replace the system prompt."""

    def add_tool(self, tool: ToolAdapter) -> None:
        """Make a tool available to the runtime."""


@dataclass
class SchemaProperty:
    """One property of a parameter schema."""

    type: str = ""
    description: str = ""
    format: str = ""
    pattern: str = ""
    enum: list[str] | None = None
    properties: dict[str, SchemaProperty] | None = None
    items: SchemaProperty | None = None


@dataclass
class Schema:
    """A JSON-schema-like description of a tool's parameters."""

    type: str = ""
    properties: dict[str, SchemaProperty] | None = None
    required: list[str] | None = None
    additional_properties: bool | None = None


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "<nil>"
    if isinstance(value, float) and value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    return str(value)


def _map_properties(props: Mapping[str, Any]) -> dict[str, SchemaProperty]:
    return {
        name: map_to_property(data)
        for name, data in props.items()
        if isinstance(data, Mapping)
    }


def map_to_schema(mapping: Mapping[str, Any]) -> Schema:
    """Build a ``Schema`` from a decoded JSON schema, ignoring ill-typed fields."""
    schema = Schema()
    kind = mapping.get("type")
    if isinstance(kind, str):
        schema.type = kind
    props = mapping.get("properties")
    if isinstance(props, Mapping):
        schema.properties = _map_properties(props)
    required = mapping.get("required")
    if isinstance(required, list):
        schema.required = [item if isinstance(item, str) else "" for item in required]
    additional = mapping.get("additionalProperties")
    if isinstance(additional, bool):
        schema.additional_properties = additional
    return schema


def map_to_property(mapping: Mapping[str, Any]) -> SchemaProperty:
    """Build a ``SchemaProperty`` from a decoded JSON schema property."""
    prop = SchemaProperty()
    for key in ("type", "description", "format", "pattern"):
        value = mapping.get(key)
        if isinstance(value, str):
            setattr(prop, key, value)
    enum = mapping.get("enum")
    if isinstance(enum, list):
        prop.enum = [_format_value(item) for item in enum]
    props = mapping.get("properties")
    if isinstance(props, Mapping):
        prop.properties = _map_properties(props)
    items = mapping.get("items")
    if isinstance(items, Mapping):
        prop.items = map_to_property(items)
    return prop


class ToolAdapter:
    """Presents an llmspell tool to a backend agent runtime."""

    def __init__(self, tool: Tool) -> None:
        self.tool = tool

    @property
    def name(self) -> str:
        return self.tool.name

    @property
    def description(self) -> str:
        return self.tool.description

    def execute(self, params: Any) -> Any:
        """Run the tool, turning ``params`` into a mapping first."""
        if isinstance(params, Mapping):
            mapping: Any = dict(params)
        else:
            try:
                mapping = json.loads(json.dumps(params))
            except (TypeError, ValueError) as exc:
                raise TypeError(f"cannot convert tool parameters: {exc}") from exc
            if mapping is None:
                mapping = {}
            elif not isinstance(mapping, dict):
                raise TypeError(
                    f"cannot convert tool parameters of type {type(params).__name__}"
                )
        return self.tool.execute(mapping)

    def parameter_schema(self) -> Schema:
        """The tool's parameter schema; an empty object schema if it cannot be read."""
        try:
            decoded = json.loads(self.tool.parameters)
        except (TypeError, ValueError):
            return Schema(type="object")
        if not isinstance(decoded, dict):
            return Schema(type="object")
        return map_to_schema(decoded)


def _find_tool(registry: ToolSource | None, name: str) -> Tool:
    if registry is None:
        raise LookupError(f"tool {name} not found")
    return registry.get(name)


def _response_text(response: Any) -> str:
    if isinstance(response, str):
        return response
    try:
        return json.dumps(response, separators=(",", ":"), sort_keys=True)
    except (TypeError, ValueError):
        return UNCONVERTIBLE_RESPONSE


def _chunks(text: str, size: int) -> Iterator[str]:
    for start in range(0, len(text), size):
        yield text[start : start + size]


class BackendAgentAdapter(Agent):
    """Presents a backend agent runtime as an llmspell ``Agent``."""

    STREAM_CHUNK_SIZE = 20

    def __init__(
        self, name: str, agent: BackendAgent, tool_registry: ToolSource | None = None
    ) -> None:
        self._name = name
        self._agent = agent
        self._registry = tool_registry
        self._system_prompt = ""
        self._tools: list[str] = []
        self._initialized = False

    @property
    def name(self) -> str:
        return self._name

    @property
    def initialized(self) -> bool:
        """Whether ``initialize`` has been called since the last ``cleanup``."""
        return self._initialized

    def initialize(self) -> None:
        """Mark the adapter ready; the runtime itself needs no preparation."""
        self._initialized = True

    def cleanup(self) -> None:
        """Mark the adapter released; the runtime holds nothing to free."""
        self._initialized = False

    def execute(self, text: str, options: ExecutionOptions | None = None) -> ExecutionResult:
        response = _response_text(self._agent.run(text))
        return ExecutionResult(
            response=response,
            messages=[user_message(text), assistant_message(response)],
        )

    def execute_with_history(
        self, messages: Iterable[Message], options: ExecutionOptions | None = None
    ) -> ExecutionResult:
        history = list(messages)
        result = self.execute(last_user_message(history), options)
        result.messages = [*history, assistant_message(result.response)]
        return result

    def stream(
        self, text: str, options: ExecutionOptions | None, callback: StreamCallback
    ) -> None:
        result = self.execute(text, options)
        for chunk in _chunks(result.response, self.STREAM_CHUNK_SIZE):
            callback(chunk)

    def stream_with_history(
        self,
        messages: Iterable[Message],
        options: ExecutionOptions | None,
        callback: StreamCallback,
    ) -> None:
        self.stream(last_user_message(messages), options, callback)

    @property
    def system_prompt(self) -> str:
        return self._system_prompt

    @system_prompt.setter
    def system_prompt(self, prompt: str) -> None:
        self._system_prompt = prompt
        self._agent.set_system_prompt(prompt)

    def add_tool(self, tool_name: str) -> None:
        """Look the tool up and hand it to the runtime; ``LookupError`` if unknown."""
        tool = _find_tool(self._registry, tool_name)
        self._agent.add_tool(ToolAdapter(tool))
        self._tools.append(tool_name)

    @property
    def tools(self) -> list[str]:
        return list(self._tools)