"""Exposes agent creation, execution and management to scripts."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from llmspell.agent_registry import AgentRegistry, default_registry
from llmspell.agent_types import AgentConfig, ExecutionOptions


def _number(value: Any) -> float | int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value
    return None


class AgentBridge:
    """Script-facing access to an agent registry.

    Configuration and option mappings use the script-side keys ``name``,
    ``provider``, ``model``, ``systemPrompt``, ``maxTokens``, ``temperature``,
    ``timeout`` (whole seconds) and ``tools``.
    """

    def __init__(self, registry: AgentRegistry | None = None) -> None:
        self.registry = registry if registry is not None else default_registry()

    def create(self, config: Mapping[str, Any]) -> str:
        """Create an agent from a script configuration and return its name."""
        agent_config = AgentConfig()

        name = config.get("name")
        if not isinstance(name, str):
            raise ValueError("agent name is required")
        agent_config.name = name

        provider = config.get("provider")
        if not isinstance(provider, str):
            raise ValueError("provider is required")
        agent_config.provider = provider

        model = config.get("model")
        if not isinstance(model, str):
            raise ValueError("model is required")
        agent_config.model = model

        system_prompt = config.get("systemPrompt")
        if isinstance(system_prompt, str):
            agent_config.system_prompt = system_prompt

        max_tokens = _number(config.get("maxTokens"))
        if max_tokens is not None:
            agent_config.max_tokens = int(max_tokens)

        temperature = config.get("temperature")
        if isinstance(temperature, float):
            agent_config.temperature = temperature

        timeout = _number(config.get("timeout"))
        if timeout is not None:
            agent_config.timeout = float(int(timeout))

        tools = config.get("tools")
        if isinstance(tools, (list, tuple)):
            agent_config.tools = [tool for tool in tools if isinstance(tool, str)]

        return self.registry.create(agent_config).name

    def execute(
        self, agent_name: str, text: str, options: Mapping[str, Any] | None = None
    ) -> str:
        """Run an agent on ``text`` and return its response."""
        agent = self.registry.get(agent_name)
        return agent.execute(text, self._convert_options(options)).response

    def stream(
        self,
        agent_name: str,
        text: str,
        options: Mapping[str, Any] | None,
        callback: Callable[[str], None],
    ) -> None:
        """Run an agent, passing its response to ``callback`` in chunks."""
        agent = self.registry.get(agent_name)
        opts = self._convert_options(options) or ExecutionOptions()
        opts.stream = True
        agent.stream(text, opts, callback)

    def list(self) -> list[dict[str, Any]]:
        """Information about all agents; the registry does not enumerate them."""
        return []

    def get_info(self, agent_name: str) -> dict[str, Any]:
        """Name, system prompt and tools of an agent."""
        agent = self.registry.get(agent_name)
        return {
            "name": agent.name,
            "systemPrompt": agent.system_prompt,
            "tools": agent.tools,
        }

    def remove(self, agent_name: str) -> None:
        """Clean up and remove an agent."""
        self.registry.remove(agent_name)

    def update_system_prompt(self, agent_name: str, prompt: str) -> None:
        """Replace an agent's system prompt."""
        self.registry.get(agent_name).system_prompt = prompt

    def add_tool(self, agent_name: str, tool_name: str) -> None:
        """Give an agent another tool."""
        self.registry.get(agent_name).add_tool(tool_name)

    @staticmethod
    def _convert_options(options: Mapping[str, Any] | None) -> ExecutionOptions | None:
        if options is None:
            return None
        opts = ExecutionOptions()
        stream = options.get("stream")
        if isinstance(stream, bool):
            opts.stream = stream
        max_tokens = _number(options.get("maxTokens"))
        if max_tokens is not None:
            opts.max_tokens = int(max_tokens)
        temperature = options.get("temperature")
        if isinstance(temperature, float):
            opts.temperature = temperature
        timeout = _number(options.get("timeout"))
        if timeout is not None:
            opts.timeout = float(int(timeout))
        return opts