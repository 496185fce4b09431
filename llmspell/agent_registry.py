"""Thread-safe registry of agent factories and created agents."""

from __future__ import annotations

import threading
from collections.abc import Callable

from llmspell.agent_types import Agent, AgentConfig

Factory = Callable[[AgentConfig], Agent]


class AgentRegistry:
    """Holds agent factories by provider name and created agents by name."""

    def __init__(self) -> None:
        self._factories: dict[str, Factory] = {}
        self._agents: dict[str, Agent] = {}
        self._lock = threading.RLock()

    def register(self, name: str, factory: Factory) -> None:
        """Add a factory; raise ``ValueError`` if the name is taken."""
        with self._lock:
            if name in self._factories:
                raise ValueError(f"agent factory {name} already registered")
            self._factories[name] = factory

    def create(self, config: AgentConfig) -> Agent:
        """Build, initialize and store an agent from ``config``.

        The factory is chosen by ``config.provider``.
        """
        try:
            config.validate()
        except ValueError as exc:
            raise ValueError(f"invalid agent config: {exc}") from exc

        with self._lock:
            factory = self._factories.get(config.provider)
        if factory is None:
            raise LookupError(f"agent factory {config.provider} not found")

        try:
            agent = factory(config)
        except Exception as exc:
            raise RuntimeError(f"failed to create agent: {exc}") from exc

        try:
            agent.initialize()
        except Exception as exc:
            raise RuntimeError(f"failed to initialize agent: {exc}") from exc

        with self._lock:
            self._agents[config.name] = agent
        return agent

    def get(self, name: str) -> Agent:
        """Return a created agent; raise ``LookupError`` if unknown."""
        with self._lock:
            try:
                return self._agents[name]
            except KeyError:
                raise LookupError(f"agent {name} not found") from None

    def list(self) -> list[str]:
        """Names of the registered factories."""
        with self._lock:
            return [name for name in self._factories]

    def remove(self, name: str) -> None:
        """Clean up and forget a created agent."""
        with self._lock:
            agent = self._agents.get(name)
            if agent is None:
                raise LookupError(f"agent {name} not found")
            try:
                agent.cleanup()
            except Exception as exc:
                raise RuntimeError(f"failed to cleanup agent: {exc}") from exc
            del self._agents[name]


_default_registry: AgentRegistry | None = None
_default_lock = threading.Lock()


def default_registry() -> AgentRegistry:
    """Return the process-wide registry, creating it on first use."""
    global _default_registry
    with _default_lock:
        if _default_registry is None:
            _default_registry = AgentRegistry()
        return _default_registry


def register_agent_factory(name: str, factory: Factory) -> None:
    """Register a factory with the default registry."""
    default_registry().register(name, factory)


def create_agent(config: AgentConfig) -> Agent:
    """Create an agent with the default registry."""
    return default_registry().create(config)


def get_agent(name: str) -> Agent:
    """Look up an agent in the default registry."""
    return default_registry().get(name)


def list_agent_factories() -> list[str]:
    """Names of the factories in the default registry."""
    return default_registry().list()


def remove_agent(name: str) -> None:
    """Remove an agent from the default registry."""
    default_registry().remove(name)