"""Bridges that expose functionality to scripts, and the set that manages them."""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any


@dataclass
class ParameterInfo:
    """Describes one parameter of a bridge method."""

    name: str
    type: str
    description: str = ""
    required: bool = False
    default: Any = None


@dataclass
class MethodInfo:
    """Describes a method a bridge exposes to scripts."""

    name: str
    description: str = ""
    parameters: list[ParameterInfo] = field(default_factory=list)
    return_type: str = ""
    is_async: bool = False


class Bridge(ABC):
    """Something that exposes a group of methods to scripts."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Name of the bridge, such as ``"llm"`` or ``"tools"``."""

    @abstractmethod
    def methods(self) -> list[MethodInfo]:
        """Information about every method the bridge exposes."""

    @abstractmethod
    def initialize(self) -> None:
        """Prepare the bridge for use."""

    @abstractmethod
    def cleanup(self) -> None:
        """Release resources held by the bridge."""


class BridgeSet:
    """A thread-safe collection of bridges keyed by name."""

    def __init__(self) -> None:
        self._bridges: dict[str, Bridge] = {}
        self._lock = threading.RLock()

    def register(self, name: str, bridge: Bridge) -> None:
        """Add a bridge; raise ``ValueError`` if the name is taken."""
        with self._lock:
            if name in self._bridges:
                raise ValueError(f'bridge "{name}" already registered')
            self._bridges[name] = bridge

    def get(self, name: str) -> Bridge:
        """Return a bridge; raise ``LookupError`` if unknown."""
        with self._lock:
            try:
                return self._bridges[name]
            except KeyError:
                raise LookupError(f'bridge "{name}" not found') from None

    def list(self) -> list[str]:
        """Names of all registered bridges."""
        with self._lock:
            return list(self._bridges)

    def unregister(self, name: str) -> None:
        """Remove a bridge; raise ``LookupError`` if unknown."""
        with self._lock:
            if name not in self._bridges:
                raise LookupError(f'bridge "{name}" not found')
            del self._bridges[name]

    def initialize_all(self) -> None:
        """Initialize every bridge, stopping at the first failure."""
        with self._lock:
            for name, bridge in self._bridges.items():
                try:
                    bridge.initialize()
                except Exception as exc:
                    raise RuntimeError(
                        f'failed to initialize bridge "{name}": {exc}'
                    ) from exc

    def cleanup_all(self) -> None:
        """Clean up every bridge; after trying all, raise the first failure."""
        first_error: RuntimeError | None = None
        with self._lock:
            for name, bridge in self._bridges.items():
                try:
                    bridge.cleanup()
                except Exception as exc:
                    if first_error is None:
                        first_error = RuntimeError(
                            f'failed to cleanup bridge "{name}": {exc}'
                        )
                        first_error.__cause__ = exc
        if first_error is not None:
            raise first_error

    def snapshot(self) -> dict[str, Bridge]:
        """A copy of the name-to-bridge mapping."""
        with self._lock:
            return dict(self._bridges)


_global_bridge_set = BridgeSet()


def register_bridge(name: str, bridge: Bridge) -> None:
    """Register a bridge in the global set."""
    _global_bridge_set.register(name, bridge)


def get_bridge(name: str) -> Bridge:
    """Look up a bridge in the global set."""
    return _global_bridge_set.get(name)


def list_bridges() -> list[str]:
    """Names of the bridges in the global set."""
    return _global_bridge_set.list()


def unregister_bridge(name: str) -> None:
    """Remove a bridge from the global set."""
    _global_bridge_set.unregister(name)


def initialize_all_bridges() -> None:
    """Initialize every bridge in the global set."""
    _global_bridge_set.initialize_all()


def cleanup_all_bridges() -> None:
    """Clean up every bridge in the global set."""
    _global_bridge_set.cleanup_all()


def get_global_bridge_set() -> dict[str, Bridge]:
    """A copy of the global set's name-to-bridge mapping."""
    return _global_bridge_set.snapshot()