"""Script engine interface and the configuration and result types it uses."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass, field
from os import PathLike
from typing import Any, TextIO


@dataclass
class EngineConfig:
    """Limits and switches for a script engine.

    ``max_execution_time`` is in seconds and ``max_memory`` in bytes;
    zero means no limit.
    """

    max_execution_time: int = 0
    max_memory: int = 0
    enable_debug: bool = False


@dataclass
class Result:
    """Outcome of running a script."""

    output: str = ""
    error: BaseException | None = None
    variables: dict[str, Any] = field(default_factory=dict)


class Engine(ABC):
    """A script execution engine.

    Implementations raise ``RuntimeError`` when asked to execute before a
    script is loaded, ``TypeError`` when a registered function is not
    callable, and ``KeyError`` when a variable does not exist.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Name of the engine, such as ``"lua"``."""

    @abstractmethod
    def load_script(self, reader: TextIO) -> None:
        """Load a script from a text stream."""

    def load_script_file(self, path: str | PathLike[str]) -> None:
        """Load a script from the file at ``path``."""
        with open(path, encoding="utf-8") as reader:
            self.load_script(reader)

    @abstractmethod
    def execute(self) -> None:
        """Run the loaded script."""

    @abstractmethod
    def register_function(self, name: str, fn: Callable[..., Any]) -> None:
        """Make ``fn`` callable from scripts under ``name``."""

    @abstractmethod
    def set_variable(self, name: str, value: Any) -> None:
        """Set a variable in the script context."""

    @abstractmethod
    def get_variable(self, name: str) -> Any:
        """Return a variable from the script context."""