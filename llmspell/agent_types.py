"""Messages, configuration, results, errors and the agent interface."""

from __future__ import annotations

import enum
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Any

ERR_CODE_NOT_INITIALIZED = "AGENT_NOT_INITIALIZED"
ERR_CODE_INVALID_CONFIG = "INVALID_CONFIG"
ERR_CODE_TOOL_NOT_FOUND = "TOOL_NOT_FOUND"
ERR_CODE_EXECUTION_FAILED = "EXECUTION_FAILED"
ERR_CODE_NO_USER_MESSAGE = "NO_USER_MESSAGE"

StreamCallback = Callable[[str], None]


class Role(str, enum.Enum):
    """Role of a message in a conversation."""

    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"
    TOOL = "tool"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Message:
    """A single message in a conversation."""

    role: Role
    content: str


def user_message(content: str) -> Message:
    """Return a message from the user."""
    return Message(Role.USER, content)


def assistant_message(content: str) -> Message:
    """Return a message from the assistant."""
    return Message(Role.ASSISTANT, content)


def system_message(content: str) -> Message:
    """Return a system message."""
    return Message(Role.SYSTEM, content)


class AgentError(Exception):
    """An agent failure carrying a machine-readable code."""

    def __init__(self, code: str, message: str, cause: BaseException | None = None) -> None:
        super().__init__(code, message)
        self.code = code
        self.message = message
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause

    def __str__(self) -> str:
        if self.cause is not None:
            return f"{self.code}: {self.message}: {self.cause}"
        return f"{self.code}: {self.message}"


def last_user_message(messages: Iterable[Message]) -> str:
    """Return the content of the most recent user message.

    Raises ``AgentError`` with code ``NO_USER_MESSAGE`` when there is no user
    message or the most recent one is empty.
    """
    for message in reversed(list(messages)):
        if message.role == Role.USER:
            if message.content:
                return message.content
            break
    raise AgentError(ERR_CODE_NO_USER_MESSAGE, "no user message found in history")


@dataclass
class AgentConfig:
    """Configuration of an agent. ``timeout`` is in seconds."""

    name: str = ""
    system_prompt: str = ""
    provider: str = ""
    model: str = ""
    tools: list[str] = field(default_factory=list)
    max_tokens: int = 0
    temperature: float = 0.0
    timeout: float = 0.0

    def validate(self) -> None:
        """Raise ``ValueError`` if the configuration is incomplete or out of range."""
        if not self.name:
            raise ValueError("agent name is required")
        if not self.provider:
            raise ValueError("provider is required")
        if not self.model:
            raise ValueError("model is required")
        if not 0 <= self.temperature <= 2:
            raise ValueError("temperature must be between 0 and 2")


@dataclass
class ExecutionOptions:
    """Per-call overrides for an agent run. ``timeout`` is in seconds."""

    stream: bool = False
    max_tokens: int = 0
    temperature: float = 0.0
    timeout: float = 0.0


@dataclass
class ExecutionResult:
    """Outcome of an agent run. ``duration`` is in seconds."""

    response: str = ""
    messages: list[Message] = field(default_factory=list)
    tokens_used: int = 0
    duration: float = 0.0
    metadata: dict[str, Any] = field(default_factory=dict)


class Agent(ABC):
    """An LLM agent that turns inputs into responses."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique identifier of the agent."""

    @abstractmethod
    def initialize(self) -> None:
        """Prepare the agent for use."""

    @abstractmethod
    def cleanup(self) -> None:
        """Release resources held by the agent."""

    @abstractmethod
    def execute(self, text: str, options: ExecutionOptions | None = None) -> ExecutionResult:
        """Run the agent on a single input."""

    def execute_with_history(
        self, messages: Iterable[Message], options: ExecutionOptions | None = None
    ) -> ExecutionResult:
        """Run the agent on the latest user message of a conversation."""
        history = list(messages)
        result = self.execute(last_user_message(history), options)
        result.messages = [*history, assistant_message(result.response)]
        return result

    @abstractmethod
    def stream(
        self, text: str, options: ExecutionOptions | None, callback: StreamCallback
    ) -> None:
        """Run the agent, passing the response to ``callback`` in chunks."""

    def stream_with_history(
        self,
        messages: Iterable[Message],
        options: ExecutionOptions | None,
        callback: StreamCallback,
    ) -> None:
        """Stream a response to the latest user message of a conversation."""
        self.stream(last_user_message(messages), options, callback)

    @property
    @abstractmethod
    def system_prompt(self) -> str:
        """The agent's system prompt."""

    @system_prompt.setter
    @abstractmethod
    def system_prompt(self, prompt: str) -> None:
        """Replace the agent's system prompt."""

    @abstractmethod
    def add_tool(self, tool_name: str) -> None:
        """Make a tool available to the agent."""

    @property
    @abstractmethod
    def tools(self) -> list[str]:
        """Names of the tools available to the agent."""