"""The standard agent, built on a backend agent runtime and a tool registry."""

from __future__ import annotations

import threading
import time
from collections.abc import Callable, Iterable
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeout
from typing import Any, Protocol

from llmspell.agent_types import (
    ERR_CODE_EXECUTION_FAILED,
    ERR_CODE_NOT_INITIALIZED,
    ERR_CODE_TOOL_NOT_FOUND,
    Agent,
    AgentConfig,
    AgentError,
    ExecutionOptions,
    ExecutionResult,
    Message,
    StreamCallback,
    assistant_message,
    user_message,
)
from llmspell.tool_adapter import BackendAgent, Tool, ToolAdapter, ToolSource


class ModelBackend(BackendAgent, Protocol):
    """A backend runtime whose model can be chosen."""

    def with_model(self, model: str) -> Any:
        """Select the model to use."""


BackendFactory = Callable[[AgentConfig], ModelBackend]


def _find_tool(registry: ToolSource | None, name: str) -> Tool:
    if registry is None:
        raise LookupError(f"tool {name} not found")
    return registry.get(name)


class DefaultAgent(Agent):
    """Agent that delegates to a backend runtime created on initialization.

    ``backend_factory`` builds the runtime from the agent's configuration;
    ``tool_registry`` supplies the tools named in the configuration.
    """

    STREAM_CHUNK_SIZE = 10
    STREAM_DELAY = 0.01

    def __init__(
        self,
        config: AgentConfig,
        backend_factory: BackendFactory | None = None,
        tool_registry: ToolSource | None = None,
    ) -> None:
        self._config = config
        self._backend_factory = backend_factory
        self._registry = tool_registry
        self._system_prompt = config.system_prompt
        self._tools = list(config.tools)
        self._backend: ModelBackend | None = None
        self._initialized = False
        self._lock = threading.RLock()

    @property
    def name(self) -> str:
        return self._config.name

    def initialize(self) -> None:
        """Create the backend runtime and hand it the prompt, model and tools.

        Tools that cannot be found are skipped.
        """
        with self._lock:
            if self._initialized:
                return
            if self._backend_factory is None:
                raise RuntimeError("failed to create LLM provider: no backend factory configured")
            try:
                backend = self._backend_factory(self._config)
            except Exception as exc:
                raise RuntimeError(f"failed to create LLM provider: {exc}") from exc
            if self._system_prompt:
                backend.set_system_prompt(self._system_prompt)
            if self._config.model:
                backend.with_model(self._config.model)
            for tool_name in self._tools:
                try:
                    tool = _find_tool(self._registry, tool_name)
                except LookupError:
                    continue
                backend.add_tool(ToolAdapter(tool))
            self._backend = backend
            self._initialized = True

    def cleanup(self) -> None:
        with self._lock:
            self._initialized = False
            self._backend = None

    def _require_backend(self) -> ModelBackend:
        with self._lock:
            if not self._initialized or self._backend is None:
                raise AgentError(ERR_CODE_NOT_INITIALIZED, "agent not initialized")
            return self._backend

    @staticmethod
    def _run(backend: ModelBackend, text: str, timeout: float) -> Any:
        if timeout <= 0:
            return backend.run(text)
        executor = ThreadPoolExecutor(max_workers=1)
        try:
            future = executor.submit(backend.run, text)
            try:
                return future.result(timeout=timeout)
            except FutureTimeout:
                raise TimeoutError(f"agent execution timed out after {timeout}s") from None
        finally:
            executor.shutdown(wait=False)

    def execute(self, text: str, options: ExecutionOptions | None = None) -> ExecutionResult:
        """Run the agent; raise ``TimeoutError`` if ``options.timeout`` runs out."""
        backend = self._require_backend()
        timeout = options.timeout if options is not None else 0.0
        start = time.monotonic()
        try:
            response = self._run(backend, text, timeout)
        except TimeoutError:
            raise
        except Exception as exc:
            raise AgentError(ERR_CODE_EXECUTION_FAILED, "agent execution failed", exc) from exc
        response_text = str(response)
        return ExecutionResult(
            response=response_text,
            messages=[user_message(text), assistant_message(response_text)],
            duration=time.monotonic() - start,
        )

    def execute_with_history(
        self, messages: Iterable[Message], options: ExecutionOptions | None = None
    ) -> ExecutionResult:
        self._require_backend()
        return super().execute_with_history(messages, options)

    def stream(
        self, text: str, options: ExecutionOptions | None, callback: StreamCallback
    ) -> None:
        """Run the agent and pass the response to ``callback`` in small chunks."""
        self._require_backend()
        response = self.execute(text, options).response
        for start in range(0, len(response), self.STREAM_CHUNK_SIZE):
            callback(response[start : start + self.STREAM_CHUNK_SIZE])
            time.sleep(self.STREAM_DELAY)

    def stream_with_history(
        self,
        messages: Iterable[Message],
        options: ExecutionOptions | None,
        callback: StreamCallback,
    ) -> None:
        super().stream_with_history(messages, options, callback)

    @property
    def system_prompt(self) -> str:
        with self._lock:
            return self._system_prompt

    @system_prompt.setter
    def system_prompt(self, prompt: str) -> None:
        with self._lock:
            self._system_prompt = prompt
            if self._backend is not None:
                self._backend.set_system_prompt(prompt)

    def add_tool(self, tool_name: str) -> None:
        """Add a tool by name; duplicates are ignored.

        Once initialized, the tool must exist in the registry.
        """
        with self._lock:
            if tool_name in self._tools:
                return
            self._tools.append(tool_name)
            if self._initialized and self._backend is not None:
                try:
                    tool = _find_tool(self._registry, tool_name)
                except LookupError as exc:
                    raise AgentError(
                        ERR_CODE_TOOL_NOT_FOUND, f"tool {tool_name} not found", exc
                    ) from exc
                self._backend.add_tool(ToolAdapter(tool))

    @property
    def tools(self) -> list[str]:
        with self._lock:
            return list(self._tools)