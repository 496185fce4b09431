from collections.abc import Callable
from typing import Any

import pytest

from llmspell.engine import Engine, EngineConfig, Result


class MemoryEngine(Engine):
    def __init__(self, load_error: Exception | None = None) -> None:
        self.script: str | None = None
        self.variables: dict[str, Any] = {}
        self.functions: dict[str, Callable[..., Any]] = {}
        self.load_error = load_error
        self.runs = 0

    @property
    def name(self) -> str:
        return "memory"

    def load_script(self, reader) -> None:
        if self.load_error is not None:
            raise self.load_error
        self.script = reader.read()

    def execute(self) -> None:
        if self.script is None:
            raise RuntimeError("no script loaded")
        self.runs += 1

    def register_function(self, name, fn) -> None:
        if not callable(fn):
            raise TypeError("function is not callable")
        self.functions[name] = fn

    def set_variable(self, name, value) -> None:
        self.variables[name] = value

    def get_variable(self, name):
        return self.variables[name]


def test_engine_cannot_be_instantiated_directly():
    with pytest.raises(TypeError):
        Engine()


def test_config_defaults_mean_no_limits():
    config = EngineConfig()
    assert config.max_execution_time == 0
    assert config.max_memory == 0
    assert config.enable_debug is False


def test_config_keeps_given_limits():
    config = EngineConfig(max_execution_time=30, max_memory=64 * 1024 * 1024, enable_debug=True)
    assert config.max_memory == 67108864
    assert config.max_execution_time == 30
    assert config.enable_debug is True


def test_result_variables_are_not_shared():
    first = Result(output="Hello, World!")
    second = Result()
    first.variables["exitCode"] = 0
    assert second.variables == {}
    assert first.error is None
    assert first.output == "Hello, World!"


def test_result_with_error():
    failure = RuntimeError("script execution failed")
    result = Result(output="", error=failure, variables={"exitCode": 1})
    assert result.error is failure
    assert result.variables["exitCode"] == 1


def test_load_script_file_reads_file_contents(tmp_path):
    path = tmp_path / "spell.lua"
    path.write_text('print("Hello, World!")', encoding="utf-8")
    engine = MemoryEngine()
    Engine.load_script_file(engine, path)
    assert engine.script == 'print("Hello, World!")'
    engine.execute()
    assert engine.runs == 1


def test_load_script_file_missing_file(tmp_path):
    engine = MemoryEngine()
    with pytest.raises(FileNotFoundError):
        Engine.load_script_file(engine, tmp_path / "missing.lua")
    assert engine.script is None


def test_load_errors_propagate_through_file_loading(tmp_path):
    path = tmp_path / "test.lua"
    path.write_text("test", encoding="utf-8")
    engine = MemoryEngine(load_error=ValueError("load failed"))
    with pytest.raises(ValueError, match="load failed"):
        Engine.load_script_file(engine, path)