import threading

import pytest

from llmspell.bridge_core import (
    Bridge,
    BridgeSet,
    MethodInfo,
    ParameterInfo,
    get_bridge,
    get_global_bridge_set,
    list_bridges,
    register_bridge,
    unregister_bridge,
)


class FakeBridge(Bridge):
    def __init__(self, name, fail_cleanup=False):
        self._name = name
        self.initialized = False
        self.fail_cleanup = fail_cleanup
        self.cleanup_calls = 0
        self._lock = threading.Lock()
        self._methods = [
            MethodInfo(
                name="echo",
                description="Echoes the input back",
                parameters=[
                    ParameterInfo("message", "string", "The message to echo", True)
                ],
                return_type="string",
            ),
            MethodInfo(
                name="add",
                description="Adds two numbers",
                parameters=[
                    ParameterInfo("a", "number", "First number", True),
                    ParameterInfo("b", "number", "Second number", True),
                ],
                return_type="number",
            ),
        ]

    @property
    def name(self):
        return self._name

    def methods(self):
        return self._methods

    def initialize(self):
        with self._lock:
            if self.initialized:
                raise RuntimeError("already initialized")
            self.initialized = True

    def cleanup(self):
        with self._lock:
            self.cleanup_calls += 1
            if self.fail_cleanup:
                raise RuntimeError("cleanup broke")
            self.initialized = False


def test_methods_expose_echo_with_metadata():
    bridges = BridgeSet()
    bridges.register("test", FakeBridge("test"))
    methods = bridges.get("test").methods()
    names = [m.name for m in methods]
    assert "echo" in names
    echo = next(m for m in methods if m.name == "echo")
    assert echo.description == "Echoes the input back"
    assert echo.parameters[0].name == "message"
    assert echo.parameters[0].required is True
    assert echo.return_type == "string"
    assert echo.is_async is False


def test_parameter_info_defaults():
    param = ParameterInfo("x", "number")
    assert param.required is False
    assert param.default is None
    assert param.description == ""


def test_register_and_get_returns_same_instance():
    bridges = BridgeSet()
    bridge = FakeBridge("test")
    bridges.register("mock", bridge)
    assert bridges.get("mock") is bridge


def test_register_duplicate_raises():
    bridges = BridgeSet()
    bridge = FakeBridge("test")
    bridges.register("mock", bridge)
    with pytest.raises(ValueError, match="already registered"):
        bridges.register("mock", bridge)


def test_get_missing_raises():
    with pytest.raises(LookupError, match="not found"):
        BridgeSet().get("nonexistent")


def test_list_bridges():
    bridges = BridgeSet()
    for name in ("llm", "tools", "workflow"):
        bridges.register(name, FakeBridge(name))
    assert sorted(bridges.list()) == ["llm", "tools", "workflow"]


def test_unregister():
    bridges = BridgeSet()
    bridges.register("mock", FakeBridge("test"))
    assert bridges.get("mock").name == "test"
    bridges.unregister("mock")
    with pytest.raises(LookupError):
        bridges.get("mock")
    with pytest.raises(LookupError):
        bridges.unregister("mock")


def test_single_bridge_lifecycle_through_set():
    bridges = BridgeSet()
    bridge = FakeBridge("test")
    bridges.register("test", bridge)
    bridges.initialize_all()
    assert bridge.initialized is True
    bridges.cleanup_all()
    assert bridge.initialized is False


def test_set_lifecycle():
    bridges = BridgeSet()
    names = ["bridge1", "bridge2", "bridge3"]
    for name in names:
        bridges.register(name, FakeBridge(name))
    bridges.initialize_all()
    assert all(bridges.get(n).initialized for n in names)
    bridges.cleanup_all()
    assert not any(bridges.get(n).initialized for n in names)


def test_initialize_all_wraps_failure():
    bridges = BridgeSet()
    bridge = FakeBridge("once")
    bridge.initialize()
    bridges.register("once", bridge)
    with pytest.raises(RuntimeError, match='failed to initialize bridge "once"'):
        bridges.initialize_all()


def test_cleanup_all_continues_and_reports_first_failure():
    bridges = BridgeSet()
    broken = FakeBridge("broken", fail_cleanup=True)
    healthy = FakeBridge("healthy")
    healthy.initialize()
    bridges.register("broken", broken)
    bridges.register("healthy", healthy)
    with pytest.raises(RuntimeError, match='failed to cleanup bridge "broken"'):
        bridges.cleanup_all()
    assert healthy.initialized is False
    assert broken.cleanup_calls == 1


def test_snapshot_is_a_copy():
    bridges = BridgeSet()
    bridge = FakeBridge("a")
    bridges.register("a", bridge)
    copy = bridges.snapshot()
    copy.pop("a")
    assert bridges.get("a") is bridge
    assert bridges.snapshot() == {"a": bridge}


def test_global_bridge_set():
    bridge = FakeBridge("global")
    register_bridge("global-test-bridge", bridge)
    try:
        assert get_bridge("global-test-bridge").name == "global"
        assert "global-test-bridge" in list_bridges()
        assert get_global_bridge_set()["global-test-bridge"] is bridge
    finally:
        unregister_bridge("global-test-bridge")
    assert "global-test-bridge" not in list_bridges()
    with pytest.raises(LookupError):
        get_bridge("global-test-bridge")