# llmspell

A small library for hosts that let scripts ("spells") drive large language
models. It defines the contracts a script engine and an agent must meet,
keeps agents and bridges in thread-safe registries, and offers bridges
through which scripts create and run agents and register and call tools.

It has no third-party runtime dependencies.

## Modules

| Module | Contents |
| --- | --- |
| `llmspell.engine` | The abstract `Engine` contract, `EngineConfig` and `Result`. |
| `llmspell.agent_types` | `Role`, `Message`, `AgentConfig`, `ExecutionOptions`, `ExecutionResult`, `AgentError`, the abstract `Agent`, and the helpers `user_message`, `assistant_message`, `system_message` and `last_user_message`. |
| `llmspell.agent_registry` | `AgentRegistry` and the functions that work on the process-wide registry. |
| `llmspell.tool_adapter` | `ToolAdapter`, `BackendAgentAdapter`, `Schema`, `SchemaProperty`, `map_to_schema` and `map_to_property`. |
| `llmspell.default_agent` | `DefaultAgent`, an agent built on a backend runtime created at initialization. |
| `llmspell.bridge_core` | The abstract `Bridge`, `MethodInfo`, `ParameterInfo`, `BridgeSet` and a global bridge set. |
| `llmspell.agent_bridge` | `AgentBridge`, script-facing agent management using plain dictionaries. |
| `llmspell.tool_bridge` | `ToolBridge` and `validate_type`. |

## Agents

`AgentConfig` describes an agent. `validate()` raises `ValueError` when the
name, provider or model is empty or the temperature lies outside 0 to 2.

An `AgentRegistry` holds factories keyed by provider name. `create(config)`
validates the configuration, calls the factory registered under
`config.provider`, initializes the agent and stores it under `config.name`.
`get` and `remove` raise `LookupError` for unknown names; `list()` returns
the names of the registered factories.

`BackendAgentAdapter` wraps any object with `run(text)`,
`set_system_prompt(prompt)` and `add_tool(tool)`:

```python
from llmspell.agent_registry import AgentRegistry
from llmspell.agent_types import AgentConfig
from llmspell.tool_adapter import BackendAgentAdapter


class EchoBackend:
    def run(self, text):
        return f"echo: {text}"

    def set_system_prompt(self, prompt):
        pass

    def add_tool(self, tool):
        pass


registry = AgentRegistry()
registry.register("echo", lambda config: BackendAgentAdapter(config.name, EchoBackend()))
agent = registry.create(AgentConfig(name="helper", provider="echo", model="any"))
print(agent.execute("hi").response)   # echo: hi
registry.remove("helper")
```

`register_agent_factory`, `create_agent`, `get_agent`,
`list_agent_factories` and `remove_agent` do the same against the registry
returned by `default_registry()`.

`DefaultAgent(config, backend_factory, tool_registry)` builds its backend
with `backend_factory(config)` on `initialize()`, passes it the system
prompt, the model (through `with_model`) and the configured tools it can
find, and raises `AgentError` with code `AGENT_NOT_INITIALIZED` if used
before that. `ExecutionOptions.timeout` (seconds) bounds a run and raises
`TimeoutError` when exceeded. Its `stream` sends the response in chunks of
ten characters; `BackendAgentAdapter.stream` uses chunks of twenty.

`execute_with_history` and `stream_with_history` answer the latest user
message of a conversation and raise `AgentError` with code
`NO_USER_MESSAGE` when there is none.

## Agent bridge

`AgentBridge(registry=None)` uses the default registry unless one is given.
Scripts pass dictionaries with the keys `name`, `provider`, `model`,
`systemPrompt`, `maxTokens`, `temperature`, `timeout` and `tools`:

```python
from llmspell.agent_bridge import AgentBridge

bridge = AgentBridge(registry)
name = bridge.create({"name": "helper", "provider": "echo", "model": "any"})
print(bridge.execute(name, "hello"))
chunks = []
bridge.stream(name, "hello", None, chunks.append)
print(bridge.get_info(name))    # name, systemPrompt, tools
bridge.remove(name)
```

`list()` always returns an empty list, as the registry does not enumerate
created agents.

## Tool bridge

`ToolBridge(registry=None)` falls back to an in-memory registry shared by
all bridges created without one.

```python
from llmspell.tool_bridge import ToolBridge

tools = ToolBridge()
tools.register_tool(
    "add",
    "Adds two numbers",
    {
        "type": "object",
        "properties": {"x": {"type": "number"}, "y": {"type": "number"}},
        "required": ["x", "y"],
    },
    lambda p: p["x"] + p["y"],
)
tools.validate_parameters("add", {"x": 5, "y": 3})
print(tools.execute_tool("add", {"x": 5, "y": 3}))   # 8
print(tools.list_tools())
tools.remove_tool("add")
```

`validate_parameters` raises `ValueError` for a missing required parameter
and `TypeError` for a parameter whose type does not match the schema.

## Bridges

Subclass `Bridge` (a `name` property plus `methods`, `initialize` and
`cleanup`) and collect bridges in a `BridgeSet`:

```python
from llmspell.bridge_core import BridgeSet

bridges = BridgeSet()
bridges.register("echo", my_bridge)
bridges.initialize_all()
print(bridges.list())
bridges.cleanup_all()
```

`register_bridge`, `get_bridge`, `list_bridges`, `unregister_bridge`,
`initialize_all_bridges`, `cleanup_all_bridges` and
`get_global_bridge_set` work on a process-wide set.

## What this package does not do

- It contains no script interpreter: `Engine` is only a contract for one.
- It talks to no LLM provider itself: agents run on backend objects that
  the caller supplies.
- It offers no command-line program.
- It has no general converter between host values and script values.