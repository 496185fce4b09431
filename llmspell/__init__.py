"""Engine contract, agents, agent registry and agent, tool and bridge management for LLM spells."""

__version__ = "0.1.0"