"""flowctl agent: agent registry and the external executor contract."""
from __future__ import annotations

from flowctl_agent.definitions import (
    AgentDefinition,
    AgentRegistry,
    BuiltInAgent,
    UnifiedAgentRegistry,
)
from flowctl_agent.executor import (
    AgentExecutor,
    ExecutionOptions,
    ExecutionOutcome,
    build_command,
)

__all__ = [
    "AgentDefinition",
    "AgentExecutor",
    "AgentRegistry",
    "BuiltInAgent",
    "ExecutionOptions",
    "ExecutionOutcome",
    "UnifiedAgentRegistry",
    "build_command",
]
