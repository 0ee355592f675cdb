"""Agent definition system: markdown discovery, parsing, caching, and validation."""
from __future__ import annotations

from flowctl_agent.definitions.builtins import BUILT_IN_AGENTS, DEFAULT_CAPABILITIES
from flowctl_agent.definitions.frontmatter import parse_frontmatter
from flowctl_agent.definitions.reader import (
    DefinitionReader,
    derive_name,
    extract_category,
    header_from_mapping,
)
from flowctl_agent.definitions.registry import AgentRegistry
from flowctl_agent.definitions.scanner import (
    DirectoryScanner,
    is_agent_file,
    resolve_roots,
)
from flowctl_agent.definitions.types import (
    AgentDefinition,
    AgentHeader,
    AgentHooks,
    AgentLoadStats,
    AgentPriority,
    AgentRoot,
    AgentValidationResult,
    BuiltInAgent,
    RegistryStats,
    RootKind,
)
from flowctl_agent.definitions.unified import UnifiedAgentRegistry

__all__ = [
    "BUILT_IN_AGENTS",
    "DEFAULT_CAPABILITIES",
    "AgentDefinition",
    "AgentHeader",
    "AgentHooks",
    "AgentLoadStats",
    "AgentPriority",
    "AgentRegistry",
    "AgentRoot",
    "AgentValidationResult",
    "BuiltInAgent",
    "DefinitionReader",
    "DirectoryScanner",
    "RegistryStats",
    "RootKind",
    "UnifiedAgentRegistry",
    "derive_name",
    "extract_category",
    "header_from_mapping",
    "is_agent_file",
    "parse_frontmatter",
    "resolve_roots",
]
