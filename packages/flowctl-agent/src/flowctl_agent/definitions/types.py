"""Agent definition types for the markdown agent registry."""
from __future__ import annotations

import enum
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any


class AgentPriority(enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @classmethod
    def coerce(cls, value: Any) -> AgentPriority:
        """Map a raw header value to a priority, defaulting to MEDIUM."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        return cls.MEDIUM


class RootKind(enum.Enum):
    """Which directory convention an agent root belongs to."""

    CUSTOM = "custom"
    PROJECT = "project"


@dataclass(frozen=True, slots=True)
class AgentRoot:
    """A resolved agent-definition directory tagged with its kind."""

    path: Path
    kind: RootKind

    @property
    def is_custom(self) -> bool:
        return self.kind is RootKind.CUSTOM


@dataclass(frozen=True, slots=True)
class AgentHooks:
    """Shell commands run before and after an agent executes."""

    pre: str | None = None
    post: str | None = None


@dataclass(frozen=True, slots=True)
class AgentHeader:
    """Typed view of an agent file's YAML frontmatter.

    Built once from the raw mapping by
    :func:`flowctl_agent.definitions.reader.header_from_mapping`, which
    applies the per-field fallback rules.  Fields are ``None`` when the
    header does not supply them.
    """

    name: str | None = None
    type: str | None = None
    color: str | None = None
    description: str | None = None
    capabilities: list[str] | None = None
    priority: AgentPriority = AgentPriority.MEDIUM
    hooks: AgentHooks | None = None
    hook_errors: list[str] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class AgentDefinition:
    """A fully parsed agent definition from a markdown file.

    Holds the metadata from the YAML frontmatter, the markdown body as
    the system prompt, and where on disk the definition came from.
    """

    name: str
    description: str
    capabilities: list[str] = field(default_factory=list)
    priority: AgentPriority = AgentPriority.MEDIUM
    system_prompt: str = ""
    source_path: Path = field(default_factory=lambda: Path("."))
    category: str = "custom"
    is_custom: bool = False
    type: str | None = None
    color: str | None = None
    hooks: AgentHooks | None = None

    @property
    def is_built_in(self) -> bool:
        return False


@dataclass(frozen=True, slots=True)
class BuiltInAgent:
    """A code-defined agent profile with no backing file."""

    name: str
    type: str
    description: str
    capabilities: list[str] = field(default_factory=list)

    @property
    def is_built_in(self) -> bool:
        return True

    @property
    def is_custom(self) -> bool:
        return False


@dataclass(slots=True)
class AgentValidationResult:
    """Outcome of validating a single agent file."""

    file_path: Path
    valid: bool = True
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    agent: AgentDefinition | None = None

    def fail(self, message: str) -> None:
        self.valid = False
        self.errors.append(message)


@dataclass(frozen=True, slots=True)
class AgentLoadStats:
    """Counts over the registry's current snapshot."""

    total_loaded: int = 0
    custom_agents: int = 0
    built_in_agents: int = 0
    by_category: dict[str, int] = field(default_factory=dict)
    by_type: dict[str, int] = field(default_factory=dict)
    errors: list[str] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class RegistryStats:
    """Counts over the union of built-in and discovered agents."""

    total_agents: int = 0
    built_in_count: int = 0
    custom_count: int = 0
    overridden_built_ins: list[str] = field(default_factory=list)
