"""Unified registry: built-in agent profiles merged with discovered ones."""
from __future__ import annotations

from typing import TYPE_CHECKING

from flowctl_core.errors import AgentNotFoundError
from flowctl_core.logging import get_logger

from flowctl_agent.definitions.builtins import BUILT_IN_AGENTS, DEFAULT_CAPABILITIES
from flowctl_agent.definitions.types import RegistryStats

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path

    from flowctl_agent.definitions.registry import AgentRegistry
    from flowctl_agent.definitions.types import (
        AgentDefinition,
        AgentHooks,
        BuiltInAgent,
    )

logger = get_logger("agent.definitions.unified")


class UnifiedAgentRegistry:
    """Single view over built-in profiles and discovered agent files.

    A discovered definition shadows a built-in profile of the same name;
    the built-in stays in the catalog and reappears once the file is
    gone.  The first query forces a refresh of the underlying
    :class:`AgentRegistry`; later queries rely on its TTL cache.
    """

    def __init__(
        self,
        registry: AgentRegistry,
        built_ins: Iterable[BuiltInAgent] = BUILT_IN_AGENTS,
    ) -> None:
        self._registry = registry
        self._built_ins: dict[str, BuiltInAgent] = {a.name: a for a in built_ins}
        self._initialized = False

    @property
    def registry(self) -> AgentRegistry:
        return self._registry

    def _ensure_initialized(self) -> None:
        if not self._initialized:
            self._registry.force_refresh()
            self._initialized = True

    def refresh(self) -> None:
        """Reload discovered agents from disk."""
        self._registry.force_refresh()
        self._initialized = True

    # ── Lookup ───────────────────────────────────────────────────────

    def get_agent(self, name: str) -> AgentDefinition | BuiltInAgent | None:
        """Discovered definition first, then the built-in profile."""
        self._ensure_initialized()
        discovered = self._registry.get_agent(name)
        if discovered is not None:
            return discovered
        return self._built_ins.get(name)

    def require_agent(self, name: str) -> AgentDefinition | BuiltInAgent:
        """Like :meth:`get_agent`, but raises when *name* is unknown.

        Raises:
            AgentNotFoundError: If neither a file nor a built-in matches.
        """
        agent = self.get_agent(name)
        if agent is None:
            msg = f"Agent not found: '{name}'"
            raise AgentNotFoundError(msg)
        return agent

    def has_agent(self, name: str) -> bool:
        self._ensure_initialized()
        return self._registry.has_agent(name) or name in self._built_ins

    def is_custom_agent(self, name: str) -> bool:
        """True when *name* is backed by a discovered agent file."""
        self._ensure_initialized()
        return self._registry.has_agent(name)

    def get_all_agents(self) -> list[AgentDefinition | BuiltInAgent]:
        """Built-ins overlaid by discovered definitions, sorted by name."""
        self._ensure_initialized()
        merged: dict[str, AgentDefinition | BuiltInAgent] = dict(self._built_ins)
        for agent in self._registry.get_all_agents():
            merged[agent.name] = agent
        return sorted(merged.values(), key=lambda a: a.name)

    def get_agent_names(self) -> list[str]:
        return [a.name for a in self.get_all_agents()]

    def get_built_in_agents(self) -> list[BuiltInAgent]:
        return list(self._built_ins.values())

    def get_custom_agents(self) -> list[AgentDefinition]:
        self._ensure_initialized()
        return self._registry.get_custom_agents()

    def get_agents_by_type(
        self, agent_type: str
    ) -> list[AgentDefinition | BuiltInAgent]:
        return [a for a in self.get_all_agents() if a.type == agent_type]

    def search_agents(self, query: str) -> list[AgentDefinition | BuiltInAgent]:
        needle = query.lower()
        return [
            agent for agent in self.get_all_agents()
            if needle in agent.name.lower()
            or needle in agent.description.lower()
            or any(needle in cap.lower() for cap in agent.capabilities)
            or (agent.type is not None and needle in agent.type.lower())
        ]

    # ── Field accessors ──────────────────────────────────────────────

    def get_agent_capabilities(self, name: str) -> list[str]:
        agent = self.get_agent(name)
        if agent is not None:
            return list(agent.capabilities)
        return list(DEFAULT_CAPABILITIES)

    def get_agent_system_prompt(self, name: str) -> str | None:
        agent = self._discovered(name)
        if agent is None or not agent.system_prompt:
            return None
        return agent.system_prompt

    def get_agent_hooks(self, name: str) -> AgentHooks | None:
        agent = self._discovered(name)
        return agent.hooks if agent is not None else None

    def get_agent_source_path(self, name: str) -> Path | None:
        agent = self._discovered(name)
        return agent.source_path if agent is not None else None

    def _discovered(self, name: str) -> AgentDefinition | None:
        self._ensure_initialized()
        return self._registry.get_agent(name)

    # ── Statistics ───────────────────────────────────────────────────

    def get_stats(self) -> RegistryStats:
        self._ensure_initialized()
        discovered = self._registry.get_agent_names()
        shadowing = set(discovered)
        overridden = [name for name in self._built_ins if name in shadowing]
        if overridden:
            logger.debug("Built-in agents shadowed by files: %s", overridden)

        return RegistryStats(
            total_agents=len(self._built_ins) + len(discovered) - len(overridden),
            built_in_count=len(self._built_ins),
            custom_count=len(discovered),
            overridden_built_ins=overridden,
        )
