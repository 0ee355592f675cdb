"""Tests for the unified view over built-in and discovered agents."""
from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from flowctl_agent.definitions import (
    BUILT_IN_AGENTS,
    DEFAULT_CAPABILITIES,
    AgentDefinition,
    AgentHooks,
    AgentRegistry,
    BuiltInAgent,
    UnifiedAgentRegistry,
)
from flowctl_core.errors import AgentNotFoundError

if TYPE_CHECKING:
    from pathlib import Path

    from flowctl_agent.definitions import AgentRoot
    from tests.conftest import CountingScanner, FakeClock


def _write_agent(path: Path, content: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


@pytest.fixture
def unified(
    custom_root: AgentRoot,
    project_root: AgentRoot,
    clock: FakeClock,
    counting_scanner: CountingScanner,
) -> UnifiedAgentRegistry:
    registry = AgentRegistry(
        root_resolver=lambda: [custom_root, project_root],
        scanner=counting_scanner,
        clock=clock,
    )
    return UnifiedAgentRegistry(registry)


_CODER_MD = """\
---
name: coder
type: developer
description: House coding standards
capabilities:
  - Rust
hooks:
  pre: cargo fmt
---
Follow the house style.
"""


class TestBuiltIns:
    def test_catalog(self) -> None:
        names = [a.name for a in BUILT_IN_AGENTS]

        assert names == [
            "coordinator",
            "researcher",
            "coder",
            "analyst",
            "architect",
            "tester",
            "reviewer",
            "optimizer",
            "general",
        ]
        assert all(a.is_built_in and not a.is_custom for a in BUILT_IN_AGENTS)

    def test_no_files_means_only_built_ins(self, unified: UnifiedAgentRegistry) -> None:
        agents = unified.get_all_agents()

        assert len(agents) == len(BUILT_IN_AGENTS)
        assert [a.name for a in agents] == sorted(a.name for a in BUILT_IN_AGENTS)
        assert unified.get_stats().total_agents == 9


class TestShadowing:
    def test_file_shadows_built_in(
        self, unified: UnifiedAgentRegistry, custom_root: AgentRoot
    ) -> None:
        _write_agent(custom_root.path / "coder.md", _CODER_MD)

        agent = unified.get_agent("coder")

        assert isinstance(agent, AgentDefinition)
        assert agent.description == "House coding standards"
        assert unified.is_custom_agent("coder") is True
        assert [a.name for a in unified.get_all_agents()].count("coder") == 1

    def test_stats_report_overridden(
        self, unified: UnifiedAgentRegistry, custom_root: AgentRoot
    ) -> None:
        _write_agent(custom_root.path / "coder.md", _CODER_MD)

        stats = unified.get_stats()

        assert stats.overridden_built_ins == ["coder"]
        assert stats.built_in_count == 9
        assert stats.custom_count == 1
        assert stats.total_agents == 9

    def test_new_name_adds_to_total(
        self, unified: UnifiedAgentRegistry, project_root: AgentRoot
    ) -> None:
        _write_agent(project_root.path / "scribe.md", "---\nname: scribe\n---\nWrite.\n")

        stats = unified.get_stats()

        assert stats.total_agents == 10
        assert stats.overridden_built_ins == []
        assert "scribe" in unified.get_agent_names()

    def test_built_in_returns_after_file_removed(
        self, unified: UnifiedAgentRegistry, custom_root: AgentRoot
    ) -> None:
        path = _write_agent(custom_root.path / "coder.md", _CODER_MD)
        assert isinstance(unified.get_agent("coder"), AgentDefinition)

        path.unlink()
        unified.refresh()

        assert isinstance(unified.get_agent("coder"), BuiltInAgent)
        assert unified.is_custom_agent("coder") is False


class TestLookup:
    def test_first_query_scans_once(
        self,
        unified: UnifiedAgentRegistry,
        project_root: AgentRoot,
        counting_scanner: CountingScanner,
    ) -> None:
        _write_agent(project_root.path / "scribe.md", "---\nname: scribe\n---\nWrite.\n")
        assert counting_scanner.calls == 0

        unified.get_agent("scribe")
        unified.has_agent("scribe")
        unified.get_all_agents()

        # One pass over each of the two roots
        assert counting_scanner.calls == 2

    def test_unknown_agent(self, unified: UnifiedAgentRegistry) -> None:
        assert unified.get_agent("nobody") is None
        assert unified.has_agent("nobody") is False
        assert unified.is_custom_agent("nobody") is False

    def test_require_agent(self, unified: UnifiedAgentRegistry) -> None:
        assert unified.require_agent("coder").name == "coder"

        with pytest.raises(AgentNotFoundError, match="nobody"):
            unified.require_agent("nobody")

    def test_built_in_lookup(self, unified: UnifiedAgentRegistry) -> None:
        agent = unified.get_agent("tester")

        assert isinstance(agent, BuiltInAgent)
        assert unified.has_agent("tester") is True
        assert unified.is_custom_agent("tester") is False

    def test_filters_and_search(
        self, unified: UnifiedAgentRegistry, custom_root: AgentRoot
    ) -> None:
        _write_agent(custom_root.path / "coder.md", _CODER_MD)

        assert [a.name for a in unified.get_agents_by_type("developer")] == ["coder"]
        assert [a.name for a in unified.get_agents_by_type("tester")] == ["tester"]
        assert [a.name for a in unified.get_custom_agents()] == ["coder"]
        assert len(unified.get_built_in_agents()) == 9
        assert [a.name for a in unified.search_agents("rust")] == ["coder"]
        assert [a.name for a in unified.search_agents("profiling")] == ["optimizer"]


class TestAccessors:
    def test_discovered_fields(
        self, unified: UnifiedAgentRegistry, custom_root: AgentRoot
    ) -> None:
        path = _write_agent(custom_root.path / "coder.md", _CODER_MD)

        assert unified.get_agent_capabilities("coder") == ["Rust"]
        assert unified.get_agent_system_prompt("coder") == "Follow the house style."
        assert unified.get_agent_hooks("coder") == AgentHooks(pre="cargo fmt")
        assert unified.get_agent_source_path("coder") == path.absolute()

    def test_built_in_fields(self, unified: UnifiedAgentRegistry) -> None:
        assert unified.get_agent_capabilities("architect") == [
            "System Design",
            "Architecture",
            "Technical Planning",
            "Integration",
        ]
        assert unified.get_agent_system_prompt("architect") is None
        assert unified.get_agent_hooks("architect") is None
        assert unified.get_agent_source_path("architect") is None

    def test_unknown_name_gets_default_capabilities(
        self, unified: UnifiedAgentRegistry
    ) -> None:
        assert unified.get_agent_capabilities("nobody") == list(DEFAULT_CAPABILITIES)

    def test_empty_prompt_is_none(
        self, unified: UnifiedAgentRegistry, project_root: AgentRoot
    ) -> None:
        _write_agent(project_root.path / "quiet.md", "---\nname: quiet\n---\n")

        assert unified.get_agent_system_prompt("quiet") is None
