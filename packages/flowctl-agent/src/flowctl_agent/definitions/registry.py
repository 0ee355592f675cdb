"""Agent registry: discovers agent files and serves them from a TTL cache."""
from __future__ import annotations

import threading
import time
from collections import Counter
from pathlib import Path
from typing import TYPE_CHECKING

from flowctl_core.errors import ScanTimeoutError
from flowctl_core.logging import get_logger

from flowctl_agent.definitions.frontmatter import parse_frontmatter
from flowctl_agent.definitions.reader import DefinitionReader, header_from_mapping
from flowctl_agent.definitions.scanner import DirectoryScanner, resolve_roots
from flowctl_agent.definitions.types import (
    AgentDefinition,
    AgentLoadStats,
    AgentRoot,
    AgentValidationResult,
    RootKind,
)

if TYPE_CHECKING:
    from collections.abc import Callable

logger = get_logger("agent.definitions.registry")

DEFAULT_CACHE_TTL = 60.0


class AgentRegistry:
    """Discovers agent definitions and caches them for ``cache_ttl`` seconds.

    Each discovery pass resolves the agent roots, reads every agent file
    and builds a fresh snapshot keyed by name.  Definitions from the
    custom root always win a name clash with the project root.  Files
    that cannot be read are skipped and reported in :attr:`load_errors`.

    Args:
        root_resolver: Returns the agent roots for a pass, custom root
            first.  Defaults to :func:`resolve_roots` from the current
            working directory.
        scanner: Enumerates agent files under a root.
        reader_factory: Creates the reader used for one discovery pass.
        clock: Monotonic time source for cache expiry.
        cache_ttl: Seconds a snapshot stays fresh.
    """

    def __init__(
        self,
        root_resolver: Callable[[], list[AgentRoot]] | None = None,
        scanner: DirectoryScanner | None = None,
        reader_factory: Callable[[], DefinitionReader] = DefinitionReader,
        clock: Callable[[], float] = time.monotonic,
        cache_ttl: float = DEFAULT_CACHE_TTL,
    ) -> None:
        self._resolve_roots = root_resolver or resolve_roots
        self._scanner = scanner or DirectoryScanner()
        self._reader_factory = reader_factory
        self._clock = clock
        self._cache_ttl = cache_ttl

        self._lock = threading.RLock()
        self._agents: dict[str, AgentDefinition] = {}
        self._errors: list[str] = []
        self._roots: list[AgentRoot] = []
        self._last_refresh: float | None = None

    # ── Cache management ─────────────────────────────────────────────

    @property
    def search_directories(self) -> list[AgentRoot]:
        """Roots used by the most recent discovery pass."""
        return list(self._roots)

    def resolve_search_directories(self) -> list[AgentRoot]:
        """Resolve the agent roots from the current disk state."""
        return self._resolve_roots()

    @property
    def load_errors(self) -> list[str]:
        """Non-fatal errors from the most recent discovery pass."""
        return list(self._errors)

    def refresh(self) -> None:
        """Rebuild the snapshot from disk.

        Roots are processed in reverse resolution order so the custom
        root is read last.  A definition replaces an existing entry only
        when it comes from the custom root.
        """
        with self._lock:
            roots = self._resolve_roots()
            reader = self._reader_factory()
            agents: dict[str, AgentDefinition] = {}

            for root in reversed(roots):
                for path in self._scan(root, reader.errors):
                    agent = reader.read(path, root)
                    if agent is None:
                        continue
                    if agent.name not in agents or agent.is_custom:
                        agents[agent.name] = agent

            self._roots = roots
            self._agents = agents
            self._errors = reader.errors
            self._last_refresh = self._clock()

        logger.info(
            "Loaded %d agent definition(s) from %d root(s), %d error(s)",
            len(agents),
            len(roots),
            len(reader.errors),
        )

    def ensure_fresh(self) -> None:
        """Refresh when the snapshot is empty or older than the TTL."""
        with self._lock:
            if not self._agents or self._is_expired():
                self.refresh()

    def refresh_on_next_read(self) -> None:
        """Expire the snapshot so the next read rebuilds it."""
        with self._lock:
            self._last_refresh = None

    def force_refresh(self) -> None:
        """Expire the snapshot and rebuild it immediately."""
        self.refresh_on_next_read()
        self.refresh()

    def clear(self) -> None:
        """Drop the snapshot and errors without scanning."""
        with self._lock:
            self._agents = {}
            self._errors = []
            self._last_refresh = None

    def _is_expired(self) -> bool:
        if self._last_refresh is None:
            return True
        return self._clock() - self._last_refresh > self._cache_ttl

    def _scan(self, root: AgentRoot, errors: list[str]) -> list[Path]:
        try:
            return self._scanner.find_markdown_files(root.path)
        except ScanTimeoutError as exc:
            logger.warning("%s", exc, extra={"root": root.path})
            errors.append(str(exc))
            return list(exc.partial)

    # ── Queries ──────────────────────────────────────────────────────

    def get_agent(self, name: str) -> AgentDefinition | None:
        self.ensure_fresh()
        return self._agents.get(name)

    def get_all_agents(self) -> list[AgentDefinition]:
        """All definitions, sorted by name."""
        self.ensure_fresh()
        return sorted(self._agents.values(), key=lambda a: a.name)

    def get_agent_names(self) -> list[str]:
        self.ensure_fresh()
        return sorted(self._agents)

    def has_agent(self, name: str) -> bool:
        self.ensure_fresh()
        return name in self._agents

    def get_agents_by_category(self, category: str) -> list[AgentDefinition]:
        return [a for a in self.get_all_agents() if a.category == category]

    def get_agents_by_type(self, agent_type: str) -> list[AgentDefinition]:
        return [a for a in self.get_all_agents() if a.type == agent_type]

    def get_custom_agents(self) -> list[AgentDefinition]:
        return [a for a in self.get_all_agents() if a.is_custom]

    def get_project_agents(self) -> list[AgentDefinition]:
        return [a for a in self.get_all_agents() if not a.is_custom]

    def search_agents(self, query: str) -> list[AgentDefinition]:
        """Case-insensitive substring match on name, description,
        capabilities and type.  An empty query matches every agent.
        """
        needle = query.lower()
        return [
            agent for agent in self.get_all_agents()
            if needle in agent.name.lower()
            or needle in agent.description.lower()
            or any(needle in cap.lower() for cap in agent.capabilities)
            or (agent.type is not None and needle in agent.type.lower())
        ]

    def get_stats(self) -> AgentLoadStats:
        agents = self.get_all_agents()
        custom = sum(1 for a in agents if a.is_custom)
        by_category = Counter(a.category or "uncategorized" for a in agents)
        by_type = Counter(a.type or "untyped" for a in agents)

        return AgentLoadStats(
            total_loaded=len(agents),
            custom_agents=custom,
            built_in_agents=len(agents) - custom,
            by_category=dict(by_category),
            by_type=dict(by_type),
            errors=self.load_errors,
        )

    # ── Validation ───────────────────────────────────────────────────

    def validate_file(
        self,
        path: Path | str,
        root: AgentRoot | None = None,
    ) -> AgentValidationResult:
        """Check one agent file, independently of the cache.

        Missing files, missing frontmatter and non-string hooks are
        errors; a missing description, capabilities or type and an empty
        body are warnings.  Never raises.
        """
        path = Path(path)
        result = AgentValidationResult(file_path=path)

        if not path.exists():
            result.fail(f"File not found: {path}")
            return result

        try:
            text = path.read_text(encoding="utf-8")
            meta, body = parse_frontmatter(text)

            if meta is None:
                result.fail(
                    "No valid YAML frontmatter found (must be enclosed in ---)"
                )
                return result

            header = header_from_mapping(meta)

            if header.description is None:
                result.warnings.append("Missing description field (recommended)")
            if not header.capabilities:
                result.warnings.append("No capabilities defined")
            if header.type is None:
                result.warnings.append('No type specified (will use "custom")')
            for message in header.hook_errors:
                result.fail(message)
            if not body.strip():
                result.warnings.append("Empty system prompt (markdown body)")

            if result.valid:
                reader = DefinitionReader()
                owner = root or self._root_for(path)
                result.agent = reader.build(path, owner, header, body)
                if result.agent is None:
                    result.fail("Failed to parse agent definition")
                    result.errors.extend(reader.errors)
        except Exception as exc:
            result.fail(f"Parse error: {exc}")

        return result

    def validate_all(self) -> list[AgentValidationResult]:
        """Validate every agent file under freshly resolved roots."""
        roots = self.resolve_search_directories()
        results: list[AgentValidationResult] = []
        for root in roots:
            for path in self._scan(root, []):
                results.append(self.validate_file(path, root))
        return results

    def _root_for(self, path: Path) -> AgentRoot:
        """The resolved root containing *path*, else its own directory."""
        target = path.absolute()
        for root in self._roots or self._resolve_roots():
            if target.is_relative_to(root.path.absolute()):
                return root
        return AgentRoot(path=target.parent, kind=RootKind.PROJECT)
