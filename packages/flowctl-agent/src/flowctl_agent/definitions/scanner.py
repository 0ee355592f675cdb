"""Agent root resolution and markdown file discovery."""
from __future__ import annotations

import time
from collections import deque
from pathlib import Path
from typing import TYPE_CHECKING

from flowctl_core.errors import ScanTimeoutError
from flowctl_core.logging import get_logger

from flowctl_agent.definitions.types import AgentRoot, RootKind

if TYPE_CHECKING:
    from collections.abc import Callable

logger = get_logger("agent.definitions.scanner")

# Directory conventions, relative to each ancestor of the working directory
DEFAULT_CUSTOM_DIR = Path(".claude-flow") / "agents"
DEFAULT_PROJECT_DIR = Path(".claude") / "agents"

_MARKDOWN_SUFFIX = ".md"
_INDEX_NAME = "readme.md"
_MIGRATION_MARKER = "migration"


def is_agent_file(path: Path) -> bool:
    """True for ``.md`` files other than READMEs and migration notes."""
    if path.suffix.lower() != _MARKDOWN_SUFFIX:
        return False
    lower_name = path.name.lower()
    return lower_name != _INDEX_NAME and _MIGRATION_MARKER not in lower_name


def _roots_at(
    directory: Path,
    custom_dir: Path,
    project_dir: Path,
) -> list[AgentRoot]:
    roots: list[AgentRoot] = []
    for relative, kind in (
        (custom_dir, RootKind.CUSTOM),
        (project_dir, RootKind.PROJECT),
    ):
        candidate = directory / relative
        if candidate.exists():
            roots.append(AgentRoot(path=candidate, kind=kind))
    return roots


def resolve_roots(
    cwd: Path | None = None,
    custom_dir: Path | str = DEFAULT_CUSTOM_DIR,
    project_dir: Path | str = DEFAULT_PROJECT_DIR,
) -> list[AgentRoot]:
    """Find the agent roots nearest to *cwd*.

    Walks from *cwd* up through its parents and stops at the first level
    where the custom root, the project root, or both exist.  Roots at
    higher levels are not merged in.  When no ancestor has either root,
    the two conventions directly under *cwd* are checked.

    Returns:
        The roots found, custom root first.
    """
    start = (Path.cwd() if cwd is None else Path(cwd)).absolute()
    custom_dir = Path(custom_dir)
    project_dir = Path(project_dir)

    current = start
    while current.parent != current:
        roots = _roots_at(current, custom_dir, project_dir)
        if roots:
            return roots
        current = current.parent

    return _roots_at(start, custom_dir, project_dir)


class DirectoryScanner:
    """Enumerates agent files below a root directory.

    Traversal is iterative and breadth-first.  Entries are sorted by
    name within each directory so encounter order is stable across
    platforms.  Symlinked directories are not followed, so link loops
    cannot repeat a subtree.

    Args:
        timeout: Optional limit, in seconds, for a single
            :meth:`find_markdown_files` call.  The deadline is checked
            between directory listings.
        clock: Monotonic time source used for the deadline.
    """

    def __init__(
        self,
        timeout: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._timeout = timeout
        self._clock = clock

    def find_markdown_files(self, directory: Path) -> list[Path]:
        """Return every agent file below *directory*, recursively.

        A missing directory yields an empty list.

        Raises:
            ScanTimeoutError: If the configured timeout elapses.  The
                files found so far are in ``exc.partial``.
        """
        files: list[Path] = []
        if not directory.is_dir():
            logger.debug("Skipping non-existent path: %s", directory)
            return files

        deadline = (
            self._clock() + self._timeout if self._timeout is not None else None
        )
        pending: deque[Path] = deque([directory])

        while pending:
            if deadline is not None and self._clock() > deadline:
                msg = f"Scan of {directory} exceeded {self._timeout}s"
                raise ScanTimeoutError(msg, partial=files)

            current = pending.popleft()
            try:
                entries = sorted(current.iterdir(), key=lambda p: p.name)
            except OSError:
                logger.warning("Cannot list directory %s", current, exc_info=True)
                continue

            for entry in entries:
                if entry.is_symlink() and entry.is_dir():
                    logger.debug("Not following directory symlink %s", entry)
                elif entry.is_dir():
                    pending.append(entry)
                elif entry.is_file() and is_agent_file(entry):
                    files.append(entry)

        return files
