"""Tests for agent file discovery and root resolution."""
from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from flowctl_agent.definitions.scanner import (
    DirectoryScanner,
    is_agent_file,
    resolve_roots,
)
from flowctl_agent.definitions.types import RootKind
from flowctl_core.errors import ScanTimeoutError

if TYPE_CHECKING:
    from pathlib import Path


def _touch(path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("---\nname: x\n---\n", encoding="utf-8")
    return path


class TestIsAgentFile:
    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("coder.md", True),
            ("Coder.MD", True),
            ("README.md", False),
            ("readme.MD", False),
            ("v2-migration-notes.md", False),
            ("MIGRATION.md", False),
            ("notes.txt", False),
            ("readme-extra.md", True),
        ],
    )
    def test_eligibility(self, tmp_path: Path, name: str, expected: bool) -> None:
        assert is_agent_file(tmp_path / name) is expected


class TestDirectoryScanner:
    def test_recursive_discovery_with_exclusions(self, tmp_path: Path) -> None:
        root = tmp_path / "agents"
        expected = {
            _touch(root / "coder.md"),
            _touch(root / "core" / "planner.md"),
            _touch(root / "core" / "deep" / "nested" / "tester.MD"),
        }
        _touch(root / "README.md")
        _touch(root / "core" / "v2-migration-notes.md")
        _touch(root / "core" / "notes.txt")

        files = DirectoryScanner().find_markdown_files(root)

        assert set(files) == expected
        assert len(files) == len(expected)

    def test_order_is_deterministic(self, tmp_path: Path) -> None:
        root = tmp_path / "agents"
        for name in ("zeta.md", "alpha.md", "mid.md"):
            _touch(root / name)
        _touch(root / "sub" / "inner.md")

        files = DirectoryScanner().find_markdown_files(root)

        # Files of a directory come before its subdirectories' files
        assert [f.name for f in files] == ["alpha.md", "mid.md", "zeta.md", "inner.md"]

    def test_symlinked_directories_are_not_followed(self, tmp_path: Path) -> None:
        root = tmp_path / "agents"
        coder = _touch(root / "coder.md")
        (root / "again").symlink_to(root, target_is_directory=True)
        (root / "loop").symlink_to(root, target_is_directory=True)

        files = DirectoryScanner().find_markdown_files(root)

        assert files == [coder]

    def test_missing_directory_returns_empty(self, tmp_path: Path) -> None:
        assert DirectoryScanner().find_markdown_files(tmp_path / "missing") == []

    def test_timeout_raises_with_partial_results(self, tmp_path: Path) -> None:
        root = tmp_path / "agents"
        _touch(root / "first.md")
        _touch(root / "sub" / "second.md")

        ticks = iter([0.0, 0.0, 10.0])
        scanner = DirectoryScanner(timeout=5.0, clock=lambda: next(ticks))

        with pytest.raises(ScanTimeoutError) as excinfo:
            scanner.find_markdown_files(root)

        assert [p.name for p in excinfo.value.partial] == ["first.md"]


class TestResolveRoots:
    def test_both_roots_at_cwd(self, tmp_path: Path) -> None:
        custom = tmp_path / ".claude-flow" / "agents"
        project = tmp_path / ".claude" / "agents"
        custom.mkdir(parents=True)
        project.mkdir(parents=True)

        roots = resolve_roots(tmp_path)

        assert [(r.path, r.kind) for r in roots] == [
            (custom, RootKind.CUSTOM),
            (project, RootKind.PROJECT),
        ]

    def test_walks_up_to_nearest_ancestor(self, tmp_path: Path) -> None:
        project = tmp_path / ".claude" / "agents"
        project.mkdir(parents=True)
        cwd = tmp_path / "src" / "pkg"
        cwd.mkdir(parents=True)

        roots = resolve_roots(cwd)

        assert [(r.path, r.kind) for r in roots] == [(project, RootKind.PROJECT)]

    def test_stops_at_first_level_with_a_root(self, tmp_path: Path) -> None:
        """A higher-level project root is not merged with a nearer custom root."""
        (tmp_path / ".claude" / "agents").mkdir(parents=True)
        nested = tmp_path / "service"
        custom = nested / ".claude-flow" / "agents"
        custom.mkdir(parents=True)

        roots = resolve_roots(nested)

        assert [(r.path, r.kind) for r in roots] == [(custom, RootKind.CUSTOM)]

    def test_configured_directory_names(self, tmp_path: Path) -> None:
        custom = tmp_path / ".agents" / "mine"
        custom.mkdir(parents=True)

        roots = resolve_roots(
            tmp_path, custom_dir=".agents/mine", project_dir=".agents/shared"
        )

        assert [(r.path, r.kind) for r in roots] == [(custom, RootKind.CUSTOM)]
