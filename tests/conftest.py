from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path

import pytest
from flowctl_agent.definitions import AgentRoot, DirectoryScanner, RootKind


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class CountingScanner(DirectoryScanner):
    """DirectoryScanner that records every directory it scans."""

    def __init__(self) -> None:
        super().__init__()
        self.scanned: list[Path] = []

    @property
    def calls(self) -> int:
        return len(self.scanned)

    def find_markdown_files(self, directory: Path) -> list[Path]:
        self.scanned.append(directory)
        return super().find_markdown_files(directory)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def counting_scanner() -> CountingScanner:
    return CountingScanner()


@pytest.fixture
def custom_root(tmp_path: Path) -> AgentRoot:
    path = tmp_path / ".claude-flow" / "agents"
    path.mkdir(parents=True)
    return AgentRoot(path=path, kind=RootKind.CUSTOM)


@pytest.fixture
def project_root(tmp_path: Path) -> AgentRoot:
    path = tmp_path / ".claude" / "agents"
    path.mkdir(parents=True)
    return AgentRoot(path=path, kind=RootKind.PROJECT)


@pytest.fixture
def isolated_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run with cwd and HOME inside tmp_path so no real config leaks in."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(tmp_path)
    return home


@pytest.fixture(autouse=True)
def _reset_flowctl_logger() -> Iterator[None]:
    """Drop handlers the CLI installs so they never outlive a test's streams."""
    yield
    logger = logging.getLogger("flowctl")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
