"""Turns one agent markdown file into an AgentDefinition."""
from __future__ import annotations

import re
from pathlib import Path
from typing import TYPE_CHECKING, Any

from flowctl_core.logging import get_logger

from flowctl_agent.definitions.frontmatter import parse_frontmatter
from flowctl_agent.definitions.types import (
    AgentDefinition,
    AgentHeader,
    AgentHooks,
    AgentPriority,
    AgentRoot,
)

if TYPE_CHECKING:
    from collections.abc import Callable

logger = get_logger("agent.definitions.reader")

_WHITESPACE_RUN = re.compile(r"\s+")

DEFAULT_CATEGORY = "custom"


def _read_utf8(path: Path) -> str:
    return path.read_text(encoding="utf-8")


# ── Header resolution ────────────────────────────────────────────────


def _present(value: Any) -> bool:
    return value is not None and value != ""


def _optional_str(value: Any) -> str | None:
    return str(value) if _present(value) else None


def _metadata(meta: dict[str, Any]) -> dict[str, Any]:
    nested = meta.get("metadata")
    return nested if isinstance(nested, dict) else {}


def _as_str_list(value: Any) -> list[str]:
    """Coerce a value to a list of strings, or return empty list."""
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return [str(item) for item in value]
    return [str(value)]


def resolve_description(meta: dict[str, Any]) -> str | None:
    """``description``, else ``metadata.description``."""
    for value in (meta.get("description"), _metadata(meta).get("description")):
        if _present(value):
            return str(value)
    return None


def resolve_capabilities(meta: dict[str, Any]) -> list[str] | None:
    """``capabilities``, else ``metadata.capabilities``, as a list."""
    for value in (meta.get("capabilities"), _metadata(meta).get("capabilities")):
        if _present(value):
            return _as_str_list(value)
    return None


def resolve_hooks(meta: dict[str, Any]) -> tuple[AgentHooks | None, list[str]]:
    """Return the string-valued hooks and messages for malformed ones."""
    raw = meta.get("hooks")
    if not isinstance(raw, dict):
        return None, []

    errors: list[str] = []
    commands: dict[str, str | None] = {}
    for key in ("pre", "post"):
        value = raw.get(key)
        if value is None or isinstance(value, str):
            commands[key] = value
        else:
            errors.append(f"hooks.{key} must be a string")
            commands[key] = None

    if commands["pre"] is None and commands["post"] is None:
        return None, errors
    return AgentHooks(pre=commands["pre"], post=commands["post"]), errors


def header_from_mapping(meta: dict[str, Any]) -> AgentHeader:
    """Build a typed :class:`AgentHeader` from raw frontmatter."""
    hooks, hook_errors = resolve_hooks(meta)
    return AgentHeader(
        name=_optional_str(meta.get("name")),
        type=_optional_str(meta.get("type")),
        color=_optional_str(meta.get("color")),
        description=resolve_description(meta),
        capabilities=resolve_capabilities(meta),
        priority=AgentPriority.coerce(meta.get("priority")),
        hooks=hooks,
        hook_errors=hook_errors,
    )


# ── Path helpers ─────────────────────────────────────────────────────


def derive_name(path: Path) -> str:
    """Agent name from a file name: ``My Agent.md`` -> ``my-agent``."""
    stem = path.stem.strip().lower()
    return _WHITESPACE_RUN.sub("-", stem)


def extract_category(path: Path, root_path: Path) -> str:
    """First directory below *root_path*, or ``custom`` at the top level."""
    try:
        parts = path.absolute().relative_to(root_path.absolute()).parts
    except ValueError:
        return DEFAULT_CATEGORY
    if len(parts) > 1:
        return parts[0]
    return DEFAULT_CATEGORY


# ── Reader ───────────────────────────────────────────────────────────


class DefinitionReader:
    """Reads agent files, collecting non-fatal errors instead of raising.

    One reader is used per discovery pass; :attr:`errors` holds a
    message for every file that was skipped.

    Args:
        read_text: Returns the contents of a path.  Defaults to reading
            the file as UTF-8.
    """

    def __init__(self, read_text: Callable[[Path], str] | None = None) -> None:
        self._read_text = read_text or _read_utf8
        self.errors: list[str] = []

    def read(self, path: Path, root: AgentRoot) -> AgentDefinition | None:
        """Parse *path*, discovered under *root*, or return ``None``."""
        try:
            text = self._read_text(path)
            meta, body = parse_frontmatter(text)

            if meta is None:
                self._skip(path, f"No frontmatter found in {path}")
                return None

            return self.build(path, root, header_from_mapping(meta), body)
        except Exception as exc:
            self._skip(path, f"Error parsing {path}: {exc}")
            return None

    def build(
        self,
        path: Path,
        root: AgentRoot,
        header: AgentHeader,
        body: str,
    ) -> AgentDefinition | None:
        name = header.name or derive_name(path)
        if not name:
            self._skip(path, f"Missing name field in {path}")
            return None

        return AgentDefinition(
            name=name,
            description=header.description or f"Agent defined in {path.name}",
            capabilities=header.capabilities or [],
            priority=header.priority,
            system_prompt=body,
            source_path=path.absolute(),
            category=extract_category(path, root.path),
            is_custom=root.is_custom,
            type=header.type,
            color=header.color,
            hooks=header.hooks,
        )

    def _skip(self, path: Path, message: str) -> None:
        logger.warning("Skipping agent file: %s", message, extra={"path": path})
        self.errors.append(message)
