"""YAML frontmatter splitting for agent markdown files."""
from __future__ import annotations

import re
from typing import Any

import yaml

_FRONTMATTER_PATTERN = re.compile(
    r"^---\r?\n(.*?)\r?\n---\r?\n(.*)$",
    re.DOTALL,
)


def parse_frontmatter(text: str) -> tuple[dict[str, Any] | None, str]:
    """Split *text* into a parsed YAML header and a markdown body.

    The document must start with a ``---`` line, followed by the header
    block, a closing ``---`` line and the body.  Line breaks may be
    ``\\r\\n``.

    Returns:
        ``(header, body)`` with the body stripped, or ``(None, text)``
        when the document has no frontmatter or the header is not a
        YAML mapping.
    """
    match = _FRONTMATTER_PATTERN.match(text)
    if match is None:
        return None, text

    try:
        header = yaml.safe_load(match.group(1))
    except yaml.YAMLError:
        return None, text

    if not isinstance(header, dict):
        return None, text

    return header, match.group(2).strip()
