"""Tests for YAML frontmatter splitting."""
from __future__ import annotations

import textwrap

import yaml
from flowctl_agent.definitions.frontmatter import parse_frontmatter


class TestParseFrontmatter:
    def test_header_and_body(self) -> None:
        text = textwrap.dedent("""\
            ---
            name: coder
            capabilities:
              - python
              - review
            ---

            You write code.
        """)

        header, body = parse_frontmatter(text)

        assert header == {"name": "coder", "capabilities": ["python", "review"]}
        assert body == "You write code."

    def test_round_trip_nested_structure(self) -> None:
        """A dumped mapping comes back equal, and the body comes back trimmed."""
        data = {
            "name": "planner",
            "metadata": {"description": "Plans work", "capabilities": ["a", "b"]},
            "hooks": {"pre": "echo start", "post": "echo done"},
            "priority": "critical",
        }
        body = "  Plan carefully.\n\nThen act.  \n"
        text = f"---\n{yaml.safe_dump(data)}---\n{body}"

        header, parsed_body = parse_frontmatter(text)

        assert header == data
        assert parsed_body == body.strip()

    def test_crlf_line_endings(self) -> None:
        text = "---\r\nname: windows\r\n---\r\nBody text\r\n"

        header, body = parse_frontmatter(text)

        assert header == {"name": "windows"}
        assert body == "Body text"

    def test_no_frontmatter_returns_original_text(self) -> None:
        text = "# Just markdown\n\nNo header here.\n"

        header, body = parse_frontmatter(text)

        assert header is None
        assert body == text

    def test_missing_closing_delimiter(self) -> None:
        text = "---\nname: unterminated\nBody without closing line\n"

        header, body = parse_frontmatter(text)

        assert header is None
        assert body == text

    def test_leading_blank_line_is_not_frontmatter(self) -> None:
        text = "\n---\nname: late\n---\nBody\n"

        header, _ = parse_frontmatter(text)

        assert header is None

    def test_malformed_yaml_is_tolerated(self) -> None:
        """Invalid YAML degrades to 'no header' instead of raising."""
        text = textwrap.dedent("""\
            ---
            name: [unclosed
            description: broken
            ---
            Body.
        """)

        header, body = parse_frontmatter(text)

        assert header is None
        assert body == text

    def test_non_mapping_header_is_rejected(self) -> None:
        text = "---\n- just\n- a list\n---\nBody\n"

        header, body = parse_frontmatter(text)

        assert header is None
        assert body == text

    def test_empty_body(self) -> None:
        header, body = parse_frontmatter("---\nname: empty\n---\n")

        assert header == {"name": "empty"}
        assert body == ""
