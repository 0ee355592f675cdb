"""flowctl CLI: command-line interface for the agent registry."""
from __future__ import annotations
