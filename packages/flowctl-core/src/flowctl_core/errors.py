from __future__ import annotations


class FlowctlError(Exception):
    """Base exception for all flowctl errors."""


# ── Agent Errors ─────────────────────────────────────────────────────

class AgentError(FlowctlError):
    """Base for agent-related errors."""


class AgentNotFoundError(AgentError):
    """Agent not found in the registry."""


class ScanTimeoutError(AgentError):
    """Agent directory scan exceeded its configured deadline.

    ``partial`` holds the files found before the scan gave up.
    """

    def __init__(self, message: str, partial: list | None = None) -> None:
        super().__init__(message)
        self.partial = partial if partial is not None else []


# ── Config Errors ────────────────────────────────────────────────────

class ConfigError(FlowctlError):
    """Invalid or missing configuration."""


# ── Executor Errors ──────────────────────────────────────────────────

class ExecutorError(FlowctlError):
    """The external agent-execution command could not be run."""
