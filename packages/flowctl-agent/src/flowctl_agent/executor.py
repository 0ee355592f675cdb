"""Hands agent tasks to the external agent-execution command."""
from __future__ import annotations

import subprocess
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from flowctl_core.errors import ExecutorError
from flowctl_core.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Sequence

logger = get_logger("agent.executor")

DEFAULT_COMMAND: tuple[str, ...] = ("npx", "agentic-flow")
DEFAULT_TIMEOUT_SECONDS = 300.0


@dataclass(frozen=True, slots=True)
class ExecutionOptions:
    """Optional parameters forwarded to the external command.

    ``timeout`` is in seconds.  It bounds the local wait and is passed to
    the external command as ``--timeout`` in milliseconds, the unit that
    command expects.
    """

    provider: str | None = None
    model: str | None = None
    temperature: float | None = None
    max_tokens: int | None = None
    output_format: str | None = None
    stream: bool = False
    verbose: bool = False
    optimize: bool = False
    priority: str | None = None
    max_cost: float | None = None
    retry: bool = False
    agents_dir: str | None = None
    timeout: float | None = None


@dataclass(frozen=True, slots=True)
class ExecutionOutcome:
    """Exit status and captured output of one external run."""

    returncode: int
    stdout: str = ""
    stderr: str = ""
    command: list[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.returncode == 0


def _to_millis(seconds: float | None) -> int | None:
    return None if seconds is None else round(seconds * 1000)


def build_command(
    agent: str,
    task: str,
    options: ExecutionOptions | None = None,
    base_command: Sequence[str] = DEFAULT_COMMAND,
) -> list[str]:
    """Build the argv for running *agent* on *task*.

    The task is passed as a single argument; no shell is involved, so
    it needs no quoting.
    """
    options = options or ExecutionOptions()
    argv = [*base_command, "--agent", agent, "--task", task]

    valued: list[tuple[str, object]] = [
        ("--provider", options.provider),
        ("--model", options.model),
        ("--temperature", options.temperature),
        ("--max-tokens", options.max_tokens),
        ("--output-format", options.output_format),
        ("--priority", options.priority),
        ("--max-cost", options.max_cost),
        ("--agents-dir", options.agents_dir),
        ("--timeout", _to_millis(options.timeout)),
    ]
    for flag, value in valued:
        if value is not None:
            argv.extend([flag, str(value)])

    switches = [
        ("--stream", options.stream),
        ("--verbose", options.verbose),
        ("--optimize", options.optimize),
        ("--retry", options.retry),
    ]
    argv.extend(flag for flag, enabled in switches if enabled)
    return argv


class AgentExecutor:
    """Runs the external agent-execution command and captures its output.

    A non-zero exit status is returned as-is in the outcome; only a
    missing executable or a timeout raises.

    Args:
        base_command: Program and leading arguments, e.g.
            ``["npx", "agentic-flow"]``.
        timeout: Default wall-clock limit in seconds.
    """

    def __init__(
        self,
        base_command: Sequence[str] = DEFAULT_COMMAND,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        self._base_command = list(base_command)
        self._timeout = timeout

    def run(
        self,
        agent: str,
        task: str,
        options: ExecutionOptions | None = None,
    ) -> ExecutionOutcome:
        """Run *agent* on *task* and wait for the command to finish.

        Raises:
            ExecutorError: If the command cannot be started or exceeds
                its timeout.
        """
        options = options or ExecutionOptions()
        argv = build_command(agent, task, options, self._base_command)
        timeout = options.timeout or self._timeout

        logger.info(
            "Running agent '%s' via %s",
            agent,
            self._base_command[0],
            extra={"agent": agent},
        )
        try:
            result = subprocess.run(
                argv,
                capture_output=True,
                text=True,
                timeout=timeout,
                check=False,
            )
        except FileNotFoundError as exc:
            msg = f"Agent executor not found: {self._base_command[0]}"
            raise ExecutorError(msg) from exc
        except subprocess.TimeoutExpired as exc:
            msg = f"Agent '{agent}' timed out after {timeout:g}s"
            raise ExecutorError(msg) from exc

        if result.returncode != 0:
            logger.warning(
                "Agent '%s' exited with status %d",
                agent,
                result.returncode,
                extra={"agent": agent},
            )

        return ExecutionOutcome(
            returncode=result.returncode,
            stdout=result.stdout or "",
            stderr=result.stderr or "",
            command=argv,
        )
