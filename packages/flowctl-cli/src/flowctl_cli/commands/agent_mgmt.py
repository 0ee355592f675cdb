"""Agent management commands: list, show, search, stats, validate, run."""
from __future__ import annotations

import sys
from functools import partial
from pathlib import Path
from typing import TYPE_CHECKING

import typer
from flowctl_agent.definitions import (
    AgentRegistry,
    DirectoryScanner,
    UnifiedAgentRegistry,
    resolve_roots,
)
from flowctl_agent.executor import AgentExecutor, ExecutionOptions
from flowctl_core.config import FlowctlConfig
from flowctl_core.errors import AgentNotFoundError, FlowctlError
from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

if TYPE_CHECKING:
    from flowctl_agent.definitions import (
        AgentDefinition,
        AgentValidationResult,
        BuiltInAgent,
    )

console = Console()
err_console = Console(stderr=True)

agent_app = typer.Typer(
    no_args_is_help=True,
)

_PROMPT_PREVIEW_CHARS = 500
_AGENT_FILE_HINT = (
    "Place agent .md files in .claude-flow/agents/ (custom) "
    "or .claude/agents/ (project)."
)


def _build_registry(config: FlowctlConfig | None = None) -> UnifiedAgentRegistry:
    """Build the registry stack from configuration."""
    config = config or FlowctlConfig.load()
    agents = config.agents
    registry = AgentRegistry(
        root_resolver=partial(
            resolve_roots,
            custom_dir=agents.custom_dir,
            project_dir=agents.project_dir,
        ),
        scanner=DirectoryScanner(timeout=agents.scan_timeout_seconds),
        cache_ttl=agents.cache_ttl_seconds,
    )
    return UnifiedAgentRegistry(registry)


def _format_caps(capabilities: list[str], limit: int | None = None) -> str:
    if not capabilities:
        return "-"
    shown = capabilities if limit is None else capabilities[:limit]
    text = ", ".join(shown)
    if limit is not None and len(capabilities) > limit:
        text += ", ..."
    return text


@agent_app.command("list")
def agent_list() -> None:
    """List built-in and discovered agents."""
    unified = _build_registry()
    agents = unified.get_all_agents()
    stats = unified.get_stats()

    table = Table(
        title="Available Agents",
        show_header=True,
        header_style="bold cyan",
    )
    table.add_column("Name", style="bold")
    table.add_column("Type")
    table.add_column("Priority", justify="center")
    table.add_column("Source")
    table.add_column("Capabilities")

    # Discovered agents first, then built-ins
    for agent in sorted(agents, key=lambda a: (a.is_built_in, a.name)):
        if agent.is_built_in:
            priority, source = "-", "built-in"
        else:
            priority = agent.priority.value
            source = "custom" if agent.is_custom else "project"
        table.add_row(
            agent.name,
            agent.type or "custom",
            priority,
            source,
            _format_caps(agent.capabilities, limit=4),
        )

    console.print(table)
    summary = (
        f"\n[dim]{stats.total_agents} agent(s): "
        f"{stats.built_in_count} built-in, {stats.custom_count} from files.[/dim]"
    )
    console.print(summary)
    if stats.overridden_built_ins:
        console.print(
            "[dim]Overridden built-ins: "
            f"{', '.join(stats.overridden_built_ins)}[/dim]"
        )


@agent_app.command("show")
def agent_show(
    name: str = typer.Argument(..., help="Name of the agent to inspect"),
) -> None:
    """Show detailed information about an agent."""
    unified = _build_registry()
    try:
        match = unified.require_agent(name)
    except AgentNotFoundError as exc:
        console.print(f"[red]{exc}[/red]")
        console.print(
            f"[dim]Available agents: {', '.join(unified.get_agent_names())}[/dim]"
        )
        raise typer.Exit(1) from None

    if match.is_built_in:
        _show_built_in(match)
    else:
        _show_definition(match)


def _show_built_in(agent: BuiltInAgent) -> None:
    meta_lines = [
        f"[bold]Name:[/bold]          {agent.name}",
        f"[bold]Type:[/bold]          {agent.type}",
        "[bold]Source:[/bold]        built-in",
        f"[bold]Description:[/bold]   {agent.description}",
        f"[bold]Capabilities:[/bold]  {_format_caps(agent.capabilities)}",
    ]
    console.print(Panel(
        "\n".join(meta_lines),
        title=f"Agent: {agent.name}",
        border_style="cyan",
    ))


def _show_definition(agent: AgentDefinition) -> None:
    meta_lines = [
        f"[bold]Name:[/bold]          {agent.name}",
        f"[bold]Type:[/bold]          {agent.type or 'custom'}",
        f"[bold]Priority:[/bold]      {agent.priority.value}",
        f"[bold]Category:[/bold]      {agent.category}",
        f"[bold]Description:[/bold]   {agent.description}",
        f"[bold]Capabilities:[/bold]  {_format_caps(agent.capabilities)}",
    ]
    if agent.color:
        meta_lines.append(f"[bold]Color:[/bold]         {agent.color}")
    if agent.hooks is not None:
        if agent.hooks.pre:
            meta_lines.append(
                f"[bold]Pre-hook:[/bold]      {_first_line(agent.hooks.pre)}"
            )
        if agent.hooks.post:
            meta_lines.append(
                f"[bold]Post-hook:[/bold]     {_first_line(agent.hooks.post)}"
            )
    origin = "custom" if agent.is_custom else "project"
    meta_lines.append(f"[bold]Source:[/bold]        {agent.source_path} ({origin})")

    console.print(Panel(
        "\n".join(meta_lines),
        title=f"Agent: {agent.name}",
        border_style="cyan",
    ))

    if agent.system_prompt:
        preview = agent.system_prompt
        if len(preview) > _PROMPT_PREVIEW_CHARS:
            remaining = len(preview) - _PROMPT_PREVIEW_CHARS
            preview = (
                preview[:_PROMPT_PREVIEW_CHARS]
                + f"\n\n... ({remaining} more characters)"
            )
        console.print()
        console.print(Panel(
            Syntax(preview, "markdown", theme="monokai", word_wrap=True),
            title=f"System Prompt ({len(agent.system_prompt)} chars)",
            border_style="dim",
        ))
    else:
        console.print("\n[dim]No system prompt defined.[/dim]")


def _first_line(command: str) -> str:
    first, _, rest = command.partition("\n")
    return f"{first}..." if rest else first


@agent_app.command("search")
def agent_search(
    query: str = typer.Argument(..., help="Text to match against agents"),
) -> None:
    """Search agents by name, description, capability, or type."""
    unified = _build_registry()
    matches = unified.search_agents(query)

    if not matches:
        console.print(f"[yellow]No agents match[/yellow] '{query}'.")
        raise typer.Exit(0)

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Name", style="bold")
    table.add_column("Description")
    table.add_column("Capabilities")
    for agent in matches:
        table.add_row(
            agent.name,
            agent.description,
            _format_caps(agent.capabilities, limit=4),
        )
    console.print(table)
    console.print(f"\n[dim]{len(matches)} match(es).[/dim]")


@agent_app.command("stats")
def agent_stats() -> None:
    """Show counts of discovered agents and load errors."""
    unified = _build_registry()
    registry_stats = unified.get_stats()
    load_stats = unified.registry.get_stats()

    table = Table(show_header=False, box=None)
    table.add_column("Key", style="bold")
    table.add_column("Value")
    table.add_row("Total agents", str(registry_stats.total_agents))
    table.add_row("Built-in", str(registry_stats.built_in_count))
    table.add_row("From files", str(load_stats.total_loaded))
    table.add_row("  custom", str(load_stats.custom_agents))
    table.add_row("  project", str(load_stats.built_in_agents))
    for category, count in sorted(load_stats.by_category.items()):
        table.add_row(f"Category: {category}", str(count))
    for agent_type, count in sorted(load_stats.by_type.items()):
        table.add_row(f"Type: {agent_type}", str(count))
    if registry_stats.overridden_built_ins:
        table.add_row(
            "Overridden built-ins",
            ", ".join(registry_stats.overridden_built_ins),
        )
    console.print(table)

    if load_stats.errors:
        console.print("\n[yellow]Load errors:[/yellow]")
        for error in load_stats.errors:
            console.print(f"  [yellow]-[/yellow] {error}")


@agent_app.command("validate")
def agent_validate(
    path: str | None = typer.Argument(
        None,
        help="Path to an agent .md file. "
        "If omitted, validates every file under the agent roots.",
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Show parsed details for valid files"
    ),
) -> None:
    """Validate agent definition file(s) and report errors."""
    unified = _build_registry()
    registry = unified.registry

    if path is not None:
        results = [registry.validate_file(Path(path).expanduser())]
    else:
        roots = registry.resolve_search_directories()
        if not roots:
            console.print(f"[yellow]No agent directories found.[/yellow] {_AGENT_FILE_HINT}")
            raise typer.Exit(0)
        console.print("[bold]Search directories:[/bold]")
        for root in roots:
            console.print(f"  {root.path} [dim]({root.kind.value})[/dim]")
        console.print()
        results = registry.validate_all()

    if not results:
        console.print("[yellow]No agent files found to validate.[/yellow]")
        raise typer.Exit(0)

    for result in results:
        _report_validation(result, verbose)

    invalid = sum(1 for r in results if not r.valid)
    with_warnings = sum(1 for r in results if r.valid and r.warnings)
    console.print()
    if invalid == 0:
        console.print(
            f"[green]All {len(results)} file(s) passed validation[/green]"
            f" [dim]({with_warnings} with warnings)[/dim]"
        )
    else:
        console.print(
            f"[red]{invalid} of {len(results)} file(s) invalid.[/red]"
        )
        raise typer.Exit(1)


def _report_validation(result: AgentValidationResult, verbose: bool) -> None:
    """Print validation results for a single file."""
    name = result.file_path.name
    if not result.valid:
        console.print(f"  [red]FAIL[/red] {name}")
    elif result.warnings:
        console.print(f"  [yellow]WARN[/yellow] {name}")
    else:
        console.print(f"  [green]OK[/green]   {name}")

    for err in result.errors:
        console.print(f"        [red]-[/red] {err}")
    for warning in result.warnings:
        console.print(f"        [yellow]-[/yellow] {warning}")

    if verbose and result.agent is not None:
        agent = result.agent
        console.print(
            f"        [dim]name={agent.name} type={agent.type or 'custom'} "
            f"capabilities={len(agent.capabilities)}[/dim]"
        )


@agent_app.command("run")
def agent_run(
    name: str = typer.Argument(..., help="Name of the agent to run"),
    task: str = typer.Argument(..., help="Task description for the agent"),
    provider: str | None = typer.Option(None, help="Model provider"),
    model: str | None = typer.Option(None, help="Model name"),
    temperature: float | None = typer.Option(None, help="Sampling temperature"),
    max_tokens: int | None = typer.Option(None, help="Maximum output tokens"),
    output_format: str | None = typer.Option(None, "--format", help="Output format"),
    stream: bool = typer.Option(False, help="Stream output"),
    optimize: bool = typer.Option(False, help="Let the executor pick a model"),
    priority: str | None = typer.Option(None, help="Optimization priority"),
    max_cost: float | None = typer.Option(None, help="Cost ceiling per task"),
    retry: bool = typer.Option(False, help="Retry failed requests"),
    agents_dir: str | None = typer.Option(None, help="Executor agents directory"),
    timeout: float | None = typer.Option(None, help="Timeout in seconds"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show stderr"),
) -> None:
    """Run an agent on a task through the external agent executor."""
    config = FlowctlConfig.load()
    unified = _build_registry(config)

    if not unified.has_agent(name):
        console.print(
            f"[yellow]'{name}' is not a known agent; "
            "passing it to the executor as-is.[/yellow]"
        )

    options = ExecutionOptions(
        provider=provider or config.executor.default_provider,
        model=model,
        temperature=temperature,
        max_tokens=max_tokens,
        output_format=output_format,
        stream=stream,
        verbose=verbose,
        optimize=optimize,
        priority=priority,
        max_cost=max_cost,
        retry=retry,
        agents_dir=agents_dir,
        timeout=timeout,
    )
    executor = AgentExecutor(
        base_command=config.executor.command,
        timeout=config.executor.timeout_seconds,
    )

    console.print(f"[bold]Running[/bold] {name} [dim]({options.provider})[/dim]")
    try:
        outcome = executor.run(name, task, options)
    except FlowctlError as exc:
        err_console.print(f"[red]Agent execution failed:[/red] {exc}")
        raise typer.Exit(1) from None

    if outcome.stdout:
        sys.stdout.write(outcome.stdout)
    if outcome.stderr and (verbose or not outcome.success):
        sys.stderr.write(outcome.stderr)

    if not outcome.success:
        err_console.print(
            f"[red]Agent execution failed[/red] (exit {outcome.returncode})"
        )
        raise typer.Exit(outcome.returncode)
    console.print("[green]Agent task completed.[/green]")
