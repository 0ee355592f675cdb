from __future__ import annotations

from pathlib import Path

import typer
from flowctl_core.config import (
    FlowctlConfig,
    global_config_path,
    project_config_path,
)
from rich.console import Console
from rich.syntax import Syntax
from rich.table import Table

console = Console()

config_app = typer.Typer(
    name="config",
    help="View flowctl configuration",
    invoke_without_command=True,
)


@config_app.callback(invoke_without_command=True)
def config_command(
    ctx: typer.Context,
    show_global: bool = typer.Option(
        False,
        "--global",
        "-g",
        help="Show global config only",
    ),
) -> None:
    """View configuration files."""
    if ctx.invoked_subcommand is not None:
        return

    global_path = global_config_path()

    if show_global:
        if not global_path.exists():
            console.print("[yellow]~/.flowctl/config.toml not found.[/yellow]")
            raise typer.Exit(1)
        console.print("[bold]~/.flowctl/config.toml:[/bold]")
        console.print(Syntax(global_path.read_text(), "toml", theme="monokai"))
        return

    project_path = project_config_path(Path.cwd())

    if global_path.exists():
        console.print(
            "[bold]Global[/bold]"
            " (~/.flowctl/config.toml):"
        )
        console.print(Syntax(global_path.read_text(), "toml", theme="monokai"))
        console.print()

    if project_path.exists():
        rel = project_path.relative_to(Path.cwd())
        console.print(f"[bold]Project[/bold] ({rel}):")
        console.print(Syntax(project_path.read_text(), "toml", theme="monokai"))
    elif not global_path.exists():
        console.print(
            "[yellow]No config files found;"
            " using defaults (see `flowctl config effective`).[/yellow]"
        )


@config_app.command("effective")
def config_effective() -> None:
    """Show the merged configuration in effect for this directory."""
    config = FlowctlConfig.load()

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Key", style="bold")
    table.add_column("Value")
    table.add_row("agents.custom_dir", config.agents.custom_dir)
    table.add_row("agents.project_dir", config.agents.project_dir)
    table.add_row("agents.cache_ttl_seconds", f"{config.agents.cache_ttl_seconds:g}")
    table.add_row(
        "agents.scan_timeout_seconds",
        str(config.agents.scan_timeout_seconds or "none"),
    )
    table.add_row("executor.command", " ".join(config.executor.command))
    table.add_row("executor.timeout_seconds", f"{config.executor.timeout_seconds:g}")
    table.add_row("executor.default_provider", config.executor.default_provider)
    table.add_row("logging.level", config.logging.level)
    table.add_row("logging.json", str(config.logging.json).lower())
    console.print(table)
