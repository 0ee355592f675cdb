from __future__ import annotations

import typer
from flowctl_core.config import FlowctlConfig
from flowctl_core.errors import ConfigError
from flowctl_core.logging import setup_from_config

from flowctl_cli.commands.agent_mgmt import agent_app
from flowctl_cli.commands.config import config_app

app = typer.Typer(
    name="flowctl",
    help="flowctl: discover agent definitions and hand tasks to an agent executor",
    no_args_is_help=True,
)

app.add_typer(agent_app, name="agent", help="Inspect, validate, and run agents")
app.add_typer(config_app, name="config", help="View configuration")


@app.callback()
def _root(
    log_level: str | None = typer.Option(
        None, "--log-level", help="Logging level (overrides config)"
    ),
) -> None:
    """Configure logging before any subcommand runs."""
    try:
        config = FlowctlConfig.load()
    except ConfigError as exc:
        typer.secho(f"Invalid configuration: {exc}", fg="red", err=True)
        raise typer.Exit(1) from None
    setup_from_config(config.logging, level=log_level)


@app.command()
def version() -> None:
    """Show the flowctl version."""
    from flowctl_core import __version__
    from rich.console import Console
    Console().print(f"flowctl {__version__}")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
