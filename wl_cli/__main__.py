"""Entry point for wl."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from wl_cli import __version__
from wl_cli.commands import analyze as analyze_commands
from wl_cli.commands.dashboard import dashboard_command
from wl_cli.commands.export import export_command
from wl_cli.commands.log import list_command, log_command
from wl_cli.commands.users import register_command
from wl_cli.core.config import ConfigError, configured_timezone, default_config_path, load_config
from wl_cli.core.state import CLIState

app = typer.Typer(
    add_completion=False,
    help="Workout log command-line interface",
    invoke_without_command=True,
)


@app.callback()
def main_callback(
    ctx: typer.Context,
    json_output: bool = typer.Option(False, "--json", help="Output JSON where available"),
    plain_output: bool = typer.Option(
        False,
        "--plain",
        help="Output plain text (no rich formatting/tables)",
    ),
    config: Optional[Path] = typer.Option(None, "--config", help="Path to config file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Quiet output"),
    version: bool = typer.Option(False, "--version", help="Show version and exit"),
) -> None:
    """Initialize global CLI state."""
    if version:
        typer.echo(__version__)
        raise typer.Exit(code=0)

    if json_output and plain_output:
        typer.echo("Options --json and --plain are mutually exclusive.")
        raise typer.Exit(code=2)

    cfg_path = (config or default_config_path()).expanduser().resolve()
    try:
        cfg = load_config(cfg_path)
        tz = configured_timezone(cfg)
    except ConfigError as exc:
        typer.echo(f"Config error: {exc}")
        raise typer.Exit(code=2)

    console = Console(
        quiet=quiet,
        no_color=plain_output,
        log_time=False,
        log_path=False,
    )
    ctx.obj = CLIState(
        json_output=(json_output and not plain_output),
        plain_output=plain_output,
        verbose=verbose,
        quiet=quiet,
        config_path=cfg_path,
        config=cfg,
        console=console,
        tz=tz,
    )

    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit(code=0)


# Top-level commands
app.command("register")(register_command)
app.command("log")(log_command)
app.command("list")(list_command)
app.command("dashboard")(dashboard_command)
app.command("export")(export_command)
app.add_typer(analyze_commands.app, name="analyze")


def main() -> None:
    """Console script entrypoint."""
    app()


if __name__ == "__main__":
    main()
