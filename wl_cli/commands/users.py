"""User registration command."""

from __future__ import annotations

import typer

from wl_cli.commands.common import fail, get_state, get_store, print_json_payload
from wl_cli.core.config import save_config
from wl_cli.core.store import StoreError


def register_command(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Display name"),
    email: str = typer.Option(..., "--email", help="Email address (must be unique)"),
    set_default: bool = typer.Option(False, "--set-default", help="Save as default user in config"),
) -> None:
    """Register a user that workouts can be logged for."""
    state = get_state(ctx)
    if "@" not in email:
        raise typer.BadParameter(f"Invalid email address: {email}")

    store = get_store(state)
    try:
        user = store.create_user(name=name, email=email)
    except StoreError as exc:
        fail(state, str(exc), prefix="Registration failed")

    config_file = None
    if set_default:
        state.config.setdefault("defaults", {})["user"] = user.id
        config_file = save_config(state.config, state.config_path)

    payload = {
        "status": "created",
        "user": user.to_dict(),
        "config_file": str(config_file) if config_file else None,
    }

    if state.json_output:
        print_json_payload(state, payload)
        return

    if state.plain_output:
        typer.echo("status\tcreated")
        typer.echo(f"user_id\t{user.id}")
        typer.echo(f"name\t{user.name}")
        typer.echo(f"email\t{user.email}")
        return

    state.console.print(f"Registered {user.name} <{user.email}>")
    state.console.print(f"User id: {user.id}")
    if config_file:
        state.console.print(f"Saved as default user in {config_file}")
