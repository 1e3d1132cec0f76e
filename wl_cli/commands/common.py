"""Shared command helpers."""

from __future__ import annotations

import json
from contextlib import nullcontext
from typing import Any, ContextManager, NoReturn, Optional

import typer

from wl_cli.core.config import ConfigError, resolve_default_user
from wl_cli.core.state import CLIState
from wl_cli.core.store import RecordStore
from wl_cli.core.workouts import open_store


def get_state(ctx: typer.Context) -> CLIState:
    """Extract validated CLI state from Typer context."""
    state = ctx.obj
    if not isinstance(state, CLIState):
        raise typer.Exit(code=2)
    return state


def print_json_payload(state: CLIState, payload: Any) -> None:
    """Print JSON payload with plain-mode fallback for piping."""
    if state.plain_output:
        typer.echo(json.dumps(payload, separators=(",", ":")))
        return
    state.console.print_json(data=payload)


def fail(state: CLIState, message: str, prefix: str = "Error") -> NoReturn:
    """Report an error in the active output mode and exit with code 1."""
    if state.json_output:
        print_json_payload(state, {"status": "error", "message": message})
    elif state.plain_output:
        typer.echo("status\terror")
        typer.echo(f"message\t{message}")
    else:
        state.console.print(f"{prefix}: {message}")
    raise typer.Exit(code=1)


def status(state: CLIState, message: str) -> ContextManager[Any]:
    """Spinner for rich output, no-op for plain/json."""
    if state.plain_output or state.json_output:
        return nullcontext()
    return state.console.status(message)


def get_store(state: CLIState) -> RecordStore:
    """Open the configured record store."""
    try:
        store = open_store(state.config)
    except ConfigError as exc:
        fail(state, str(exc), prefix="Config error")
    state.debug(f"Using {type(store).__name__}")
    return store


def resolve_owner(state: CLIState, explicit: Optional[str] = None) -> str:
    """Owner id from --user, WL_USER or ``defaults.user``."""
    owner = (explicit or "").strip() or resolve_default_user(state.config)
    if not owner:
        raise typer.BadParameter(
            "No user given. Pass --user, set WL_USER, or run 'wl register --set-default'"
        )
    state.debug(f"Owner: {owner}")
    return owner
