"""Workout logging and daily listing commands."""

from __future__ import annotations

import sys
from datetime import date, datetime, tzinfo
from pathlib import Path
from typing import List, Optional, Tuple

import typer
import yaml
from rich.table import Table

from wl_cli.commands.common import (
    fail,
    get_state,
    get_store,
    print_json_payload,
    resolve_owner,
    status,
)
from wl_cli.core.analysis import total_calories
from wl_cli.core.models import WorkoutRecord
from wl_cli.core.store import NotFoundError, StoreError
from wl_cli.core.workouts import list_workouts_for_day, submit_workout_log
from wl_cli.utils.date_ranges import parse_date, validate_date
from wl_cli.utils.formatting import format_calories, format_weight
from wl_cli.utils.parsing import InvalidFormatError, load_log_input, parse_entries, parse_workout_log


def _logged_at(day: Optional[date], tz: Optional[tzinfo], now: Optional[datetime] = None) -> datetime:
    now = now or datetime.now(tz=tz).astimezone(tz)
    if day is None:
        return now
    # Same wall-clock time on the requested day, with that day's UTC offset.
    wall_clock = datetime.combine(day, now.time())
    if tz is None:
        return wall_clock.astimezone()
    return wall_clock.replace(tzinfo=tz)


def _records_table(title: str, records: List[WorkoutRecord], tz: Optional[tzinfo]) -> Table:
    table = Table(title=title)
    table.add_column("Time")
    table.add_column("Category")
    table.add_column("Workout")
    table.add_column("Sets", justify="right")
    table.add_column("Reps", justify="right")
    table.add_column("Weight", justify="right")
    table.add_column("Calories", justify="right")
    for record in records:
        table.add_row(
            record.date.astimezone(tz).strftime("%Y-%m-%d %H:%M"),
            record.category,
            record.workout_name,
            str(record.sets),
            str(record.reps),
            format_weight(record.weight),
            f"{record.calories_burned:.1f}",
        )
    return table


def _echo_records_plain(records: List[WorkoutRecord]) -> None:
    typer.echo("date\tcategory\tworkout\tsets\treps\tweight\tcalories")
    for record in records:
        typer.echo(
            "\t".join(
                [
                    record.date.isoformat(),
                    record.category,
                    record.workout_name,
                    str(record.sets),
                    str(record.reps),
                    f"{record.weight:g}",
                    f"{record.calories_burned:.1f}",
                ]
            )
        )


def log_command(
    ctx: typer.Context,
    text: Optional[str] = typer.Argument(None, help="Workout log text, e.g. '#Legs\\n*Squat\\n3 sets\\n10 reps\\n80 kg'"),
    file: Optional[Path] = typer.Option(None, help="Text, YAML or JSON file with workout log(s)"),
    stdin: bool = typer.Option(False, "--stdin", help="Read workout log from stdin"),
    user: Optional[str] = typer.Option(None, "--user", help="Owner user id"),
    log_date: Optional[str] = typer.Option(None, "--date", help="Log date YYYY-MM-DD (default: today)", callback=validate_date),
    dry_run: bool = typer.Option(False, help="Parse and show workouts without saving"),
) -> None:
    """Log workouts from a free-form text block."""
    state = get_state(ctx)

    try:
        if text:
            submissions: List[Tuple[Optional[date], str]] = [(None, text.replace("\\n", "\n"))]
        else:
            stdin_text = sys.stdin.read() if stdin else ""
            submissions = load_log_input(file_path=file, read_stdin=stdin, stdin_text=stdin_text)
    except (OSError, ValueError, yaml.YAMLError) as exc:
        fail(state, f"Could not read workout input: {exc}")

    if not submissions:
        raise typer.BadParameter("Provide log TEXT, --file, or --stdin")

    default_day = parse_date(log_date) if log_date else None
    owner = resolve_owner(state, user) if not dry_run else (user or "preview")
    store = get_store(state) if not dry_run else None

    try:
        # Every submission is validated before any of them is saved.
        for _, raw in submissions:
            parse_entries(raw)

        created: List[WorkoutRecord] = []
        with status(state, "Saving workouts..."):
            for day, raw in submissions:
                logged_at = _logged_at(day or default_day, state.tz)
                state.debug(f"Submitting log for {logged_at.date().isoformat()}")
                if store is None:
                    created.extend(parse_workout_log(raw, owner=owner, logged_at=logged_at))
                else:
                    created.extend(submit_workout_log(store, owner, raw, logged_at=logged_at, tz=state.tz))
    except InvalidFormatError as exc:
        fail(state, str(exc), prefix="Invalid workout log")
    except NotFoundError as exc:
        fail(state, str(exc), prefix="Not found")
    except StoreError as exc:
        fail(state, str(exc), prefix="Store error")

    total = total_calories(created)
    payload = {
        "status": "dry-run" if dry_run else "created",
        "workouts": [record.to_dict() for record in created],
        "totalCalories": total,
    }

    if state.json_output:
        print_json_payload(state, payload)
        return

    if state.plain_output:
        typer.echo(f"status\t{payload['status']}")
        _echo_records_plain(created)
        typer.echo(f"total_calories\t{total:.1f}")
        return

    verb = "Parsed" if dry_run else "Logged"
    state.console.print(_records_table(f"{verb} {len(created)} workout(s)", created, state.tz))
    state.console.print(f"Total: {format_calories(total)}")


def list_command(
    ctx: typer.Context,
    day: Optional[str] = typer.Option(None, "--date", help="Day YYYY-MM-DD (default: today)", callback=validate_date),
    user: Optional[str] = typer.Option(None, "--user", help="Owner user id"),
) -> None:
    """List workouts logged on one day."""
    state = get_state(ctx)
    owner = resolve_owner(state, user)
    target = parse_date(day) if day else datetime.now(tz=state.tz).astimezone(state.tz).date()
    store = get_store(state)

    try:
        listing = list_workouts_for_day(store, owner, target, state.tz)
    except NotFoundError as exc:
        fail(state, str(exc), prefix="Not found")
    except StoreError as exc:
        fail(state, str(exc), prefix="Store error")

    if state.json_output:
        print_json_payload(state, listing.to_dict())
        return

    if state.plain_output:
        _echo_records_plain(listing.workouts)
        typer.echo(f"total_calories\t{listing.total_calories:.1f}")
        return

    state.console.print(
        _records_table(f"Workouts on {target.isoformat()} ({len(listing.workouts)} total)", listing.workouts, state.tz)
    )
    state.console.print(f"Total: {format_calories(listing.total_calories)}")
