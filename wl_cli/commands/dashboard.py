"""Dashboard summary command."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

import typer
from rich.table import Table

from wl_cli.commands.common import (
    fail,
    get_state,
    get_store,
    print_json_payload,
    resolve_owner,
    status,
)
from wl_cli.core.store import NotFoundError, StoreError
from wl_cli.core.workouts import build_dashboard_summary
from wl_cli.utils.date_ranges import parse_date, validate_date
from wl_cli.utils.formatting import format_calories

_BAR_WIDTH = 30


def dashboard_command(
    ctx: typer.Context,
    day: Optional[str] = typer.Option(None, "--date", help="Reference day YYYY-MM-DD (default: today)", callback=validate_date),
    user: Optional[str] = typer.Option(None, "--user", help="Owner user id"),
) -> None:
    """Show today's totals, category breakdown and the last 7 days."""
    state = get_state(ctx)
    owner = resolve_owner(state, user)
    reference = parse_date(day) if day else datetime.now(tz=state.tz).astimezone(state.tz).date()
    store = get_store(state)

    try:
        with status(state, "Building dashboard..."):
            summary = build_dashboard_summary(store, owner, reference, state.tz)
    except NotFoundError as exc:
        fail(state, str(exc), prefix="Not found")
    except StoreError as exc:
        fail(state, str(exc), prefix="Store error")

    if state.json_output:
        print_json_payload(state, summary.to_dict())
        return

    today = summary.today
    if state.plain_output:
        typer.echo(f"date\t{reference.isoformat()}")
        typer.echo(f"total_calories\t{today.total_calories:.1f}")
        typer.echo(f"total_workouts\t{today.workout_count}")
        typer.echo(f"avg_calories_per_workout\t{today.avg_calories_per_workout:.1f}")
        for item in today.categories:
            typer.echo(f"category\t{item.label}\t{item.value:.1f}")
        for entry in summary.week.days:
            typer.echo(f"day\t{entry.day.isoformat()}\t{entry.label}\t{entry.calories:.1f}")
        return

    state.console.print(f"Dashboard for {reference.isoformat()}")
    state.console.print(
        f"Calories burned: {format_calories(today.total_calories)} | "
        f"Workouts: {today.workout_count} | "
        f"Average: {format_calories(today.avg_calories_per_workout)}"
    )

    if today.categories:
        categories = Table(title="Categories")
        categories.add_column("#", justify="right")
        categories.add_column("Category")
        categories.add_column("Calories", justify="right")
        for item in today.categories:
            categories.add_row(str(item.id), item.label, f"{item.value:.1f}")
        state.console.print(categories)

    peak = max(summary.week.calories) or 1.0
    week = Table(title="Last 7 days")
    week.add_column("Day")
    week.add_column("Calories", justify="right")
    week.add_column("")
    for entry in summary.week.days:
        bar = "#" * int(round(entry.calories / peak * _BAR_WIDTH))
        week.add_row(entry.label, f"{entry.calories:.1f}", bar)
    state.console.print(week)
