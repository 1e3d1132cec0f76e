"""Workout analysis commands."""

from __future__ import annotations

import json
from pathlib import Path
from typing import List, Optional, Tuple

import typer

from wl_cli.commands.common import (
    fail,
    get_state,
    get_store,
    print_json_payload,
    resolve_owner,
    status,
)
from wl_cli.core.analysis import analyze_categories, build_weekly_analysis, weekly_to_markdown
from wl_cli.core.config import resolve_default_range
from wl_cli.core.models import WorkoutRecord
from wl_cli.core.state import CLIState
from wl_cli.core.store import NotFoundError, StoreError
from wl_cli.core.workouts import fetch_records
from wl_cli.utils.date_ranges import resolve_date_range, validate_date
from wl_cli.utils.formatting import format_calories, format_share, format_volume

app = typer.Typer(help="Workout analysis commands")


def _fetch_for_analysis(
    ctx: typer.Context,
    user: Optional[str],
    start_date: Optional[str],
    end_date: Optional[str],
    last_days: Optional[int],
    last_weeks: Optional[int],
    this_week: bool,
    this_year: bool,
) -> Tuple[CLIState, List[WorkoutRecord]]:
    state = get_state(ctx)
    owner = resolve_owner(state, user)
    start, end = resolve_date_range(
        start_date=start_date,
        end_date=end_date,
        last_days=last_days,
        last_weeks=last_weeks,
        this_week=this_week,
        this_year=this_year,
        default_range=resolve_default_range(state.config),
    )
    state.debug(f"Range: {start.isoformat()} to {end.isoformat()}")

    store = get_store(state)
    try:
        with status(state, "Loading workouts..."):
            records = fetch_records(store, owner, start, end, state.tz)
    except NotFoundError as exc:
        fail(state, str(exc), prefix="Not found")
    except StoreError as exc:
        fail(state, str(exc), prefix="Store error")
    return state, records


@app.command("weekly")
def weekly_command(
    ctx: typer.Context,
    user: Optional[str] = typer.Option(None, "--user", help="Owner user id"),
    start_date: Optional[str] = typer.Option(None, help="Start date YYYY-MM-DD", callback=validate_date),
    end_date: Optional[str] = typer.Option(None, help="End date YYYY-MM-DD", callback=validate_date),
    last_weeks: Optional[int] = typer.Option(None, help="Analyze last N weeks"),
    last_days: Optional[int] = typer.Option(None, help="Analyze last N days"),
    this_week: bool = typer.Option(False, help="Analyze this week"),
    this_year: bool = typer.Option(False, help="Analyze this year"),
    output_file: Optional[Path] = typer.Option(None, help="Write result to file"),
    output_format: str = typer.Option("markdown", "--format", help="Output format: markdown|json"),
) -> None:
    """Generate weekly calorie and volume analysis."""
    if output_format not in {"markdown", "json"}:
        raise typer.BadParameter("--format must be markdown or json")

    state, records = _fetch_for_analysis(
        ctx, user, start_date, end_date, last_days, last_weeks, this_week, this_year
    )

    report = build_weekly_analysis(records, tz=state.tz)

    if state.json_output or output_format == "json":
        if output_file:
            output_file.write_text(json.dumps(report, indent=2) + "\n")
        print_json_payload(state, report)
        return

    markdown = weekly_to_markdown(report)
    if output_file:
        output_file.write_text(markdown)
    state.console.print(markdown)


@app.command("categories")
def categories_command(
    ctx: typer.Context,
    user: Optional[str] = typer.Option(None, "--user", help="Owner user id"),
    start_date: Optional[str] = typer.Option(None, help="Start date YYYY-MM-DD", callback=validate_date),
    end_date: Optional[str] = typer.Option(None, help="End date YYYY-MM-DD", callback=validate_date),
    last_weeks: Optional[int] = typer.Option(None, help="Analyze last N weeks"),
    last_days: Optional[int] = typer.Option(None, help="Analyze last N days"),
    this_week: bool = typer.Option(False, help="Analyze this week"),
    this_year: bool = typer.Option(False, help="Analyze this year"),
    output_file: Optional[Path] = typer.Option(None, help="Write JSON result to file"),
) -> None:
    """Break down calories and volume by category."""
    state, records = _fetch_for_analysis(
        ctx, user, start_date, end_date, last_days, last_weeks, this_week, this_year
    )

    report = analyze_categories(records, tz=state.tz)

    if output_file:
        output_file.write_text(json.dumps(report, indent=2) + "\n")

    if state.json_output:
        print_json_payload(state, report)
        return

    if state.plain_output:
        typer.echo("category\tcalories\tsessions\tvolume\tpct")
        for row in report["categories"]:
            typer.echo(
                f"{row['category']}\t{row['calories']:.1f}\t{row['sessions']}\t"
                f"{row['volume']:.0f}\t{row['pct']:.1f}"
            )
        return

    totals = report["totals"]
    state.console.print(
        f"Category breakdown: {format_calories(totals['calories'])} over {totals['sessions']} workouts"
    )
    for row in report["categories"]:
        state.console.print(
            f"- {row['category']}: {format_calories(row['calories'])} "
            f"({format_share(row['pct'])}), sessions={row['sessions']}, volume={format_volume(row['volume'])}"
        )
