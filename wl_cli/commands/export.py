"""Export workouts to external formats."""

from __future__ import annotations

import csv
from datetime import tzinfo
from pathlib import Path
from typing import Dict, List, Optional

import typer

from wl_cli.commands.common import (
    fail,
    get_state,
    get_store,
    print_json_payload,
    resolve_owner,
    status,
)
from wl_cli.core.analysis import local_day, total_calories
from wl_cli.core.config import resolve_default_range, resolve_output_dir
from wl_cli.core.constants import CSV_FIELDS, EXPORT_FORMATS
from wl_cli.core.models import WorkoutRecord
from wl_cli.core.store import NotFoundError, StoreError
from wl_cli.core.workouts import fetch_records
from wl_cli.exporters.json_export import records_payload, write_json
from wl_cli.exporters.markdown import generate_indexes, group_by_day, write_day_markdown
from wl_cli.utils.date_ranges import resolve_date_range, validate_date


def _write_csv(path: Path, records: List[WorkoutRecord], tz: Optional[tzinfo] = None) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", newline="") as handle:
        writer = csv.DictWriter(handle, fieldnames=CSV_FIELDS)
        writer.writeheader()
        for record in records:
            writer.writerow(
                {
                    "id": record.id,
                    "date": local_day(record.date, tz).isoformat(),
                    "category": record.category,
                    "workoutName": record.workout_name,
                    "sets": record.sets,
                    "reps": record.reps,
                    "weight": record.weight,
                    "caloriesBurned": f"{record.calories_burned:.2f}",
                }
            )


def export_command(
    ctx: typer.Context,
    user: Optional[str] = typer.Option(None, "--user", help="Owner user id"),
    start_date: Optional[str] = typer.Option(None, help="Start date YYYY-MM-DD", callback=validate_date),
    end_date: Optional[str] = typer.Option(None, help="End date YYYY-MM-DD", callback=validate_date),
    last_days: Optional[int] = typer.Option(None, help="Export last N days"),
    last_weeks: Optional[int] = typer.Option(None, help="Export last N weeks"),
    this_week: bool = typer.Option(False, help="Export this week"),
    this_month: bool = typer.Option(False, help="Export this month"),
    this_year: bool = typer.Option(False, help="Export this year"),
    output_format: str = typer.Option("csv", "--format", help="Export format: csv|json|markdown"),
    output_dir: Optional[Path] = typer.Option(None, help="Output directory"),
    output_file: Optional[Path] = typer.Option(None, help="Single output file (csv/json)"),
    no_index: bool = typer.Option(False, help="Do not generate markdown indexes"),
) -> None:
    """Export logged workouts as CSV, JSON or a markdown journal."""
    state = get_state(ctx)

    if output_format not in EXPORT_FORMATS:
        raise typer.BadParameter(f"--format must be {'|'.join(EXPORT_FORMATS)}")

    owner = resolve_owner(state, user)
    start, end = resolve_date_range(
        start_date=start_date,
        end_date=end_date,
        last_days=last_days,
        last_weeks=last_weeks,
        this_week=this_week,
        this_month=this_month,
        this_year=this_year,
        default_range=resolve_default_range(state.config),
    )

    store = get_store(state)
    try:
        with status(state, "Loading workouts..."):
            records = fetch_records(store, owner, start, end, state.tz)
    except NotFoundError as exc:
        fail(state, str(exc), prefix="Not found")
    except StoreError as exc:
        fail(state, str(exc), prefix="Store error")

    out_dir = resolve_output_dir(state.config, explicit=output_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    result: Dict[str, object]

    if output_format == "csv":
        path = output_file or (out_dir / "workouts.csv")
        _write_csv(path, records, state.tz)
        result = {"status": "exported", "format": "csv", "path": str(path), "count": len(records)}
    elif output_format == "json":
        path = output_file or (out_dir / "workouts.json")
        payload = records_payload(
            records,
            totalCaloriesBurnt=total_calories(records),
            date_range={"start": start.isoformat(), "end": end.isoformat()},
        )
        write_json(path, payload)
        result = {"status": "exported", "format": "json", "path": str(path), "count": len(records)}
    else:
        days = group_by_day(records, state.tz)
        for day, day_records in days.items():
            write_day_markdown(out_dir, day, day_records)
        if not no_index:
            generate_indexes(out_dir, days)
        result = {
            "status": "exported",
            "format": "markdown",
            "path": str(out_dir),
            "count": len(records),
            "days": len(days),
        }

    if state.json_output:
        print_json_payload(state, result)
        return

    if state.plain_output:
        for key in ("status", "format", "path", "count", "days"):
            if key in result and result[key] is not None:
                typer.echo(f"{key}\t{result[key]}")
        return

    state.console.print(
        f"Exported {result.get('count', 0)} workouts as {result.get('format')} "
        f"to {result.get('path')}"
    )
