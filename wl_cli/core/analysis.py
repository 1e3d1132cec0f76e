"""Aggregation of workout records into daily, weekly and category reports."""

from __future__ import annotations

from collections import defaultdict
from datetime import date, datetime, timedelta, tzinfo
from typing import Any, Dict, Iterable, List, Optional

from wl_cli.core.constants import WEEK_DAYS
from wl_cli.core.models import (
    CategoryTotal,
    DailySummary,
    DashboardSummary,
    DayTotal,
    WeeklySeries,
    WorkoutRecord,
)
from wl_cli.utils.date_ranges import trailing_days
from wl_cli.utils.formatting import ordinal_day_label


def local_day(moment: datetime, tz: Optional[tzinfo] = None) -> date:
    """Calendar day of ``moment`` in ``tz``; naive values are taken as local to ``tz``."""
    if moment.tzinfo is None:
        return moment.date()
    return moment.astimezone(tz).date()


def records_on_day(
    records: Iterable[WorkoutRecord],
    day: date,
    tz: Optional[tzinfo] = None,
) -> List[WorkoutRecord]:
    return [record for record in records if local_day(record.date, tz) == day]


def total_calories(records: Iterable[WorkoutRecord]) -> float:
    return float(sum(record.calories_burned for record in records))


def average_calories(total: float, count: int) -> float:
    """Average per workout, 0 when there are no workouts."""
    if count <= 0:
        return 0.0
    return total / count


def category_breakdown(records: Iterable[WorkoutRecord]) -> List[CategoryTotal]:
    """Sum calories per category, in the order categories first appear."""
    totals: Dict[str, float] = {}
    for record in records:
        totals[record.category] = totals.get(record.category, 0.0) + record.calories_burned
    return [
        CategoryTotal(id=index, label=label, value=value)
        for index, (label, value) in enumerate(totals.items())
    ]


def summarize_day(
    records: Iterable[WorkoutRecord],
    day: date,
    tz: Optional[tzinfo] = None,
    workout_count: Optional[int] = None,
) -> DailySummary:
    """Summarize the records that fall on ``day``.

    ``workout_count`` overrides the count derived from the records, for
    callers that take it from the store.
    """
    matching = records_on_day(records, day, tz)
    total = total_calories(matching)
    count = len(matching) if workout_count is None else workout_count
    return DailySummary(
        day=day,
        total_calories=total,
        workout_count=count,
        avg_calories_per_workout=average_calories(total, count),
        categories=category_breakdown(matching),
    )


def weekly_series(
    records: Iterable[WorkoutRecord],
    reference_day: date,
    tz: Optional[tzinfo] = None,
) -> WeeklySeries:
    """Calories per day for the 7 days ending on ``reference_day``."""
    per_day: Dict[date, float] = defaultdict(float)
    for record in records:
        per_day[local_day(record.date, tz)] += record.calories_burned

    return WeeklySeries(
        days=[
            DayTotal(day=day, label=ordinal_day_label(day), calories=per_day.get(day, 0.0))
            for day in trailing_days(reference_day, WEEK_DAYS)
        ]
    )


def build_dashboard(
    today_records: Iterable[WorkoutRecord],
    week_records: Iterable[WorkoutRecord],
    reference_day: date,
    tz: Optional[tzinfo] = None,
    workout_count: Optional[int] = None,
) -> DashboardSummary:
    return DashboardSummary(
        reference_day=reference_day,
        today=summarize_day(today_records, reference_day, tz, workout_count=workout_count),
        week=weekly_series(week_records, reference_day, tz),
    )


def get_week_key(day: date) -> str:
    iso = day.isocalendar()
    return f"{iso[0]}-W{iso[1]:02d}"


def get_week_start(day: date) -> date:
    return day - timedelta(days=day.weekday())


def _share(value: float, total: float) -> float:
    return (value / total * 100) if total else 0.0


def build_weekly_analysis(
    records: Iterable[WorkoutRecord],
    tz: Optional[tzinfo] = None,
) -> Dict[str, Any]:
    """Aggregate records into ISO-week buckets."""
    weeks: Dict[str, Dict[str, Any]] = defaultdict(
        lambda: {
            "week": "",
            "start_date": "",
            "end_date": "",
            "total_calories": 0.0,
            "sessions": 0,
            "volume": 0.0,
            "avg_calories_per_workout": 0.0,
            "by_category": defaultdict(float),
        }
    )

    for record in records:
        day = local_day(record.date, tz)
        week_start = get_week_start(day)
        bucket = weeks[get_week_key(day)]
        bucket["week"] = get_week_key(day)
        bucket["start_date"] = week_start.isoformat()
        bucket["end_date"] = (week_start + timedelta(days=6)).isoformat()
        bucket["total_calories"] += record.calories_burned
        bucket["sessions"] += 1
        bucket["volume"] += record.volume
        bucket["by_category"][record.category] += record.calories_burned

    ordered = [weeks[key] for key in sorted(weeks.keys())]
    for row in ordered:
        total = float(row["total_calories"])
        row["avg_calories_per_workout"] = average_calories(total, int(row["sessions"]))
        row["by_category"] = {
            category: {"calories": calories, "pct": _share(calories, total)}
            for category, calories in sorted(
                row["by_category"].items(), key=lambda item: item[1], reverse=True
            )
        }

    summary = {
        "total_weeks": len(ordered),
        "avg_weekly_calories": (
            sum(float(item["total_calories"]) for item in ordered) / len(ordered)
            if ordered
            else 0
        ),
        "avg_weekly_sessions": (
            sum(int(item["sessions"]) for item in ordered) / len(ordered)
            if ordered
            else 0
        ),
    }

    return {"weeks": ordered, "summary": summary}


def weekly_to_markdown(report: Dict[str, Any]) -> str:
    """Render weekly analysis payload to markdown."""
    lines: List[str] = ["# Weekly Workout Analysis", ""]
    weeks = report.get("weeks", [])
    summary = report.get("summary", {})

    lines.append(f"**Total weeks:** {summary.get('total_weeks', 0)}")
    lines.append(f"**Average weekly calories:** {summary.get('avg_weekly_calories', 0):.1f} kcal")
    lines.append(f"**Average weekly sessions:** {summary.get('avg_weekly_sessions', 0):.1f}")
    lines.append("")

    for week in weeks:
        lines.append(f"## {week['week']} ({week['start_date']} to {week['end_date']})")
        lines.append(
            f"**Total:** {week['total_calories']:.1f} kcal | {week['sessions']} workouts | "
            f"{week['volume']:,.0f} kg volume | {week['avg_calories_per_workout']:.1f} kcal/workout"
        )
        if week["by_category"]:
            parts = [
                f"{category}: {metrics['calories']:.1f} kcal ({metrics['pct']:.0f}%)"
                for category, metrics in week["by_category"].items()
            ]
            lines.append(f"- Categories: {' | '.join(parts)}")
        lines.append("")

    return "\n".join(lines).strip() + "\n"


def analyze_categories(
    records: Iterable[WorkoutRecord],
    tz: Optional[tzinfo] = None,
) -> Dict[str, Any]:
    """Per-category calories, sessions and volume with share of total."""
    rows: Dict[str, Dict[str, Any]] = defaultdict(
        lambda: {"category": "", "calories": 0.0, "sessions": 0, "volume": 0.0, "pct": 0.0}
    )
    dates: List[date] = []

    for record in records:
        row = rows[record.category]
        row["category"] = record.category
        row["calories"] += record.calories_burned
        row["sessions"] += 1
        row["volume"] += record.volume
        dates.append(local_day(record.date, tz))

    total = sum(float(row["calories"]) for row in rows.values())
    ordered = sorted(rows.values(), key=lambda row: row["calories"], reverse=True)
    for row in ordered:
        row["pct"] = _share(float(row["calories"]), total)

    return {
        "categories": ordered,
        "totals": {
            "calories": total,
            "sessions": sum(int(row["sessions"]) for row in ordered),
            "volume": sum(float(row["volume"]) for row in ordered),
        },
        "date_range": {
            "start": min(dates).isoformat() if dates else None,
            "end": max(dates).isoformat() if dates else None,
        },
    }
