"""Date range parsing and day-boundary helpers."""

from __future__ import annotations

import re
from datetime import date, datetime, time, timedelta, tzinfo
from typing import Any, Dict, List, Optional, Tuple

import typer

from wl_cli.core.constants import DEFAULT_DATE_RANGE, WEEK_DAYS

_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_LAST_RANGE_RE = re.compile(r"^last-(\d+)-(days|weeks)$")
_PERIOD_RANGES = {"this-week": "this_week", "this-month": "this_month", "this-year": "this_year"}


def validate_date(value: Optional[str]) -> Optional[str]:
    """Typer callback that validates YYYY-MM-DD format for date options."""
    if value is None:
        return value
    if not _DATE_RE.match(value):
        raise typer.BadParameter(
            f"Invalid date '{value}'. Expected format: YYYY-MM-DD (e.g. 2026-01-15)"
        )
    try:
        datetime.strptime(value, "%Y-%m-%d")
    except ValueError:
        raise typer.BadParameter(
            f"Invalid date '{value}'. Expected format: YYYY-MM-DD (e.g. 2026-01-15)"
        )
    return value


def parse_date(value: str) -> date:
    """Parse YYYY-MM-DD date string."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def start_of_day(day: date, tz: Optional[tzinfo] = None) -> datetime:
    """Midnight at the start of ``day`` in ``tz`` (host local zone when None)."""
    if tz is None:
        return datetime.combine(day, time.min).astimezone()
    return datetime.combine(day, time.min, tzinfo=tz)


def day_bounds(day: date, tz: Optional[tzinfo] = None) -> Tuple[datetime, datetime]:
    """Return [start, end) datetimes covering one calendar day."""
    return start_of_day(day, tz), start_of_day(day + timedelta(days=1), tz)


def range_bounds(start: date, end: date, tz: Optional[tzinfo] = None) -> Tuple[datetime, datetime]:
    """Return [start, end) datetimes covering the inclusive day range."""
    return start_of_day(start, tz), start_of_day(end + timedelta(days=1), tz)


def trailing_days(reference: date, days: int = WEEK_DAYS) -> List[date]:
    """Days of the window ending on ``reference``, oldest first."""
    return [reference - timedelta(days=offset) for offset in range(days - 1, -1, -1)]


def resolve_date_range(
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
    last_days: Optional[int] = None,
    last_weeks: Optional[int] = None,
    this_week: bool = False,
    this_month: bool = False,
    this_year: bool = False,
    today: Optional[date] = None,
    default_range: str = DEFAULT_DATE_RANGE,
) -> Tuple[date, date]:
    """Resolve CLI date flags into concrete start/end dates.

    With no flags the named ``default_range`` applies (``defaults.date_range``
    in the config).
    """
    now = today or date.today()

    if start_date and end_date:
        return parse_date(start_date), parse_date(end_date)
    if start_date and not end_date:
        return parse_date(start_date), now
    if end_date and not start_date:
        return date(2000, 1, 1), parse_date(end_date)

    if last_days:
        return now - timedelta(days=max(last_days - 1, 0)), now
    if last_weeks:
        days = max(last_weeks * 7 - 1, 0)
        return now - timedelta(days=days), now

    if this_week:
        start = now - timedelta(days=now.weekday())
        return start, start + timedelta(days=6)

    if this_month:
        start = date(now.year, now.month, 1)
        if now.month == 12:
            month_end = date(now.year + 1, 1, 1) - timedelta(days=1)
        else:
            month_end = date(now.year, now.month + 1, 1) - timedelta(days=1)
        return start, month_end

    if this_year:
        return date(now.year, 1, 1), date(now.year, 12, 31)

    return resolve_date_range(today=now, **_named_range(default_range))


def _named_range(name: str) -> Dict[str, Any]:
    """Map a config range name to resolve_date_range flags."""
    if name in _PERIOD_RANGES:
        return {_PERIOD_RANGES[name]: True}
    match = _LAST_RANGE_RE.match(name)
    if not match:
        raise typer.BadParameter(
            f"Invalid date range '{name}'. Expected last-N-days, last-N-weeks, this-week, this-month or this-year"
        )
    count, unit = int(match.group(1)), match.group(2)
    if count < 1:
        raise typer.BadParameter(f"Invalid date range '{name}'. N must be at least 1")
    return {"last_days" if unit == "days" else "last_weeks": count}
