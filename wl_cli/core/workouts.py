"""Workout submission, dashboard and listing entry points."""

from __future__ import annotations

import os
from datetime import date, datetime, timedelta, tzinfo
from typing import Any, Dict, List, Optional

from wl_cli.core.analysis import build_dashboard, total_calories
from wl_cli.core.api import RemoteRecordStore
from wl_cli.core.config import ConfigError, resolve_store_path
from wl_cli.core.constants import STORE_BACKENDS, WEEK_DAYS
from wl_cli.core.models import DashboardSummary, DayListing, WorkoutRecord
from wl_cli.core.store import JsonFileStore, RecordStore
from wl_cli.utils.date_ranges import day_bounds, range_bounds
from wl_cli.utils.parsing import parse_workout_log


def open_store(config: Dict[str, Any]) -> RecordStore:
    """Build the record store selected by ``store.backend``."""
    store_cfg = config.get("store", {})
    backend = str(store_cfg.get("backend") or "file").lower()
    if backend not in STORE_BACKENDS:
        raise ConfigError(f"Unknown store backend '{backend}'. Use one of: {', '.join(STORE_BACKENDS)}")

    if backend == "file":
        return JsonFileStore(resolve_store_path(config))

    url = os.getenv("WL_STORE_URL") or store_cfg.get("url")
    if not url:
        raise ConfigError("store.url is required for the http backend")
    api_cfg = config.get("api", {})
    return RemoteRecordStore(
        base_url=str(url),
        token=os.getenv(str(store_cfg.get("token_env") or "WL_API_TOKEN")),
        rate_limit_delay=float(api_cfg.get("rate_limit_delay", 0.0)),
        max_retries=int(api_cfg.get("max_retries", 3)),
        timeout_seconds=int(api_cfg.get("timeout_seconds", 30)),
    )


def submit_workout_log(
    store: RecordStore,
    owner_id: str,
    raw: str,
    logged_at: Optional[datetime] = None,
    tz: Optional[tzinfo] = None,
) -> List[WorkoutRecord]:
    """Parse a log and save one record per entry.

    The owner must exist. Every entry is parsed before anything is saved.
    Saves are independent: if a later save fails, earlier ones remain.
    """
    store.get_user(owner_id)
    moment = logged_at or datetime.now(tz=tz).astimezone(tz)
    records = parse_workout_log(raw, owner=owner_id, logged_at=moment)
    return [store.save(record) for record in records]


def build_dashboard_summary(
    store: RecordStore,
    owner_id: str,
    reference_day: date,
    tz: Optional[tzinfo] = None,
) -> DashboardSummary:
    """Today's totals plus the trailing 7-day series for one owner."""
    store.get_user(owner_id)
    start_today, end_today = day_bounds(reference_day, tz)
    week_start, week_end = range_bounds(reference_day - timedelta(days=WEEK_DAYS - 1), reference_day, tz)

    today_records = store.query_by_owner_and_date_range(owner_id, start_today, end_today)
    workout_count = store.count_by_owner_and_date_range(owner_id, start_today, end_today)
    week_records = store.query_by_owner_and_date_range(owner_id, week_start, week_end)

    return build_dashboard(
        today_records,
        week_records,
        reference_day,
        tz,
        workout_count=workout_count,
    )


def list_workouts_for_day(
    store: RecordStore,
    owner_id: str,
    day: date,
    tz: Optional[tzinfo] = None,
) -> DayListing:
    """Workouts logged on one day with their calorie total."""
    store.get_user(owner_id)
    start, end = day_bounds(day, tz)
    records = store.query_by_owner_and_date_range(owner_id, start, end)
    return DayListing(day=day, workouts=records, total_calories=total_calories(records))


def fetch_records(
    store: RecordStore,
    owner_id: str,
    start_day: date,
    end_day: date,
    tz: Optional[tzinfo] = None,
) -> List[WorkoutRecord]:
    """Records over an inclusive day range."""
    store.get_user(owner_id)
    start, end = range_bounds(start_day, end_day, tz)
    return store.query_by_owner_and_date_range(owner_id, start, end)
