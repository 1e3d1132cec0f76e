from __future__ import annotations

from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import List

import pytest
from typer.testing import CliRunner

from wl_cli.core.models import WorkoutRecord
from wl_cli.core.store import JsonFileStore

UTC = timezone.utc


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture()
def squat_log() -> str:
    return "#Legs\n*Squat\n3 sets\n10 reps\n80 kg"


@pytest.fixture()
def mixed_log() -> str:
    return (
        "#Legs\n*Squat\n3 sets\n10 reps\n80 kg;"
        "#Arms\n*Curl\n3 sets\n12 reps\n12.5 kg"
    )


@pytest.fixture()
def store_path(tmp_path: Path) -> Path:
    return tmp_path / "data" / "workouts.json"


@pytest.fixture()
def store(store_path: Path) -> JsonFileStore:
    return JsonFileStore(store_path)


@pytest.fixture()
def user_id(store: JsonFileStore) -> str:
    return store.create_user(name="Ada", email="ada@example.com").id


def make_record(
    category: str = "Legs",
    name: str = "Squat",
    sets: int = 3,
    reps: int = 10,
    weight: float = 80.0,
    owner: str = "u1",
    when: datetime | None = None,
) -> WorkoutRecord:
    return WorkoutRecord(
        category=category,
        workout_name=name,
        sets=sets,
        reps=reps,
        weight=weight,
        owner=owner,
        date=when or datetime(2026, 2, 14, 9, 0, tzinfo=UTC),
    )


@pytest.fixture()
def record_factory():
    return make_record


@pytest.fixture()
def week_records() -> List[WorkoutRecord]:
    base = datetime(2026, 2, 14, 9, 0, tzinfo=UTC)
    return [
        make_record(when=base),
        make_record("Arms", "Curl", 3, 12, 12.5, when=base + timedelta(hours=1)),
        make_record("Legs", "Lunge", 2, 10, 20.0, when=base - timedelta(days=2)),
        make_record("Back", "Row", 4, 8, 50.0, when=base - timedelta(days=6)),
        make_record("Back", "Row", 4, 8, 50.0, when=base - timedelta(days=7)),
    ]


@pytest.fixture()
def write_temp_toml(tmp_path: Path):
    def _write(name: str, content: str) -> Path:
        path = tmp_path / name
        path.write_text(content.strip() + "\n")
        return path

    return _write
