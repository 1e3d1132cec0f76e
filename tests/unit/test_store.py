from __future__ import annotations

import json
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from wl_cli.core.store import ConflictError, JsonFileStore, NotFoundError, StoreError

UTC = timezone.utc


def test_create_and_get_user(store: JsonFileStore) -> None:
    user = store.create_user(name=" Ada ", email="Ada@Example.com")
    assert user.name == "Ada"
    assert user.email == "ada@example.com"
    assert len(user.id) == 32
    assert store.get_user(user.id) == user


def test_create_user_rejects_duplicate_email(store: JsonFileStore) -> None:
    store.create_user(name="Ada", email="ada@example.com")
    with pytest.raises(ConflictError, match="Email is already in use"):
        store.create_user(name="Other", email="ADA@example.com")


def test_get_user_missing_raises(store: JsonFileStore) -> None:
    with pytest.raises(NotFoundError, match="User not found: nobody"):
        store.get_user("nobody")


def test_save_assigns_id_and_persists(store: JsonFileStore, store_path: Path, record_factory) -> None:
    saved = store.save(record_factory(owner="u1"))
    assert saved.id
    data = json.loads(store_path.read_text())
    assert data["workouts"][0]["id"] == saved.id
    assert data["workouts"][0]["caloriesBurned"] == pytest.approx(240.0)


def test_query_is_half_open_and_owner_scoped(store: JsonFileStore, record_factory) -> None:
    start = datetime(2026, 2, 14, tzinfo=UTC)
    end = start + timedelta(days=1)
    store.save(record_factory(owner="u1", when=start))
    store.save(record_factory(owner="u1", when=end))
    store.save(record_factory(owner="u1", when=start + timedelta(hours=5), name="Lunge"))
    store.save(record_factory(owner="u2", when=start + timedelta(hours=1)))

    records = store.query_by_owner_and_date_range("u1", start, end)
    assert [record.workout_name for record in records] == ["Squat", "Lunge"]
    assert all(record.owner == "u1" for record in records)
    assert store.count_by_owner_and_date_range("u1", start, end) == 2
    assert store.count_by_owner_and_date_range("u2", start, end) == 1


def test_query_on_missing_file_is_empty(store: JsonFileStore) -> None:
    start = datetime(2026, 2, 14, tzinfo=UTC)
    assert store.query_by_owner_and_date_range("u1", start, start + timedelta(days=1)) == []


def test_invalid_json_raises_store_error(store_path: Path) -> None:
    store_path.parent.mkdir(parents=True)
    store_path.write_text("{not json")
    with pytest.raises(StoreError, match="Invalid JSON"):
        JsonFileStore(store_path).get_user("x")


def test_corrupt_workout_raises_store_error(store_path: Path) -> None:
    store_path.parent.mkdir(parents=True)
    store_path.write_text(json.dumps({"workouts": [{"id": "w1", "user": "u1", "sets": "many"}]}))
    start = datetime(2026, 2, 14, tzinfo=UTC)
    with pytest.raises(StoreError, match="Corrupt workout entry 'w1'"):
        JsonFileStore(store_path).query_by_owner_and_date_range("u1", start, start + timedelta(days=1))


def test_store_errors_share_base() -> None:
    assert issubclass(NotFoundError, StoreError)
    assert issubclass(ConflictError, StoreError)
