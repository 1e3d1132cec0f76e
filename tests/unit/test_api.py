from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List

import pytest
import requests

from wl_cli.core.api import RemoteRecordStore
from wl_cli.core.store import ConflictError, NotFoundError, StoreError

UTC = timezone.utc
START = datetime(2026, 2, 14, tzinfo=UTC)
END = START + timedelta(days=1)


class _MockResponse:
    def __init__(
        self,
        status_code: int = 200,
        payload: Any = None,
        text: str = '{"ok":true}',
    ) -> None:
        self.status_code = status_code
        self._payload = payload if payload is not None else {"ok": True}
        self.text = text

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError("request failed", response=self)

    def json(self) -> Any:
        return self._payload


def _workout_payload(**overrides: Any) -> Dict[str, Any]:
    payload = {
        "id": "w1",
        "category": "Legs",
        "workoutName": "Squat",
        "sets": 3,
        "reps": 10,
        "weight": 80,
        "caloriesBurned": 240,
        "user": "u1",
        "date": "2026-02-14T09:00:00+00:00",
    }
    payload.update(overrides)
    return payload


@pytest.fixture(autouse=True)
def _no_sleep(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("wl_cli.core.api.time.sleep", lambda _: None)


def test_retries_then_succeeds(monkeypatch: pytest.MonkeyPatch) -> None:
    attempts = {"count": 0}

    def fake_request(*args, **kwargs):  # type: ignore[no-untyped-def]
        attempts["count"] += 1
        if attempts["count"] == 1:
            raise requests.Timeout("timeout")
        return _MockResponse(payload={"user": {"id": "u1", "name": "Ada"}}, text="{...}")

    monkeypatch.setattr("wl_cli.core.api.requests.request", fake_request)

    store = RemoteRecordStore("https://api.example.com/", token="tok", max_retries=3)
    user = store.get_user("u1")

    assert user.id == "u1"
    assert user.name == "Ada"
    assert attempts["count"] == 2


def test_retries_on_server_error(monkeypatch: pytest.MonkeyPatch) -> None:
    responses = [
        _MockResponse(status_code=503, text="busy"),
        _MockResponse(payload={"count": 4}, text='{"count":4}'),
    ]
    monkeypatch.setattr("wl_cli.core.api.requests.request", lambda *args, **kwargs: responses.pop(0))

    store = RemoteRecordStore("https://api.example.com", max_retries=3)
    assert store.count_by_owner_and_date_range("u1", START, END) == 4
    assert responses == []


def test_raises_after_max_retries(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_request(*args, **kwargs):  # type: ignore[no-untyped-def]
        raise requests.ConnectionError("network down")

    monkeypatch.setattr("wl_cli.core.api.requests.request", fake_request)

    store = RemoteRecordStore("https://api.example.com", max_retries=2)
    with pytest.raises(StoreError, match="Store request failed for GET /users/u1"):
        store.get_user("u1")


def test_not_found_is_not_retried(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: List[str] = []

    def fake_request(*args, **kwargs):  # type: ignore[no-untyped-def]
        calls.append(kwargs["url"])
        return _MockResponse(status_code=404, payload={"message": "User not found"}, text="...")

    monkeypatch.setattr("wl_cli.core.api.requests.request", fake_request)

    store = RemoteRecordStore("https://api.example.com", max_retries=3)
    with pytest.raises(NotFoundError, match="User not found"):
        store.get_user("ghost")
    assert calls == ["https://api.example.com/users/ghost"]


def test_conflict_on_create_user(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        "wl_cli.core.api.requests.request",
        lambda *args, **kwargs: _MockResponse(status_code=409, payload={}, text="{}"),
    )
    store = RemoteRecordStore("https://api.example.com")
    with pytest.raises(ConflictError, match="Conflict: POST /users"):
        store.create_user("Ada", "ada@example.com")


def test_headers_include_bearer_when_token_set() -> None:
    assert RemoteRecordStore("https://x", token="abc")._headers == {
        "Content-Type": "application/json",
        "Authorization": "Bearer abc",
    }
    assert "Authorization" not in RemoteRecordStore("https://x")._headers


def test_save_posts_record_without_id(monkeypatch: pytest.MonkeyPatch, record_factory) -> None:
    seen: Dict[str, Any] = {}

    def fake_request(*args, **kwargs):  # type: ignore[no-untyped-def]
        seen.update(kwargs)
        return _MockResponse(payload={"id": "new-id"}, text='{"id":"new-id"}')

    monkeypatch.setattr("wl_cli.core.api.requests.request", fake_request)

    saved = RemoteRecordStore("https://api.example.com").save(record_factory())
    assert saved.id == "new-id"
    assert seen["method"] == "POST"
    assert seen["url"] == "https://api.example.com/workouts"
    assert "id" not in seen["json"]
    assert seen["json"]["caloriesBurned"] == pytest.approx(240.0)


def test_save_without_returned_id_raises(monkeypatch: pytest.MonkeyPatch, record_factory) -> None:
    monkeypatch.setattr(
        "wl_cli.core.api.requests.request",
        lambda *args, **kwargs: _MockResponse(payload={}, text=""),
    )
    with pytest.raises(StoreError, match="did not return an id"):
        RemoteRecordStore("https://api.example.com").save(record_factory())


def test_query_accepts_list_or_wrapped_payload(monkeypatch: pytest.MonkeyPatch) -> None:
    later = _workout_payload(id="w2", date="2026-02-14T18:00:00+00:00")
    payloads = [[later, _workout_payload()], {"workouts": [_workout_payload()]}]
    seen: List[Dict[str, Any]] = []

    def fake_request(*args, **kwargs):  # type: ignore[no-untyped-def]
        seen.append(kwargs["params"])
        return _MockResponse(payload=payloads.pop(0), text="[...]")

    monkeypatch.setattr("wl_cli.core.api.requests.request", fake_request)

    store = RemoteRecordStore("https://api.example.com")
    first = store.query_by_owner_and_date_range("u1", START, END)
    second = store.query_by_owner_and_date_range("u1", START, END)

    assert [record.id for record in first] == ["w1", "w2"]
    assert len(second) == 1
    assert seen[0] == {"user": "u1", "start": START.isoformat(), "end": END.isoformat()}


def test_malformed_count_raises(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        "wl_cli.core.api.requests.request",
        lambda *args, **kwargs: _MockResponse(payload={"total": 1}, text='{"total":1}'),
    )
    with pytest.raises(StoreError, match="Unexpected count payload"):
        RemoteRecordStore("https://api.example.com").count_by_owner_and_date_range("u1", START, END)
