"""HTTP record store client with retry and rate limiting."""

from __future__ import annotations

import time
from datetime import datetime
from typing import Any, Dict, List, Optional

import requests

from wl_cli.core.models import User, WorkoutRecord
from wl_cli.core.store import ConflictError, NotFoundError, RecordStore, StoreError


class RemoteRecordStore(RecordStore):
    """Record store backed by a workout service REST API."""

    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        rate_limit_delay: float = 0.0,
        max_retries: int = 3,
        timeout_seconds: int = 30,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.rate_limit_delay = rate_limit_delay
        self.max_retries = max_retries
        self.timeout_seconds = timeout_seconds
        self._has_sent_request = False

    @property
    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def _request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        json_data: Optional[Dict[str, Any]] = None,
    ) -> Any:
        url = f"{self.base_url}{path}"
        last_error: Optional[Exception] = None

        for attempt in range(1, self.max_retries + 1):
            try:
                if self.rate_limit_delay > 0 and self._has_sent_request:
                    time.sleep(self.rate_limit_delay)

                self._has_sent_request = True
                response = requests.request(
                    method=method,
                    url=url,
                    headers=self._headers,
                    params=params,
                    json=json_data,
                    timeout=self.timeout_seconds,
                )
                if response.status_code == 404:
                    raise NotFoundError(_error_message(response, f"Not found: {method} {path}"))
                if response.status_code == 409:
                    raise ConflictError(_error_message(response, f"Conflict: {method} {path}"))
                if response.status_code in (429, 500, 502, 503, 504):
                    raise requests.HTTPError(response.text, response=response)
                response.raise_for_status()

                if not response.text:
                    return {}
                return response.json()
            except (requests.RequestException, ValueError) as exc:
                last_error = exc
                if attempt >= self.max_retries:
                    break
                time.sleep(min(2**attempt, 8))

        raise StoreError(f"Store request failed for {method} {path}: {last_error}")

    def _range_params(self, owner: str, start: datetime, end: datetime) -> Dict[str, str]:
        return {"user": owner, "start": start.isoformat(), "end": end.isoformat()}

    def save(self, record: WorkoutRecord) -> WorkoutRecord:
        payload = record.to_dict()
        payload.pop("id", None)
        response = self._request("POST", "/workouts", json_data=payload)
        record_id = response.get("id") if isinstance(response, dict) else None
        if not record_id:
            raise StoreError("Store did not return an id for the saved workout")
        return record.with_id(str(record_id))

    def query_by_owner_and_date_range(
        self, owner: str, start: datetime, end: datetime
    ) -> List[WorkoutRecord]:
        payload = self._request("GET", "/workouts", params=self._range_params(owner, start, end))
        items = payload.get("workouts", []) if isinstance(payload, dict) else payload
        if not isinstance(items, list):
            raise StoreError("Unexpected workouts payload from store")
        try:
            records = [WorkoutRecord.from_dict(item) for item in items if isinstance(item, dict)]
        except (KeyError, TypeError, ValueError) as exc:
            raise StoreError(f"Malformed workout in store response: {exc}") from exc
        return sorted(records, key=lambda record: record.date)

    def count_by_owner_and_date_range(self, owner: str, start: datetime, end: datetime) -> int:
        payload = self._request("GET", "/workouts/count", params=self._range_params(owner, start, end))
        try:
            return int(payload["count"])
        except (KeyError, TypeError, ValueError) as exc:
            raise StoreError(f"Unexpected count payload from store: {payload!r}") from exc

    def get_user(self, user_id: str) -> User:
        payload = self._request("GET", f"/users/{user_id}")
        return _user_from_payload(payload)

    def create_user(self, name: str, email: str) -> User:
        payload = self._request("POST", "/users", json_data={"name": name, "email": email})
        return _user_from_payload(payload)


def _error_message(response: Any, fallback: str) -> str:
    try:
        body = response.json()
    except ValueError:
        return fallback
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return fallback


def _user_from_payload(payload: Any) -> User:
    data = payload.get("user", payload) if isinstance(payload, dict) else None
    if not isinstance(data, dict) or "id" not in data:
        raise StoreError(f"Unexpected user payload from store: {payload!r}")
    return User.from_dict(data)
