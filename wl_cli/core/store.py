"""Record store interface and local JSON file backend."""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List
from uuid import uuid4

from wl_cli.core.models import User, WorkoutRecord


class StoreError(RuntimeError):
    """Raised when the record store cannot complete a read or write."""


class NotFoundError(StoreError):
    """Raised when a referenced user or record does not exist."""


class ConflictError(StoreError):
    """Raised when a new entity clashes with an existing one."""


class RecordStore(ABC):
    """Persistence boundary used by the workout entry points.

    Date ranges are half-open: ``start`` inclusive, ``end`` exclusive.
    """

    @abstractmethod
    def save(self, record: WorkoutRecord) -> WorkoutRecord:
        """Persist one record and return it with its generated id."""

    @abstractmethod
    def query_by_owner_and_date_range(
        self, owner: str, start: datetime, end: datetime
    ) -> List[WorkoutRecord]:
        """Return the owner's records within [start, end), oldest first."""

    @abstractmethod
    def count_by_owner_and_date_range(self, owner: str, start: datetime, end: datetime) -> int:
        """Count the owner's records within [start, end)."""

    @abstractmethod
    def get_user(self, user_id: str) -> User:
        """Return a user or raise NotFoundError."""

    @abstractmethod
    def create_user(self, name: str, email: str) -> User:
        """Register a user or raise ConflictError for a taken email."""


def _in_range(moment: datetime, start: datetime, end: datetime) -> bool:
    return start <= moment < end


class JsonFileStore(RecordStore):
    """Single JSON document holding users and workouts.

    Every write re-reads and rewrites the whole file, so each ``save`` is
    an independent operation.
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    def _load(self) -> Dict[str, List[Dict[str, Any]]]:
        if not self.path.exists():
            return {"users": [], "workouts": []}
        try:
            data = json.loads(self.path.read_text())
        except json.JSONDecodeError as exc:
            raise StoreError(f"Invalid JSON in store file {self.path}: {exc}") from exc
        except OSError as exc:
            raise StoreError(f"Failed to read store file {self.path}: {exc}") from exc

        if not isinstance(data, dict):
            raise StoreError(f"Store file {self.path} must contain an object at the root")
        data.setdefault("users", [])
        data.setdefault("workouts", [])
        return data

    def _write(self, data: Dict[str, List[Dict[str, Any]]]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(data, indent=2) + "\n")
        except OSError as exc:
            raise StoreError(f"Failed to write store file {self.path}: {exc}") from exc

    def _records(self, owner: str) -> List[WorkoutRecord]:
        records: List[WorkoutRecord] = []
        for item in self._load()["workouts"]:
            if str(item.get("user")) != owner:
                continue
            try:
                records.append(WorkoutRecord.from_dict(item))
            except (KeyError, TypeError, ValueError) as exc:
                raise StoreError(f"Corrupt workout entry {item.get('id')!r} in {self.path}: {exc}") from exc
        return records

    def save(self, record: WorkoutRecord) -> WorkoutRecord:
        data = self._load()
        stored = record.with_id(uuid4().hex)
        data["workouts"].append(stored.to_dict())
        self._write(data)
        return stored

    def query_by_owner_and_date_range(
        self, owner: str, start: datetime, end: datetime
    ) -> List[WorkoutRecord]:
        matching = [record for record in self._records(owner) if _in_range(record.date, start, end)]
        return sorted(matching, key=lambda record: record.date)

    def count_by_owner_and_date_range(self, owner: str, start: datetime, end: datetime) -> int:
        return len(self.query_by_owner_and_date_range(owner, start, end))

    def get_user(self, user_id: str) -> User:
        for item in self._load()["users"]:
            if str(item.get("id")) == user_id:
                return User.from_dict(item)
        raise NotFoundError(f"User not found: {user_id}")

    def create_user(self, name: str, email: str) -> User:
        data = self._load()
        normalized = email.strip().lower()
        if any(str(item.get("email", "")).lower() == normalized for item in data["users"]):
            raise ConflictError(f"Email is already in use: {email}")

        user = User(
            id=uuid4().hex,
            name=name.strip(),
            email=normalized,
            created_at=datetime.now(tz=timezone.utc),
        )
        data["users"].append(user.to_dict())
        self._write(data)
        return user
