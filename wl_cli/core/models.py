"""Data models shared by the parser, store and reports."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Tuple

from wl_cli.core.calories import estimate_calories


@dataclass(frozen=True)
class RawLogBlock:
    """One ``;``-delimited segment of a log before field parsing."""

    category: str
    lines: Tuple[str, ...]


@dataclass(frozen=True)
class ParsedEntry:
    """A parsed workout entry without its derived calorie estimate."""

    category: str
    workout_name: str
    sets: int
    reps: int
    weight: float


@dataclass(frozen=True)
class WorkoutRecord:
    """A validated workout; ``calories_burned`` is always derived."""

    category: str
    workout_name: str
    sets: int
    reps: int
    weight: float
    owner: str
    date: datetime
    id: Optional[str] = None
    calories_burned: float = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "calories_burned", estimate_calories(self))

    @classmethod
    def from_entry(cls, entry: ParsedEntry, owner: str, logged_at: datetime) -> "WorkoutRecord":
        return cls(
            category=entry.category,
            workout_name=entry.workout_name,
            sets=entry.sets,
            reps=entry.reps,
            weight=entry.weight,
            owner=owner,
            date=logged_at,
        )

    def with_id(self, record_id: str) -> "WorkoutRecord":
        return replace(self, id=record_id)

    @property
    def volume(self) -> float:
        """Total load moved: sets * reps * weight."""
        return self.sets * self.reps * self.weight

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "category": self.category,
            "workoutName": self.workout_name,
            "sets": self.sets,
            "reps": self.reps,
            "weight": self.weight,
            "caloriesBurned": self.calories_burned,
            "user": self.owner,
            "date": self.date.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WorkoutRecord":
        # Stored caloriesBurned is ignored; it is recomputed on construction.
        logged_at = datetime.fromisoformat(str(data["date"]))
        if logged_at.tzinfo is None:
            logged_at = logged_at.astimezone()
        return cls(
            category=str(data["category"]),
            workout_name=str(data["workoutName"]),
            sets=int(data["sets"]),
            reps=int(data["reps"]),
            weight=float(data["weight"]),
            owner=str(data["user"]),
            date=logged_at,
            id=data.get("id"),
        )


@dataclass(frozen=True)
class User:
    """Owner identity as known to the record store."""

    id: str
    name: str
    email: str
    created_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "User":
        created = data.get("createdAt")
        return cls(
            id=str(data["id"]),
            name=str(data.get("name") or ""),
            email=str(data.get("email") or ""),
            created_at=datetime.fromisoformat(created) if created else None,
        )


@dataclass(frozen=True)
class CategoryTotal:
    """Calories for one category; ``id`` is the 0-based emission order."""

    id: int
    label: str
    value: float

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "value": self.value, "label": self.label}


@dataclass(frozen=True)
class DailySummary:
    day: date
    total_calories: float
    workout_count: int
    avg_calories_per_workout: float
    categories: List[CategoryTotal]


@dataclass(frozen=True)
class DayTotal:
    day: date
    label: str
    calories: float


@dataclass(frozen=True)
class WeeklySeries:
    """Seven consecutive day totals, oldest first."""

    days: List[DayTotal]

    @property
    def labels(self) -> List[str]:
        return [item.label for item in self.days]

    @property
    def calories(self) -> List[float]:
        return [item.calories for item in self.days]


@dataclass(frozen=True)
class DashboardSummary:
    reference_day: date
    today: DailySummary
    week: WeeklySeries

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.reference_day.isoformat(),
            "totalCaloriesBurnt": self.today.total_calories,
            "totalWorkouts": self.today.workout_count,
            "avgCaloriesBurntPerWorkout": self.today.avg_calories_per_workout,
            "totalWeeksCaloriesBurnt": {
                "weeks": self.week.labels,
                "caloriesBurned": self.week.calories,
            },
            "pieChartData": [item.to_dict() for item in self.today.categories],
        }


@dataclass(frozen=True)
class DayListing:
    day: date
    workouts: List[WorkoutRecord]
    total_calories: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.day.isoformat(),
            "todaysWorkouts": [record.to_dict() for record in self.workouts],
            "totalCaloriesBurnt": self.total_calories,
        }
