"""JSON export helpers."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Iterable

from wl_cli.core.models import WorkoutRecord


def records_payload(records: Iterable[WorkoutRecord], **extra: Any) -> Dict[str, Any]:
    """Records as plain dicts under ``workouts`` plus any extra keys."""
    payload: Dict[str, Any] = {"workouts": [record.to_dict() for record in records]}
    payload.update(extra)
    return payload


def write_json(path: Path, payload: Any) -> Path:
    """Write payload as pretty JSON and return path."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, indent=2) + "\n")
    return path
