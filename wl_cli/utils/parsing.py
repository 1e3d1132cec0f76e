"""Parsing helpers for free-form workout logs.

A log holds one or more entries separated by ``;``. Each entry is a block
of lines::

    #Legs
    *Squat
    3 sets
    10 reps
    80 kg

The first line names the category, the second the workout (after a single
marker character), and the next three carry sets, reps and weight.
"""

from __future__ import annotations

import json
import math
from datetime import date, datetime
from pathlib import Path
from typing import Any, List, Optional, Tuple

import yaml

from wl_cli.core.calories import estimate_calories
from wl_cli.core.constants import (
    CATEGORY_MARKER,
    ENTRY_DELIMITER,
    MIN_DETAIL_LINES,
    REPS_TOKEN,
    SETS_TOKEN,
    WEIGHT_TOKEN,
)
from wl_cli.core.models import ParsedEntry, RawLogBlock, WorkoutRecord


class InvalidFormatError(ValueError):
    """Raised when a workout log does not follow the entry grammar."""


class MissingFieldError(InvalidFormatError):
    """Raised when an entry lacks a required line or value."""


class MalformedNumberError(InvalidFormatError):
    """Raised when a sets/reps/weight value is not a valid number."""


def tokenize(raw: str) -> List[RawLogBlock]:
    """Split a raw log into category blocks."""
    blocks: List[RawLogBlock] = []
    segments = [segment.strip() for segment in raw.split(ENTRY_DELIMITER)]

    for index, segment in enumerate([s for s in segments if s], 1):
        if not segment.startswith(CATEGORY_MARKER):
            raise InvalidFormatError(
                f"Entry {index}: must start with '{CATEGORY_MARKER}<category>', got {segment.splitlines()[0]!r}"
            )
        lines = [line.strip() for line in segment.split("\n")]
        category = lines[0][len(CATEGORY_MARKER):].strip()
        if not category:
            raise MissingFieldError(f"Entry {index}: category name is missing after '{CATEGORY_MARKER}'")
        blocks.append(RawLogBlock(category=category, lines=tuple(lines[1:])))

    return blocks


def _number_before(line: str, token: str) -> str:
    head, _, _ = line.partition(token)
    return head.strip()


def parse_count(line: str, token: str, label: str = "") -> int:
    """Parse the integer preceding ``token`` (e.g. '3 sets' -> 3)."""
    raw = _number_before(line, token)
    try:
        value = int(raw)
    except ValueError:
        raise MalformedNumberError(f"{label or token}: expected a whole number in {line!r}") from None
    if value < 0:
        raise MalformedNumberError(f"{label or token}: must not be negative in {line!r}")
    return value


def parse_weight(line: str, label: str = "") -> float:
    """Parse the kilogram value preceding 'kg' (e.g. '82.5 kg' -> 82.5)."""
    raw = _number_before(line, WEIGHT_TOKEN)
    try:
        value = float(raw)
    except ValueError:
        raise MalformedNumberError(f"{label or 'weight'}: expected a number in {line!r}") from None
    if not math.isfinite(value) or value < 0:
        raise MalformedNumberError(f"{label or 'weight'}: must be a non-negative number in {line!r}")
    return value


def parse_entry(block: RawLogBlock, index: int = 1) -> ParsedEntry:
    """Parse one block into a workout entry."""
    prefix = f"Entry {index} ({block.category})"
    if len(block.lines) < MIN_DETAIL_LINES:
        raise MissingFieldError(
            f"{prefix}: expected name, sets, reps and weight lines, got {len(block.lines)} line(s)"
        )

    name_line, sets_line, reps_line, weight_line = block.lines[:MIN_DETAIL_LINES]
    workout_name = name_line[1:].strip()
    if not workout_name:
        raise MissingFieldError(f"{prefix}: workout name is missing")

    entry = ParsedEntry(
        category=block.category,
        workout_name=workout_name,
        sets=parse_count(sets_line, SETS_TOKEN, label=f"{prefix} sets"),
        reps=parse_count(reps_line, REPS_TOKEN, label=f"{prefix} reps"),
        weight=parse_weight(weight_line, label=f"{prefix} weight"),
    )
    try:
        calories = estimate_calories(entry)
    except OverflowError:
        calories = math.inf
    if not math.isfinite(calories):
        raise MalformedNumberError(f"{prefix}: sets, reps and weight are too large to estimate calories")
    return entry


def parse_entries(raw: str) -> List[ParsedEntry]:
    """Parse every entry in a log, failing on the first invalid one."""
    blocks = tokenize(raw)
    if not blocks:
        raise MissingFieldError("Workout log is empty")
    return [parse_entry(block, index) for index, block in enumerate(blocks, 1)]


def parse_workout_log(raw: str, owner: str, logged_at: datetime) -> List[WorkoutRecord]:
    """Turn a raw log into complete records for one owner.

    Parsing is all-or-nothing: nothing is returned unless every entry is
    valid.
    """
    entries = parse_entries(raw)
    return [WorkoutRecord.from_entry(entry, owner=owner, logged_at=logged_at) for entry in entries]


def _as_day(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return datetime.strptime(str(value), "%Y-%m-%d").date()
    except ValueError:
        raise InvalidFormatError(f"Invalid date key {value!r}; expected YYYY-MM-DD") from None


def load_log_input(
    file_path: Optional[Path],
    read_stdin: bool,
    stdin_text: str = "",
) -> List[Tuple[Optional[date], str]]:
    """Load (day, raw log) pairs from a file or stdin text.

    YAML/JSON files may hold one log string, a list of log strings, or a
    mapping of YYYY-MM-DD dates to log strings. Other files are one raw log.
    """
    if file_path:
        text = file_path.read_text()
        if file_path.suffix.lower() in {".yaml", ".yml"}:
            data: Any = yaml.safe_load(text)
        elif file_path.suffix.lower() == ".json":
            data = json.loads(text)
        else:
            return [(None, text)] if text.strip() else []
    elif read_stdin:
        return [(None, stdin_text)] if stdin_text.strip() else []
    else:
        return []

    if data is None:
        return []
    if isinstance(data, str):
        return [(None, data)]
    if isinstance(data, list):
        for index, item in enumerate(data, 1):
            if not isinstance(item, str):
                raise InvalidFormatError(f"Item {index} in {file_path.name} is not a workout log string: {item!r}")
        return [(None, item) for item in data]
    if isinstance(data, dict):
        for key, value in data.items():
            if not isinstance(value, str):
                raise InvalidFormatError(f"Entry {key!s} in {file_path.name} is not a workout log string: {value!r}")
        pairs = [(_as_day(key), value) for key, value in data.items()]
        return sorted(pairs, key=lambda pair: pair[0])
    raise InvalidFormatError(
        f"Unsupported content in {file_path.name}: expected a log string, a list of logs or a date mapping"
    )
