"""Static constants for the workout log grammar and reports."""

from __future__ import annotations

# Calibration factor for the linear calorie proxy (sets * reps * weight * factor).
CALORIE_FACTOR = 0.1

ENTRY_DELIMITER = ";"
CATEGORY_MARKER = "#"
SETS_TOKEN = "sets"
REPS_TOKEN = "reps"
WEIGHT_TOKEN = "kg"

# Category line plus name, sets, reps and weight lines.
MIN_DETAIL_LINES = 4

WEEK_DAYS = 7

# Range used by analyze/export when no date flag is given.
DEFAULT_DATE_RANGE = "last-30-days"

STORE_BACKENDS = ("file", "http")

EXPORT_FORMATS = ("csv", "json", "markdown")

CSV_FIELDS = [
    "id",
    "date",
    "category",
    "workoutName",
    "sets",
    "reps",
    "weight",
    "caloriesBurned",
]
