"""Formatting helpers used by exports and console output."""

from __future__ import annotations

from datetime import date
from typing import Optional


def ordinal_suffix(number: int) -> str:
    """English ordinal suffix: 1 -> 'st', 12 -> 'th', 22 -> 'nd'."""
    if 11 <= number % 100 <= 13:
        return "th"
    return {1: "st", 2: "nd", 3: "rd"}.get(number % 10, "th")


def ordinal_day_label(day: date) -> str:
    """Day-of-month label such as '3rd' or '21st'."""
    return f"{day.day}{ordinal_suffix(day.day)}"


def format_calories(value: Optional[float]) -> str:
    """Format a calorie figure with one decimal."""
    if value is None:
        return "N/A"
    return f"{float(value):.1f} kcal"


def format_weight(kilograms: Optional[float]) -> str:
    """Format kilograms without a trailing '.0' for whole numbers."""
    if kilograms is None:
        return "N/A"
    value = float(kilograms)
    if value.is_integer():
        return f"{int(value)} kg"
    return f"{value:g} kg"


def format_volume(value: Optional[float]) -> str:
    """Format sets*reps*weight load in kilograms."""
    if not value:
        return "0 kg"
    return f"{float(value):,.0f} kg"


def format_share(pct: float) -> str:
    return f"{pct:.1f}%"
