"""Calorie estimate for a strength entry."""

from __future__ import annotations

from typing import Any

from wl_cli.core.constants import CALORIE_FACTOR


def estimate_calories(entry: Any) -> float:
    """Return ``sets * reps * weight * CALORIE_FACTOR`` for an entry.

    This is a linear proxy for energy expenditure, not a physiological
    model. Any zero factor yields 0.
    """
    return entry.sets * entry.reps * entry.weight * CALORIE_FACTOR
