from datetime import date

import pytest

from wl_cli.utils.formatting import (
    format_calories,
    format_share,
    format_volume,
    format_weight,
    ordinal_day_label,
    ordinal_suffix,
)
from wl_cli.utils.text import slugify


@pytest.mark.parametrize(
    ("number", "suffix"),
    [(1, "st"), (2, "nd"), (3, "rd"), (4, "th"), (11, "th"), (12, "th"), (13, "th"), (21, "st"), (22, "nd"), (23, "rd"), (31, "st")],
)
def test_ordinal_suffix(number: int, suffix: str) -> None:
    assert ordinal_suffix(number) == suffix


def test_ordinal_day_label() -> None:
    assert ordinal_day_label(date(2026, 2, 3)) == "3rd"
    assert ordinal_day_label(date(2026, 2, 11)) == "11th"


def test_format_helpers() -> None:
    assert format_calories(240) == "240.0 kcal"
    assert format_calories(None) == "N/A"
    assert format_weight(80.0) == "80 kg"
    assert format_weight(82.5) == "82.5 kg"
    assert format_volume(12345.0) == "12,345 kg"
    assert format_volume(0) == "0 kg"
    assert format_share(12.345) == "12.3%"


def test_slugify_category_names() -> None:
    assert slugify("Upper Body / Push") == "upper-body-push"
    assert slugify("!!!") == "uncategorized"
