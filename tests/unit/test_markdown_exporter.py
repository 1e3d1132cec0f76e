from __future__ import annotations

import json
from datetime import date, timezone
from pathlib import Path
from typing import List

import yaml

from wl_cli.core.models import WorkoutRecord
from wl_cli.exporters.json_export import records_payload, write_json
from wl_cli.exporters.markdown import day_to_markdown, generate_indexes, group_by_day, write_day_markdown

DAY = date(2026, 2, 14)


def test_group_by_day_sorts_days(week_records: List[WorkoutRecord]) -> None:
    days = group_by_day(week_records, timezone.utc)
    assert list(days) == [date(2026, 2, 7), date(2026, 2, 8), date(2026, 2, 12), DAY]
    assert len(days[DAY]) == 2


def test_day_to_markdown_contains_frontmatter_and_table(week_records: List[WorkoutRecord]) -> None:
    output = day_to_markdown(DAY, group_by_day(week_records, timezone.utc)[DAY])
    assert output.startswith("---\n")
    frontmatter = yaml.safe_load(output.split("---")[1])
    assert frontmatter == {
        "date": "2026-02-14",
        "workouts": 2,
        "totalCalories": 285.0,
        "categories": ["Legs", "Arms"],
    }
    assert "| Legs | Squat | 3 | 10 | 80 kg | 240.0 |" in output
    assert "| Arms | Curl | 3 | 12 | 12.5 kg | 45.0 |" in output
    assert "- Arms: 45.0 kcal" in output


def test_write_day_markdown_creates_month_folder(tmp_path: Path, record_factory) -> None:
    path = write_day_markdown(tmp_path, DAY, [record_factory()])
    assert path == tmp_path / "2026-02" / "2026-02-14.md"
    assert path.exists()


def test_write_day_markdown_skips_overwrite_when_rewrite_false(tmp_path: Path, record_factory) -> None:
    path = write_day_markdown(tmp_path, DAY, [record_factory()])
    path.write_text("ORIGINAL")
    second = write_day_markdown(tmp_path, DAY, [record_factory()], rewrite=False)
    assert second == path
    assert path.read_text() == "ORIGINAL"


def test_generate_indexes_writes_journal_and_category_pages(
    tmp_path: Path, week_records: List[WorkoutRecord]
) -> None:
    generate_indexes(tmp_path, group_by_day(week_records, timezone.utc))
    top = (tmp_path / "INDEX.md").read_text()
    assert "# Workout Journal" in top
    assert "_4 days_" in top
    assert "[2026-02-14](2026-02/2026-02-14.md)" in top
    back = (tmp_path / "categories" / "back.md").read_text()
    assert back.startswith("# Back")
    assert "_2 workouts, 320.0 kcal_" in back


def test_generate_indexes_merges_categories_with_same_slug(tmp_path: Path, record_factory) -> None:
    records = [record_factory("Legs"), record_factory("legs!", "Lunge", 2, 10, 20.0)]
    generate_indexes(tmp_path, group_by_day(records, timezone.utc))
    pages = list((tmp_path / "categories").iterdir())
    assert [page.name for page in pages] == ["legs.md"]
    content = pages[0].read_text()
    assert content.startswith("# Legs, legs!")
    assert "_2 workouts, 280.0 kcal_" in content
    assert "| Squat |" in content
    assert "| Lunge |" in content


def test_records_payload_and_write_json(tmp_path: Path, record_factory) -> None:
    payload = records_payload([record_factory().with_id("r1")], totalCaloriesBurnt=240.0)
    path = write_json(tmp_path / "out" / "workouts.json", payload)
    loaded = json.loads(path.read_text())
    assert loaded["workouts"][0]["id"] == "r1"
    assert loaded["totalCaloriesBurnt"] == 240.0
