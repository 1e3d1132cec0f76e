"""Markdown journal export."""

from __future__ import annotations

from collections import defaultdict
from datetime import date, tzinfo
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

import yaml

from wl_cli.core.analysis import category_breakdown, local_day, total_calories
from wl_cli.core.models import WorkoutRecord
from wl_cli.utils.formatting import format_calories, format_weight
from wl_cli.utils.text import slugify


def group_by_day(
    records: Iterable[WorkoutRecord],
    tz: Optional[tzinfo] = None,
) -> Dict[date, List[WorkoutRecord]]:
    grouped: Dict[date, List[WorkoutRecord]] = defaultdict(list)
    for record in records:
        grouped[local_day(record.date, tz)].append(record)
    return dict(sorted(grouped.items()))


def day_to_markdown(day: date, records: List[WorkoutRecord]) -> str:
    """Render one day of workouts as markdown with YAML frontmatter."""
    total = total_calories(records)
    categories = category_breakdown(records)
    frontmatter = yaml.safe_dump(
        {
            "date": day.isoformat(),
            "workouts": len(records),
            "totalCalories": round(total, 1),
            "categories": [item.label for item in categories],
        },
        sort_keys=False,
    )

    lines = [
        "---",
        frontmatter.strip(),
        "---",
        "",
        f"# Workouts {day.isoformat()}",
        "",
        f"- **Workouts:** {len(records)}",
        f"- **Calories:** {format_calories(total)}",
        "",
        "| Category | Workout | Sets | Reps | Weight | Calories |",
        "|----------|---------|------|------|--------|----------|",
    ]
    for record in records:
        lines.append(
            f"| {record.category} | {record.workout_name} | {record.sets} | {record.reps} | "
            f"{format_weight(record.weight)} | {record.calories_burned:.1f} |"
        )

    if categories:
        lines.extend(["", "## Categories"])
        for item in categories:
            lines.append(f"- {item.label}: {format_calories(item.value)}")

    return "\n".join(lines) + "\n"


def write_day_markdown(output_dir: Path, day: date, records: List[WorkoutRecord], rewrite: bool = True) -> Path:
    """Write one day's journal file and return its path."""
    out_dir = output_dir / day.strftime("%Y-%m")
    out_path = out_dir / f"{day.isoformat()}.md"

    if out_path.exists() and not rewrite:
        return out_path

    out_dir.mkdir(parents=True, exist_ok=True)
    out_path.write_text(day_to_markdown(day, records))
    return out_path


def generate_indexes(output_dir: Path, days: Dict[date, List[WorkoutRecord]]) -> None:
    """Write INDEX.md over all days plus one index per category."""
    lines = [
        "# Workout Journal",
        "",
        f"_{len(days)} days_",
        "",
        "| Date | Workouts | Calories | Categories |",
        "|------|----------|----------|------------|",
    ]
    # Keyed by slug so categories that share a file name share a page.
    by_slug: Dict[str, List[Tuple[date, WorkoutRecord]]] = defaultdict(list)
    labels_by_slug: Dict[str, List[str]] = defaultdict(list)
    for day in sorted(days, reverse=True):
        records = days[day]
        labels = ", ".join(item.label for item in category_breakdown(records))
        link = f"[{day.isoformat()}]({day.strftime('%Y-%m')}/{day.isoformat()}.md)"
        lines.append(f"| {link} | {len(records)} | {total_calories(records):.1f} | {labels} |")
        for record in records:
            slug = slugify(record.category)
            by_slug[slug].append((day, record))
            if record.category not in labels_by_slug[slug]:
                labels_by_slug[slug].append(record.category)
    lines.append("")
    output_dir.mkdir(parents=True, exist_ok=True)
    (output_dir / "INDEX.md").write_text("\n".join(lines))

    for slug, entries in by_slug.items():
        records = [record for _, record in entries]
        rows = [
            f"# {', '.join(labels_by_slug[slug])}",
            "",
            f"_{len(records)} workouts, {format_calories(total_calories(records))}_",
            "",
            "| Date | Workout | Sets | Reps | Weight | Calories |",
            "|------|---------|------|------|--------|----------|",
        ]
        for day, record in sorted(entries, key=lambda item: item[1].date, reverse=True):
            rows.append(
                f"| {day.isoformat()} | {record.workout_name} | {record.sets} | "
                f"{record.reps} | {format_weight(record.weight)} | {record.calories_burned:.1f} |"
            )
        rows.append("")
        path = output_dir / "categories" / f"{slug}.md"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("\n".join(rows))
