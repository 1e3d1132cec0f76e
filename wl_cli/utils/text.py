"""Text helpers."""

from __future__ import annotations

import re


def slugify(value: str, max_len: int = 50, fallback: str = "uncategorized") -> str:
    """Generate filesystem-safe slug for a category or workout name."""
    slug = re.sub(r"[^a-z0-9]+", "-", value.lower()).strip("-")
    return (slug or fallback)[:max_len]
