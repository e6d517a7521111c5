"""
Stable category → color assignment shared by every chart view.

Colors follow category *name* order, never magnitude, so a category keeps its
color in the revenue chart, the expense pie, and the margin bars alike.
"""
from __future__ import annotations

from dataclasses import replace
from typing import Sequence

from tablevision.analytics.aggregate import category_sort_key
from tablevision.config import PALETTE
from tablevision.data.schemas import CategoryAggregate


def assign_colors(
    categories: Sequence[CategoryAggregate],
    palette: Sequence[str] = PALETTE,
) -> list[CategoryAggregate]:
    """Return the categories in name order with ``palette[i % len(palette)]`` colors."""
    ordered = sorted(categories, key=lambda c: category_sort_key(c.name))
    return [replace(c, color=palette[i % len(palette)]) for i, c in enumerate(ordered)]


def color_map(categories: Sequence[CategoryAggregate]) -> dict[str, str]:
    return {c.name: c.color for c in categories if c.color is not None}
