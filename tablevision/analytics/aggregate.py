"""
Aggregation engine — fold normalized rows into monthly and per-category totals.
"""
from __future__ import annotations

from dataclasses import asdict
from typing import Sequence

import pandas as pd

from tablevision.analytics.common import calc_margin
from tablevision.data.normalize import normalize_row
from tablevision.data.schemas import CategoryAggregate, MonthlyAggregate, NormalizedRow, RoleKeys, Row

_FRAME_COLUMNS = list(NormalizedRow.__dataclass_fields__)


def category_sort_key(name: str) -> tuple[str, str]:
    """Case-insensitive name order with a case-sensitive tie-break."""
    return name.casefold(), name


def normalized_frame(rows: Sequence[Row], keys: RoleKeys) -> pd.DataFrame:
    """One normalized record per row, in row order."""
    records = [asdict(normalize_row(row, keys)) for row in rows]
    return pd.DataFrame.from_records(records, columns=_FRAME_COLUMNS)


def monthly_aggregate(frame: pd.DataFrame) -> list[MonthlyAggregate]:
    """Revenue and profit per month label, ordered by sort key (Unknown first)."""
    if frame.empty:
        return []

    grouped = frame.groupby("month", sort=False).agg(
        sort_key=("sort_key", "first"),
        revenue=("revenue", "sum"),
        profit=("profit", "sum"),
    ).reset_index().sort_values("sort_key", kind="stable")

    return [
        MonthlyAggregate(
            label=str(r.month),
            sort_key=int(r.sort_key),
            revenue=float(r.revenue),
            profit=float(r.profit),
        )
        for r in grouped.itertuples(index=False)
    ]


def category_aggregate(frame: pd.DataFrame) -> list[CategoryAggregate]:
    """Revenue, expenses, profit and margin per category, ordered by name."""
    if frame.empty:
        return []

    grouped = frame.groupby("category", sort=False).agg(
        revenue=("revenue", "sum"),
        expenses=("expense", "sum"),
        profit=("profit", "sum"),
    ).reset_index()

    out = [
        CategoryAggregate(
            name=str(r.category),
            revenue=float(r.revenue),
            expenses=float(r.expenses),
            profit=float(r.profit),
            margin_percent=calc_margin(float(r.profit), float(r.revenue)),
        )
        for r in grouped.itertuples(index=False)
    ]
    return sorted(out, key=lambda c: category_sort_key(c.name))


def aggregate(rows: Sequence[Row], keys: RoleKeys) -> tuple[list[MonthlyAggregate], list[CategoryAggregate]]:
    """Monthly and category aggregates for a row set. Empty input → two empty lists."""
    frame = normalized_frame(rows, keys)
    return monthly_aggregate(frame), category_aggregate(frame)
