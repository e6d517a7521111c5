"""
Row normalization — typed revenue/expense/profit, month bucket, and category per row.

Malformed values never raise: non-numeric amounts count as 0, unparseable
dates land in the "Unknown" month, empty categories in "Unassigned".
"""
from __future__ import annotations

import datetime as dt
import math
import warnings
from typing import Any, Iterable, Optional

import pandas as pd

from tablevision.config import UNASSIGNED_CATEGORY, UNKNOWN_MONTH
from tablevision.data.schemas import NormalizedRow, RoleKeys, Row


# ---------------------------------------------------------------------------
# Scalar coercion
# ---------------------------------------------------------------------------

def coerce_number(value: Any) -> float:
    """Numeric value of a cell; absent, blank, non-numeric or non-finite → 0.0."""
    if value is None:
        return 0.0
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = str(value).strip()
        if not text:
            return 0.0
        try:
            number = float(text)
        except ValueError:
            return 0.0
    return number if math.isfinite(number) else 0.0


def parse_date(value: Any) -> Optional[pd.Timestamp]:
    """Parse a date-like cell into a Timestamp, or None when it is not a date.

    Numbers are read as epoch milliseconds; strings go through pandas' parser.
    """
    if value is None or isinstance(value, bool):
        return None
    try:
        if isinstance(value, (int, float)):
            if not math.isfinite(value):
                return None
            ts = pd.to_datetime(value, unit="ms", errors="coerce")
        elif isinstance(value, (dt.date, pd.Timestamp)):
            ts = pd.Timestamp(value)
        else:
            text = str(value).strip()
            if not text:
                return None
            with warnings.catch_warnings():
                warnings.simplefilter("ignore", UserWarning)
                ts = pd.to_datetime(text, errors="coerce")
    except (ValueError, TypeError, OverflowError):
        return None
    if ts is None or pd.isna(ts):
        return None
    return ts


def month_bucket(value: Any) -> tuple[str, int]:
    """Return (label, sort_key) for a date cell, e.g. ("Jan 24", 202400)."""
    ts = parse_date(value)
    if ts is None:
        return UNKNOWN_MONTH, 0
    return ts.strftime("%b %y"), ts.year * 100 + (ts.month - 1)


def coerce_label(value: Any) -> str:
    """Stable string form of a cell value (integral floats drop the ".0")."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def coerce_category(value: Any) -> str:
    if value is None or value == "":
        return UNASSIGNED_CATEGORY
    if isinstance(value, float) and math.isnan(value):
        return UNASSIGNED_CATEGORY
    return coerce_label(value)


# ---------------------------------------------------------------------------
# Row-level
# ---------------------------------------------------------------------------

def derive_profit(row: Row, keys: RoleKeys, revenue: float, expense: float) -> float:
    """Explicit profit when the profit column is present (even 0/null), else revenue - expense."""
    if keys.profit_key in row:
        return coerce_number(row[keys.profit_key])
    return revenue - expense


def normalize_row(row: Row, keys: RoleKeys) -> NormalizedRow:
    revenue = coerce_number(row.get(keys.revenue_key))
    expense = coerce_number(row.get(keys.expense_key))
    month, sort_key = month_bucket(row.get(keys.date_key))
    return NormalizedRow(
        revenue=revenue,
        expense=expense,
        profit=derive_profit(row, keys, revenue, expense),
        month=month,
        sort_key=sort_key,
        category=coerce_category(row.get(keys.category_key)),
    )


def format_date_display(value: Any) -> str:
    """Date cell for tables: ISO date when parseable, raw text otherwise, N/A when empty."""
    if value is None or value == "" or value == 0:
        return "N/A"
    ts = parse_date(value)
    if ts is None:
        return str(value)
    return ts.date().isoformat()


def sort_rows_by_date(rows: Iterable[Row], date_key: str) -> list[Row]:
    """Stable chronological sort on one column; rows without a valid date go first."""
    def _key(row: Row) -> tuple[int, int]:
        ts = parse_date(row.get(date_key))
        return (0, 0) if ts is None else (1, ts.value)

    return sorted(rows, key=_key)
