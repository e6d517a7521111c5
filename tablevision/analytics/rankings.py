"""
Ranking views — read-only projections over the aggregates and raw rows.
"""
from __future__ import annotations

from typing import Sequence

from tablevision.config import TOP_EXPENSE_CATEGORIES, TOP_PROFIT_ROWS
from tablevision.data.normalize import coerce_label, coerce_number, derive_profit, format_date_display
from tablevision.data.schemas import CategoryAggregate, MonthlyAggregate, RankedRow, RoleKeys, Row


def top_expense_categories(
    categories: Sequence[CategoryAggregate],
    limit: int = TOP_EXPENSE_CATEGORIES,
) -> list[CategoryAggregate]:
    """Highest-expense categories; ties keep their name order, colors untouched."""
    return sorted(categories, key=lambda c: c.expenses, reverse=True)[:limit]


def rank_row(row: Row, keys: RoleKeys) -> RankedRow:
    revenue = coerce_number(row.get(keys.revenue_key))
    expense = coerce_number(row.get(keys.expense_key))
    return RankedRow(row=row, revenue=revenue, profit=derive_profit(row, keys, revenue, expense))


def top_profit_rows(
    rows: Sequence[Row],
    keys: RoleKeys,
    limit: int = TOP_PROFIT_ROWS,
) -> list[RankedRow]:
    """Most profitable individual rows by derived profit; ties keep buffer order."""
    ranked = [rank_row(row, keys) for row in rows]
    return sorted(ranked, key=lambda r: r.profit, reverse=True)[:limit]


def monthly_series(monthly: Sequence[MonthlyAggregate]) -> list[MonthlyAggregate]:
    """The monthly aggregate in chronological (sort key) order."""
    return sorted(monthly, key=lambda m: m.sort_key)


def ranked_row_display(ranked: RankedRow, keys: RoleKeys) -> dict:
    """Table cells for one top-profit row."""
    row = ranked.row
    ident = row.get(keys.id_key)
    category = row.get(keys.category_key)
    return {
        "id": None if ident is None else coerce_label(ident),
        "date": format_date_display(row.get(keys.date_key)),
        "category": "N/A" if category is None or category == "" else coerce_label(category),
        "revenue": ranked.revenue,
        "profit": ranked.profit,
    }
