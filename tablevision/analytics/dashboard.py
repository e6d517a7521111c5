"""
Dashboard analytics — the full inference → aggregation → color → ranking pipeline.

``build_analytics`` is a pure function of the row list; the store caches its
result per buffer version.
"""
from __future__ import annotations

from dataclasses import asdict
from typing import Optional, Sequence

from tablevision.analytics.aggregate import aggregate
from tablevision.analytics.colors import assign_colors
from tablevision.analytics.common import calc_margin, pct_of_total, sanitize_for_json
from tablevision.analytics.rankings import (
    monthly_series,
    ranked_row_display,
    top_expense_categories,
    top_profit_rows,
)
from tablevision.data.infer import infer_role_keys
from tablevision.data.schemas import Analytics, Row


def build_analytics(rows: Sequence[Row]) -> Optional[Analytics]:
    """Derive every dashboard view from a row set. Returns None for no rows."""
    if not rows:
        return None

    # Roles come from the first row only; later rows are not re-checked
    keys = infer_role_keys(rows[0])
    monthly, categories = aggregate(rows, keys)
    categories = assign_colors(categories)

    return Analytics(
        keys=keys,
        monthly=monthly_series(monthly),
        categories=categories,
        expenses_by_category=top_expense_categories(categories),
        top_rows=top_profit_rows(rows, keys),
        row_count=len(rows),
    )


def _totals(analytics: Analytics) -> dict:
    revenue = sum(c.revenue for c in analytics.categories)
    expenses = sum(c.expenses for c in analytics.categories)
    profit = sum(c.profit for c in analytics.categories)
    return {
        "revenue": revenue,
        "expenses": expenses,
        "profit": profit,
        "margin": round(calc_margin(profit, revenue), 1),
        "records": analytics.row_count,
    }


def dashboard_payload(analytics: Analytics) -> dict:
    """JSON-ready dashboard views for the API and the exported report."""
    totals = _totals(analytics)
    categories = []
    for c in analytics.categories:
        d = asdict(c)
        d["pct_of_expenses"] = round(pct_of_total(c.expenses, totals["expenses"]), 1)
        categories.append(d)

    return sanitize_for_json({
        "keys": analytics.keys,
        "totals": totals,
        "monthly": analytics.monthly,
        "categories": categories,
        "expenses_by_category": analytics.expenses_by_category,
        "top_rows": [ranked_row_display(r, analytics.keys) for r in analytics.top_rows],
    })
