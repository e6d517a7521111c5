"""
Dashboard Report — the dashboard views as JSON and as a styled Excel workbook.

Sheets: Summary (headline figures + AI insights), Monthly, Categories,
Top Expenses, Top Rows. Category cells carry the category's chart color.
"""
from __future__ import annotations

from pathlib import Path
from typing import Optional

import pandas as pd

from tablevision.analytics.dashboard import dashboard_payload
from tablevision.data.schemas import Analytics, InsightData
from tablevision.excel import Column, ExcelWriter, Figure, hex_fill


MONTHLY_COLS = [
    Column("label", "text", "Month"),
    Column("revenue", "currency", "Revenue"),
    Column("profit", "currency", "Profit"),
]

CATEGORY_COLS = [
    Column("name", "text", "Category"),
    Column("revenue", "currency", "Revenue"),
    Column("expenses", "currency", "Expenses"),
    Column("profit", "currency", "Profit"),
    Column("margin_percent", "percent", "Margin"),
    Column("pct_of_expenses", "percent", "% of Expenses"),
]

TOP_EXPENSE_COLS = [
    Column("name", "text", "Category"),
    Column("expenses", "currency", "Expenses"),
    Column("revenue", "currency", "Revenue"),
]

TOP_ROW_COLS = [
    Column("id", "text", "ID"),
    Column("date", "text", "Date"),
    Column("category", "text", "Category"),
    Column("revenue", "currency", "Revenue"),
    Column("profit", "currency", "Profit"),
]


def generate_json(table: str, analytics: Analytics, insights: Optional[InsightData] = None) -> dict:
    data = dashboard_payload(analytics)
    data["table"] = table
    data["insights"] = insights.to_dict() if insights is not None else None
    return data


def _category_color(pos: int, row: dict, key: str):
    if key == "name" and row.get("color"):
        return hex_fill(row["color"])
    return None


def generate_excel(
    table: str,
    analytics: Analytics,
    output_path: str | Path,
    insights: Optional[InsightData] = None,
) -> Path:
    data = generate_json(table, analytics, insights)
    t = data["totals"]
    ew = ExcelWriter()

    ws = ew.sheet("Summary")
    row = ew.banner(ws, f"{table} dashboard",
                    f"{t['records']:,} records  |  {len(data['categories'])} categories  |  "
                    f"Generated {pd.Timestamp.now():%B %d, %Y}")
    row = ew.section(ws, row, "OVERVIEW")
    row = ew.figures(ws, row, [
        Figure(t["revenue"], "TOTAL REVENUE"),
        Figure(t["expenses"], "TOTAL EXPENSES"),
        Figure(t["profit"], "NET PROFIT", signed=True),
        Figure(t["margin"], "PROFIT MARGIN", "percent", signed=True),
        Figure(t["records"], "RECORDS", "count"),
    ])
    if insights is not None:
        row = ew.section(ws, row, "AI INSIGHTS")
        ew.insights(ws, row, insights)

    ew.table(ew.sheet("Monthly"), MONTHLY_COLS, data["monthly"], totals=True)
    ew.table(ew.sheet("Categories"), CATEGORY_COLS, data["categories"],
             fill_for=_category_color, totals=True)
    ew.table(ew.sheet("Top Expenses"), TOP_EXPENSE_COLS, data["expenses_by_category"],
             fill_for=_category_color)
    ew.table(ew.sheet("Top Rows"), TOP_ROW_COLS, data["top_rows"])

    return ew.save(output_path)
