"""
Cell-level helpers: typed value cells, header rows, column fitting, headline figures.
"""
from __future__ import annotations

from typing import Any, NamedTuple

from openpyxl.styles import PatternFill
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from tablevision.excel.styles import (
    CELL_BORDER, CELL_FONT, CENTER, FIGURE_FONT, FIGURE_LABEL_FONT, GAIN_FIGURE_FONT,
    HEADER_BORDER, HEADER_FILL, HEADER_FONT, LEFT, LOSS_FIGURE_FONT, RIGHT,
    STRIPE_FILL, TOTAL_BORDER, TOTAL_FILL, TOTAL_FONT, solid,
)

# Number formats by column kind; percentages are already scaled to 0-100
NUMBER_FORMATS = {
    "currency": '"$"#,##0.00',
    "money": '"$"#,##0;-"$"#,##0',
    "percent": '0.0"%"',
    "count": "#,##0",
}


class Column(NamedTuple):
    key: str
    kind: str     # "text" or a NUMBER_FORMATS key
    label: str


def hex_fill(color: str) -> PatternFill:
    """Solid fill from a chart color such as "#6366f1"."""
    return solid(color.lstrip("#").upper())


def header_row(ws: Worksheet, row: int, columns: list[Column]) -> None:
    for col, column in enumerate(columns, 1):
        cell = ws.cell(row=row, column=col, value=column.label)
        cell.font = HEADER_FONT
        cell.fill = HEADER_FILL
        cell.border = HEADER_BORDER
        cell.alignment = CENTER


def value_cell(
    ws: Worksheet,
    row: int,
    col: int,
    value: Any,
    kind: str = "text",
    *,
    total: bool = False,
    fill: PatternFill | None = None,
) -> None:
    """Write one table cell; an explicit fill wins over striping and the total band."""
    if value is None:
        value = "" if kind == "text" else 0
    cell = ws.cell(row=row, column=col, value=value)
    cell.font = TOTAL_FONT if total else CELL_FONT
    cell.border = TOTAL_BORDER if total else CELL_BORDER
    cell.alignment = LEFT if kind == "text" else RIGHT
    if kind in NUMBER_FORMATS:
        cell.number_format = NUMBER_FORMATS[kind]

    if fill is not None:
        cell.fill = fill
    elif total:
        cell.fill = TOTAL_FILL
    elif row % 2 == 0:
        cell.fill = STRIPE_FILL


def fit_columns(ws: Worksheet, lo: int = 10, hi: int = 50) -> None:
    """Size each column to its longest rendered value, clamped to [lo, hi]."""
    for cells in ws.iter_cols():
        longest = max((len(str(c.value)) for c in cells if c.value is not None), default=0)
        letter = get_column_letter(cells[0].column)
        ws.column_dimensions[letter].width = min(max(longest + 2, lo), hi)


def headline_figure(ws: Worksheet, row: int, col: int, value: float, label: str, kind: str,
                    signed: bool = False) -> None:
    """Large figure with a caption underneath; ``signed`` colors it by sign."""
    cell = ws.cell(row=row, column=col, value=value)
    if signed:
        cell.font = GAIN_FIGURE_FONT if value >= 0 else LOSS_FIGURE_FONT
    else:
        cell.font = FIGURE_FONT
    cell.alignment = CENTER
    if kind in NUMBER_FORMATS:
        cell.number_format = NUMBER_FORMATS["money" if kind == "currency" else kind]

    caption = ws.cell(row=row + 1, column=col, value=label)
    caption.font = FIGURE_LABEL_FONT
    caption.alignment = CENTER
