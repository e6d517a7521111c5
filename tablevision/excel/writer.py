"""
ExcelWriter — builds the styled dashboard workbook sheet by sheet.
"""
from __future__ import annotations

from pathlib import Path
from typing import Callable, NamedTuple, Optional, Sequence

from openpyxl import Workbook
from openpyxl.styles import PatternFill
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from tablevision.data.schemas import InsightData
from tablevision.excel.formatters import Column, fit_columns, header_row, headline_figure, value_cell
from tablevision.excel.styles import (
    CAPTION_FONT, CELL_BORDER, NOTE_FILL, NOTE_FONT, NOTE_TITLE_FONT, SECTION_FONT, TITLE_FONT, WRAP,
)

# fill_for(position, row, column_key) -> fill override for that cell, or None
FillFor = Callable[[int, dict, str], Optional[PatternFill]]


class Figure(NamedTuple):
    value: float
    label: str
    kind: str = "currency"
    signed: bool = False


class ExcelWriter:
    """One workbook; the first sheet requested replaces openpyxl's default sheet."""

    def __init__(self) -> None:
        self.wb = Workbook()
        self._fresh = True

    def sheet(self, title: str) -> Worksheet:
        if self._fresh:
            self._fresh = False
            ws = self.wb.active
            ws.title = title
            return ws
        return self.wb.create_sheet(title=title)

    # ------------------------------------------------------------------
    # Summary blocks
    # ------------------------------------------------------------------

    def banner(self, ws: Worksheet, title: str, caption: str, span: int = 9) -> int:
        """Title and caption across the first two rows. Returns the next free row."""
        for row, text, font in ((1, title, TITLE_FONT), (2, caption, CAPTION_FONT)):
            ws.cell(row=row, column=1, value=text).font = font
            ws.merge_cells(start_row=row, start_column=1, end_row=row, end_column=span)
        return 4

    def section(self, ws: Worksheet, row: int, title: str) -> int:
        ws.cell(row=row, column=1, value=title).font = SECTION_FONT
        return row + 2

    def figures(self, ws: Worksheet, row: int, items: Sequence[Figure], step: int = 2) -> int:
        """Headline figures side by side, ``step`` columns apart."""
        for i, fig in enumerate(items):
            headline_figure(ws, row, 1 + i * step, fig.value, fig.label, fig.kind, fig.signed)
        for i in range(len(items) * step):
            ws.column_dimensions[get_column_letter(i + 1)].width = 16
        return row + 3

    def insights(self, ws: Worksheet, row: int, insights: InsightData, span: int = 9) -> int:
        """Summary paragraph followed by the trend and anomaly lists."""
        ws.cell(row=row, column=1, value=insights.summary).font = NOTE_FONT
        ws.cell(row=row, column=1).alignment = WRAP
        ws.merge_cells(start_row=row, start_column=1, end_row=row, end_column=span)
        ws.row_dimensions[row].height = 45
        row += 2

        for heading, items in (("Trends", insights.trends), ("Anomalies", insights.anomalies)):
            if not items:
                continue
            ws.cell(row=row, column=1, value=heading).font = NOTE_TITLE_FONT
            row += 1
            for item in items:
                cell = ws.cell(row=row, column=1, value=f"• {item}")
                cell.font = NOTE_FONT
                cell.fill = NOTE_FILL
                cell.border = CELL_BORDER
                cell.alignment = WRAP
                ws.merge_cells(start_row=row, start_column=1, end_row=row, end_column=span)
                row += 1
            row += 1
        return row

    # ------------------------------------------------------------------
    # Tables
    # ------------------------------------------------------------------

    def table(
        self,
        ws: Worksheet,
        columns: list[Column],
        rows: list[dict],
        start_row: int = 1,
        fill_for: FillFor | None = None,
        totals: bool = False,
    ) -> int:
        """Header plus one line per row, and optionally a TOTAL line summing money columns.

        Returns the row after the last one written.
        """
        header_row(ws, start_row, columns)
        row = start_row + 1
        for pos, data in enumerate(rows):
            for col, column in enumerate(columns, 1):
                fill = fill_for(pos, data, column.key) if fill_for else None
                value_cell(ws, row, col, data.get(column.key), column.kind, fill=fill)
            row += 1

        if totals and rows:
            for col, column in enumerate(columns, 1):
                if col == 1:
                    value = "TOTAL"
                elif column.kind in ("currency", "count"):
                    value = sum(r.get(column.key) or 0 for r in rows)
                else:
                    value = ""
                value_cell(ws, row, col, value, column.kind if value != "" else "text", total=True)
            row += 1

        fit_columns(ws)
        ws.freeze_panes = f"A{start_row + 1}"
        return row

    def save(self, path: str | Path) -> Path:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        self.wb.save(path)
        return path
