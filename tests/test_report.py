from openpyxl import load_workbook

from tablevision.analytics.dashboard import build_analytics
from tablevision.config import PALETTE
from tablevision.data.schemas import InsightData
from tablevision.reports.dashboard_report import generate_excel, generate_json


def test_generate_json_includes_table_and_insights(sample_rows):
    data = generate_json("orders", build_analytics(sample_rows), InsightData(summary="ok"))
    assert data["table"] == "orders"
    assert data["insights"] == {"summary": "ok", "trends": [], "anomalies": []}
    assert generate_json("orders", build_analytics(sample_rows))["insights"] is None


def test_excel_sheets_and_category_colors(tmp_path, sample_rows):
    insights = InsightData(summary="Sales carry the margin.", trends=["Feb revenue doubled"],
                           anomalies=["Marketing spends more than it earns"])
    out = generate_excel("orders", build_analytics(sample_rows), tmp_path / "report.xlsx", insights)

    wb = load_workbook(out)
    assert wb.sheetnames == ["Summary", "Monthly", "Categories", "Top Expenses", "Top Rows"]

    cats = wb["Categories"]
    assert [cats.cell(row=1, column=c).value for c in range(1, 4)] == ["Category", "Revenue", "Expenses"]
    assert cats.cell(row=2, column=1).value == "Marketing"
    assert cats.cell(row=2, column=1).fill.start_color.rgb.endswith(PALETTE[0].lstrip("#").upper())
    assert cats.cell(row=3, column=1).value == "Sales"
    assert cats.cell(row=3, column=1).fill.start_color.rgb.endswith(PALETTE[1].lstrip("#").upper())
    assert cats.cell(row=4, column=1).value == "TOTAL"

    top = wb["Top Expenses"]
    assert top.cell(row=2, column=1).value == "Sales"
    assert top.cell(row=2, column=1).fill.start_color.rgb.endswith(PALETTE[1].lstrip("#").upper())

    monthly = wb["Monthly"]
    assert [monthly.cell(row=r, column=1).value for r in (2, 3)] == ["Jan 24", "Feb 24"]

    summary_text = [c.value for row in wb["Summary"].iter_rows() for c in row if isinstance(c.value, str)]
    assert "Sales carry the margin." in summary_text
    assert any("Feb revenue doubled" in v for v in summary_text)
