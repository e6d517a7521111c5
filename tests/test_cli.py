import sys

import pytest
from openpyxl import load_workbook

from tablevision import cli


@pytest.fixture
def csv_table(tmp_path):
    path = tmp_path / "orders.csv"
    path.write_text(
        "id,created_at,department,revenue,cost\n"
        "1,2024-01-05,Sales,100,40\n"
        "2,2024-02-10,Sales,200,50\n"
        "3,2024-01-20,Marketing,50,60\n"
    )
    return path


def _run(monkeypatch, *argv):
    monkeypatch.setattr(sys, "argv", ["tablevision", *argv])
    cli.main()


def test_summary_from_csv(monkeypatch, capsys, csv_table):
    _run(monkeypatch, "summary", "orders", "--csv", str(csv_table))
    out = capsys.readouterr().out
    assert "TABLEVISION — ORDERS" in out
    assert "Records: 3" in out
    assert "expense=cost" in out
    assert out.index("Jan 24") < out.index("Feb 24")
    assert "Marketing" in out


def test_export_from_csv(monkeypatch, capsys, csv_table, tmp_path):
    out_path = tmp_path / "out" / "orders.xlsx"
    _run(monkeypatch, "export", "orders", "--csv", str(csv_table), "--output", str(out_path))
    assert "Report saved to" in capsys.readouterr().out
    assert load_workbook(out_path).sheetnames[0] == "Summary"


def test_missing_table_exits_with_error(monkeypatch, capsys, csv_table):
    monkeypatch.setattr(cli, "_source_for", lambda args: cli.MemorySource({}))
    with pytest.raises(SystemExit) as exc:
        _run(monkeypatch, "summary", "invoices")
    assert exc.value.code == 1
    assert 'Table "invoices" was not found' in capsys.readouterr().out
