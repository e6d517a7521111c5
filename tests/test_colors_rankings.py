from tablevision.analytics.colors import assign_colors, color_map
from tablevision.analytics.dashboard import build_analytics, dashboard_payload
from tablevision.analytics.rankings import (
    monthly_series,
    ranked_row_display,
    top_expense_categories,
    top_profit_rows,
)
from tablevision.config import PALETTE
from tablevision.data.infer import infer_role_keys
from tablevision.data.schemas import CategoryAggregate, MonthlyAggregate


def _cat(name, expenses=0.0):
    return CategoryAggregate(name=name, revenue=0.0, expenses=expenses, profit=-expenses, margin_percent=0.0)


def test_colors_follow_name_order_not_magnitude():
    cats = assign_colors([_cat("Zeta", 1000), _cat("alpha", 1), _cat("Beta", 50)])
    assert [(c.name, c.color) for c in cats] == [
        ("alpha", PALETTE[0]),
        ("Beta", PALETTE[1]),
        ("Zeta", PALETTE[2]),
    ]


def test_colors_wrap_around_palette():
    names = [f"c{i:02d}" for i in range(len(PALETTE) + 2)]
    cats = assign_colors([_cat(n) for n in names])
    assert cats[len(PALETTE)].color == PALETTE[0]
    assert cats[len(PALETTE) + 1].color == PALETTE[1]


def test_color_stays_with_category_in_expense_ranking():
    cats = assign_colors([_cat(n, e) for n, e in [("A", 1), ("B", 9), ("C", 5)]])
    colors = color_map(cats)
    top = top_expense_categories(cats)
    assert [c.name for c in top] == ["B", "C", "A"]
    assert all(c.color == colors[c.name] for c in top)


def test_top_expense_categories_caps_at_five_and_keeps_name_order_on_ties():
    cats = assign_colors([_cat(n, 10) for n in "GFEDCBA"])
    top = top_expense_categories(cats)
    assert len(top) == 5
    assert [c.name for c in top] == ["A", "B", "C", "D", "E"]
    assert len(top_expense_categories(cats[:2])) == 2


def test_top_profit_rows_caps_at_ten_descending():
    rows = [{"id": i, "revenue": i * 10, "cost": 5} for i in range(15)]
    keys = infer_role_keys(rows[0])
    top = top_profit_rows(rows, keys)
    assert len(top) == 10
    assert [r.row["id"] for r in top] == list(range(14, 4, -1))
    assert top[0].profit == 135


def test_top_profit_rows_ties_keep_buffer_order():
    rows = [{"id": "a", "revenue": 5}, {"id": "b", "revenue": 5}, {"id": "c", "revenue": 7}]
    top = top_profit_rows(rows, infer_role_keys(rows[0]))
    assert [r.row["id"] for r in top] == ["c", "a", "b"]


def test_monthly_series_is_chronological():
    months = [MonthlyAggregate("Feb 24", 202401, 1, 1), MonthlyAggregate("Unknown", 0, 1, 1),
              MonthlyAggregate("Jan 24", 202400, 1, 1)]
    assert [m.label for m in monthly_series(months)] == ["Unknown", "Jan 24", "Feb 24"]


def test_ranked_row_display_fills_missing_cells():
    rows = [{"id": 1.0, "revenue": 10, "created_at": None}]
    keys = infer_role_keys(rows[0])
    cells = ranked_row_display(top_profit_rows(rows, keys)[0], keys)
    assert cells == {"id": "1", "date": "N/A", "category": "N/A", "revenue": 10.0, "profit": 10.0}


def test_dashboard_payload_totals(sample_rows):
    payload = dashboard_payload(build_analytics(sample_rows))
    assert payload["totals"] == {
        "revenue": 350.0,
        "expenses": 150.0,
        "profit": 200.0,
        "margin": 57.1,
        "records": 3,
    }
    assert [c["name"] for c in payload["expenses_by_category"]] == ["Sales", "Marketing"]
    assert payload["categories"][0]["pct_of_expenses"] == 40.0
    assert payload["keys"]["expense_key"] == "cost"
