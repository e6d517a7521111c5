import pytest

from tablevision.analytics.aggregate import aggregate, category_sort_key
from tablevision.analytics.common import safe_divide
from tablevision.analytics.dashboard import build_analytics
from tablevision.data.infer import infer_role_keys


def test_end_to_end_category_and_monthly(sample_rows):
    monthly, categories = aggregate(sample_rows, infer_role_keys(sample_rows[0]))

    assert [c.name for c in categories] == ["Marketing", "Sales"]
    marketing, sales = categories
    assert (marketing.revenue, marketing.expenses, marketing.profit) == (50, 60, -10)
    assert marketing.margin_percent == pytest.approx(-20.0)
    assert (sales.revenue, sales.expenses, sales.profit) == (300, 90, 210)
    assert sales.margin_percent == pytest.approx(70.0)

    # January profit is 60 (Sales) + -10 (Marketing)
    assert [(m.label, m.revenue, m.profit) for m in monthly] == [
        ("Jan 24", 150, 50),
        ("Feb 24", 200, 150),
    ]


def test_revenue_totals_match_row_sum(sample_rows):
    rows = sample_rows + [{"revenue": "12.5", "cost": "x", "department": None, "created_at": "bad"}]
    monthly, categories = aggregate(rows, infer_role_keys(rows[0]))
    expected = 100 + 200 + 50 + 12.5
    assert sum(c.revenue for c in categories) == pytest.approx(expected)
    assert sum(m.revenue for m in monthly) == pytest.approx(expected)


def test_unknown_month_sorts_first(sample_rows):
    rows = sample_rows + [{"revenue": 5, "cost": 1, "department": "Ops", "created_at": "n/a"}]
    monthly, _ = aggregate(rows, infer_role_keys(rows[0]))
    assert monthly[0].label == "Unknown"
    assert monthly[0].sort_key == 0
    assert [m.sort_key for m in monthly] == sorted(m.sort_key for m in monthly)


def test_missing_category_column_goes_to_unassigned(sample_rows):
    rows = sample_rows + [{"revenue": 10, "cost": 4, "created_at": "2024-02-01"}]
    _, categories = aggregate(rows, infer_role_keys(rows[0]))
    unassigned = next(c for c in categories if c.name == "Unassigned")
    assert (unassigned.revenue, unassigned.expenses, unassigned.profit) == (10, 4, 6)


def test_zero_revenue_margin_is_zero():
    rows = [{"revenue": 0, "cost": 10, "department": "Ops", "created_at": "2024-01-01"}]
    _, categories = aggregate(rows, infer_role_keys(rows[0]))
    assert categories[0].margin_percent == 0
    assert categories[0].profit == -10


def test_explicit_profit_column_overrides_derivation():
    rows = [
        {"revenue": 100, "cost": 40, "profit": 10, "department": "A", "created_at": "2024-01-01"},
        {"revenue": 100, "cost": 40, "profit": None, "department": "A", "created_at": "2024-01-01"},
    ]
    _, categories = aggregate(rows, infer_role_keys(rows[0]))
    assert categories[0].profit == 10


def test_zero_profit_column_is_kept_not_derived():
    rows = [{"revenue": 100, "cost": 40, "profit": 0, "department": "A", "created_at": "2024-01-01"}]
    monthly, categories = aggregate(rows, infer_role_keys(rows[0]))
    assert categories[0].profit == 0
    assert monthly[0].profit == 0


def test_empty_input_gives_empty_aggregates():
    monthly, categories = aggregate([], infer_role_keys({}))
    assert monthly == []
    assert categories == []
    assert build_analytics([]) is None


def test_category_names_sort_case_insensitively():
    names = ["beta", "Alpha", "alpha", "Gamma"]
    assert sorted(names, key=category_sort_key) == ["Alpha", "alpha", "beta", "Gamma"]


def test_pipeline_is_idempotent(sample_rows):
    first = build_analytics(sample_rows)
    second = build_analytics(sample_rows)
    assert first == second
    assert [c.color for c in first.categories] == [c.color for c in second.categories]


def test_safe_divide_falls_back_on_zero_denominator():
    assert safe_divide(30, 120) == 0.25
    assert safe_divide(5, 0) == 0.0
    assert safe_divide(5, 0, default=-1.0) == -1.0
