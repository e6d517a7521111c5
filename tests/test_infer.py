from tablevision.config import ROLE_DEFAULTS
from tablevision.data.infer import find_key, infer_role_keys, resolve_role


def test_find_key_prefers_candidate_priority_over_column_order():
    row = {"category": "A", "department": "B"}
    assert find_key(row, ["department", "category"]) == "department"


def test_find_key_is_case_insensitive_and_preserves_column_case():
    row = {"Order_ID": 7, "Total Revenue": 10}
    assert find_key(row, ["revenue"]) == "Total Revenue"


def test_find_key_returns_first_column_containing_winning_candidate():
    row = {"net_sales": 1, "gross_sales": 2}
    assert find_key(row, ["sales"]) == "net_sales"


def test_find_key_no_match():
    assert find_key({"foo": 1}, ["bar", "baz"]) is None


def test_resolve_role_falls_back_to_default():
    assert resolve_role({"foo": 1}, "expense") == ROLE_DEFAULTS["expense"]


def test_infer_role_keys_on_typical_row():
    row = {
        "id": 1,
        "created_at": "2024-01-05",
        "department": "Sales",
        "revenue": 100,
        "cost": 40,
        "net_profit": 60,
    }
    keys = infer_role_keys(row)
    assert keys.date_key == "created_at"
    assert keys.category_key == "department"
    assert keys.revenue_key == "revenue"
    assert keys.expense_key == "cost"
    assert keys.profit_key == "net_profit"
    assert keys.id_key == "id"


def test_infer_role_keys_empty_row_uses_all_defaults():
    keys = infer_role_keys({})
    assert keys.to_dict() == {
        "date_key": ROLE_DEFAULTS["date"],
        "category_key": ROLE_DEFAULTS["category"],
        "revenue_key": ROLE_DEFAULTS["revenue"],
        "expense_key": ROLE_DEFAULTS["expense"],
        "profit_key": ROLE_DEFAULTS["profit"],
        "id_key": ROLE_DEFAULTS["id"],
    }


def test_infer_role_keys_revenue_candidate_order():
    # "amount" outranks "total" even though "total" comes first in the row
    keys = infer_role_keys({"total": 5, "amount": 3})
    assert keys.revenue_key == "amount"
