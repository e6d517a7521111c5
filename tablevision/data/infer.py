"""
Column role inference — guess which column of an unlabeled row plays each role.
"""
from __future__ import annotations

from typing import Iterable, Mapping, Optional

from tablevision.config import ROLE_CANDIDATES, ROLE_DEFAULTS
from tablevision.data.schemas import RoleKeys, Row


def find_key(row: Row, candidates: Iterable[str]) -> Optional[str]:
    """Return the first column containing the highest-priority matching candidate.

    Candidates are lowercase substrings in priority order. The winning
    candidate is the first one contained in any lowercased column name; the
    result is the first actual (case-preserving) column containing it.
    """
    columns = [str(k) for k in row.keys()]
    lowered = [c.lower() for c in columns]
    for candidate in candidates:
        for column, low in zip(columns, lowered):
            if candidate in low:
                return column
    return None


def resolve_role(
    row: Row,
    role: str,
    candidates: Mapping[str, list[str]] = ROLE_CANDIDATES,
    defaults: Mapping[str, str] = ROLE_DEFAULTS,
) -> str:
    """Resolve one role, falling back to its literal default column name."""
    return find_key(row, candidates[role]) or defaults[role]


def infer_role_keys(sample_row: Row) -> RoleKeys:
    """Resolve every role from a single sample row (the dataset's first row).

    Never fails: unresolved roles use the defaults from ``ROLE_DEFAULTS``,
    which simply yield "absent" when looked up on rows lacking that column.
    """
    return RoleKeys(
        date_key=resolve_role(sample_row, "date"),
        category_key=resolve_role(sample_row, "category"),
        revenue_key=resolve_role(sample_row, "revenue"),
        expense_key=resolve_role(sample_row, "expense"),
        profit_key=resolve_role(sample_row, "profit"),
        id_key=resolve_role(sample_row, "id"),
    )
