"""
Record types shared by the inference, aggregation, and ranking layers.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Mapping, Optional

Row = Mapping[str, Any]


@dataclass(frozen=True)
class RoleKeys:
    """Actual column names resolved for each semantic role of one dataset."""
    date_key: str
    category_key: str
    revenue_key: str
    expense_key: str
    profit_key: str
    id_key: str

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class NormalizedRow:
    revenue: float
    expense: float
    profit: float
    month: str
    sort_key: int
    category: str


@dataclass(frozen=True)
class MonthlyAggregate:
    label: str
    sort_key: int                 # year * 100 + zero-based month; 0 = Unknown
    revenue: float
    profit: float


@dataclass(frozen=True)
class CategoryAggregate:
    name: str
    revenue: float
    expenses: float
    profit: float
    margin_percent: float
    color: Optional[str] = None   # set by colors.assign_colors


@dataclass(frozen=True)
class RankedRow:
    """A raw row paired with its derived figures, for the top-profit table."""
    row: Row
    revenue: float
    profit: float


def _as_lines(value: Any) -> list[str]:
    """A reply field as a list of strings; a lone scalar is one item."""
    if not value:
        return []
    if not isinstance(value, (list, tuple)):
        return [str(value)]
    return [str(v) for v in value]


@dataclass
class InsightData:
    summary: str
    trends: list[str] = field(default_factory=list)
    anomalies: list[str] = field(default_factory=list)

    @classmethod
    def unavailable(cls) -> "InsightData":
        """Degraded stub returned when the AI service fails."""
        return cls(summary="Could not generate financial insights at this time.")

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any]) -> "InsightData":
        return cls(
            summary=str(payload.get("summary") or ""),
            trends=_as_lines(payload.get("trends")),
            anomalies=_as_lines(payload.get("anomalies")),
        )

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class Analytics:
    """Everything derived from one snapshot of the row buffer."""
    keys: RoleKeys
    monthly: list[MonthlyAggregate]
    categories: list[CategoryAggregate]
    expenses_by_category: list[CategoryAggregate]
    top_rows: list[RankedRow]
    row_count: int
