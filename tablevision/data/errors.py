"""
Domain errors raised by the upstream source and surfaced by the dashboard controller.

Row-level problems (non-numeric amounts, unparseable dates, missing columns)
are never errors — the normalizer absorbs them.
"""
from __future__ import annotations


class DashboardError(Exception):
    """Base class for errors that halt the aggregation pipeline."""

    kind = "error"
    recovery = "Retry the request."

    def to_dict(self) -> dict:
        return {"kind": self.kind, "message": str(self), "recovery": self.recovery}


class TableUnavailable(DashboardError):
    """The named table does not exist or is not accessible."""

    kind = "table_unavailable"
    recovery = "Choose a different table via PUT /api/config/table."

    def __init__(self, table: str) -> None:
        super().__init__(f'Table "{table}" was not found or is not accessible.')
        self.table = table


class FetchFailure(DashboardError):
    """Transient network or query failure while reading rows."""

    kind = "fetch_failure"
    recovery = "Retry via POST /api/refresh."
