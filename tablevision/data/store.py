"""
DataStore — bounded in-memory row buffer for the active table.

Holds at most ``max_rows`` rows (oldest evicted first). Derived analytics are
cached against a version counter that bumps on every change, so repeated reads
of an unchanged buffer reuse the last result.
"""
from __future__ import annotations

from typing import Iterable, Optional

from tablevision.config import MAX_ROWS
from tablevision.data.schemas import Analytics


class DataStore:
    """Raw rows of one table plus the cached analytics derived from them."""

    def __init__(self, max_rows: int = MAX_ROWS) -> None:
        self.max_rows = max_rows
        self.rows: list[dict] = []
        self.version = 0
        self._loaded = False
        self._cached: Optional[Analytics] = None
        self._cached_version = -1

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def load(self, rows: Iterable[dict]) -> "DataStore":
        """Replace the buffer with a freshly fetched row set."""
        self.rows = [dict(r) for r in rows][-self.max_rows:]
        self._loaded = True
        self.version += 1
        return self

    def append(self, row: dict) -> int:
        """Append one live row, evicting the oldest beyond the cap. Returns the new count."""
        self.rows.append(dict(row))
        if len(self.rows) > self.max_rows:
            del self.rows[: len(self.rows) - self.max_rows]
        self.version += 1
        return len(self.rows)

    def clear(self) -> None:
        self.rows = []
        self._loaded = False
        self.version += 1

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    def row_count(self) -> int:
        return len(self.rows)

    def recent(self, n: int) -> list[dict]:
        """The most recent ``n`` rows, oldest first."""
        return self.rows[-n:] if n > 0 else []

    def analytics(self) -> Optional[Analytics]:
        """Aggregates for the current buffer; None when there are no rows."""
        from tablevision.analytics.dashboard import build_analytics

        if self._cached_version != self.version:
            self._cached = build_analytics(self.rows)
            self._cached_version = self.version
        return self._cached
