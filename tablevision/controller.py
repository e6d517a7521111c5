"""
DashboardController — owns the row buffer for the active table and keeps the
derived dashboard state in step with the upstream source.

Events that change state:

* ``refresh()`` — full refetch; suppressed while another refetch is running.
* live inserts from the source subscription (or ``apply_live_row``) — appended
  to the bounded buffer.
* ``set_table()`` — discard everything and refetch the new table.
* ``refresh_insights()`` — manual AI insight request.

All mutation happens under one re-entrant lock. Network calls run outside it;
results that arrive after a table change are discarded.
"""
from __future__ import annotations

import threading
from typing import Callable, Optional

from tablevision.config import DEFAULT_TABLE, INSIGHT_SAMPLE_ROWS, ROLE_CANDIDATES
from tablevision.data.errors import DashboardError, FetchFailure, TableUnavailable
from tablevision.data.infer import find_key
from tablevision.data.normalize import sort_rows_by_date
from tablevision.data.schemas import Analytics, InsightData
from tablevision.data.source import DISCONNECTED, DataSource, Subscription
from tablevision.data.store import DataStore
from tablevision.insights import generate_insights
from tablevision.logging_setup import get_logger

logger = get_logger(__name__)

InsightFn = Callable[[str, list], Optional[InsightData]]


def _start_thread(fn: Callable[[], None]) -> None:
    threading.Thread(target=fn, daemon=True).start()


class DashboardController:
    """Single owner of the buffer, aggregates, realtime status and insights."""

    def __init__(
        self,
        source: DataSource,
        table: str = DEFAULT_TABLE,
        store: Optional[DataStore] = None,
        insight_fn: InsightFn = generate_insights,
        run_in_background: Callable[[Callable[[], None]], None] = _start_thread,
    ) -> None:
        self.source = source
        self.table = table
        self.store = store if store is not None else DataStore()
        self._insight_fn = insight_fn
        self._run = run_in_background
        self._lock = threading.RLock()

        self.loading = False
        self.error: Optional[DashboardError] = None
        self.table_exists = False
        self.realtime_status = DISCONNECTED
        self.insights: Optional[InsightData] = None
        self.analyzing = False

        self._subscription: Optional[Subscription] = None
        self._epoch = 0           # bumps on table change
        self._sub_token = 0       # bumps on every (re)subscribe
        self._insight_ticket = 0  # bumps on every insight request or cancel

    # ------------------------------------------------------------------
    # Fetching
    # ------------------------------------------------------------------

    def refresh(self) -> bool:
        """Refetch the active table. Returns False when suppressed or stale.

        Errors are recorded on ``self.error`` rather than raised.
        """
        with self._lock:
            if self.loading:
                logger.info("Refresh of %s already in progress; skipping", self.table)
                return False
            self.loading = True
            self.error = None
            self._close_subscription()
            self.realtime_status = DISCONNECTED
            epoch = self._epoch
            table = self.table

        try:
            if not self.source.table_exists(table):
                raise TableUnavailable(table)
            rows = self.source.select_all(table, self.store.max_rows)
        except DashboardError as exc:
            logger.warning("Dashboard error for %s: %s", table, exc)
            self._record_failure(epoch, exc)
            return False
        except Exception as exc:  # noqa: BLE001
            logger.exception("Unexpected error fetching %s", table)
            self._record_failure(epoch, FetchFailure(f"Query on {table} failed: {exc}"))
            return False

        date_key = find_key(rows[0], ROLE_CANDIDATES["date"]) if rows else None
        if date_key:
            rows = sort_rows_by_date(rows, date_key)

        with self._lock:
            if epoch != self._epoch:
                return False
            was_empty = self.store.row_count() == 0
            self.store.load(rows)
            self.table_exists = True
            self.loading = False
            logger.info("Loaded %d rows from %s", len(rows), table)
            self._maybe_start_insights(was_empty)
            self._open_subscription(table)
        return True

    def _record_failure(self, epoch: int, exc: DashboardError) -> None:
        with self._lock:
            if epoch != self._epoch:
                return
            self.table_exists = not isinstance(exc, TableUnavailable)
            self.error = exc
            self.loading = False

    def set_table(self, table: str) -> bool:
        """Switch to another table: drop rows, aggregates and insights, then refetch."""
        table = (table or "").strip()
        if not table:
            raise ValueError("table name must not be empty")
        with self._lock:
            self._epoch += 1
            self._close_subscription()
            self.cancel_insights()
            self.table = table
            self.store.clear()
            self.insights = None
            self.error = None
            self.table_exists = False
            self.loading = False
            self.realtime_status = DISCONNECTED
        logger.info("Active table set to %s", table)
        return self.refresh()

    def close(self) -> None:
        with self._lock:
            self._close_subscription()
            self.realtime_status = DISCONNECTED
            self.cancel_insights()

    # ------------------------------------------------------------------
    # Live updates
    # ------------------------------------------------------------------

    def _open_subscription(self, table: str) -> None:
        self._sub_token += 1
        token = self._sub_token
        self._subscription = self.source.subscribe(
            table,
            lambda row: self._on_insert(token, row),
            lambda status: self._on_status(token, status),
        )

    def _close_subscription(self) -> None:
        sub, self._subscription = self._subscription, None
        self._sub_token += 1
        if sub is not None:
            sub.close()

    def _on_status(self, token: int, status: str) -> None:
        with self._lock:
            if token == self._sub_token:
                self.realtime_status = status

    def _on_insert(self, token: int, row: dict) -> None:
        with self._lock:
            if token != self._sub_token:
                return
            self._append(row)

    def apply_live_row(self, row: dict) -> bool:
        """Append a pushed row to the active table's buffer (e.g. from a webhook)."""
        with self._lock:
            if self.loading or self.error is not None or not self.table_exists:
                return False
            self._append(row)
            return True

    def _append(self, row: dict) -> None:
        was_empty = self.store.row_count() == 0
        self.store.append(row)
        self._maybe_start_insights(was_empty)

    # ------------------------------------------------------------------
    # Insights
    # ------------------------------------------------------------------

    def _maybe_start_insights(self, was_empty: bool) -> None:
        """Auto-run insights only when the buffer goes from empty to non-empty."""
        if was_empty and self.store.row_count() > 0 and self.insights is None and not self.analyzing:
            self._start_insights()

    def refresh_insights(self) -> bool:
        """Manual insight request; ignored while one is outstanding or without data."""
        with self._lock:
            if self.analyzing or self.store.row_count() == 0:
                return False
            self._start_insights()
            return True

    def cancel_insights(self) -> None:
        with self._lock:
            self._insight_ticket += 1
            self.analyzing = False

    def _start_insights(self) -> None:
        self.analyzing = True
        self._insight_ticket += 1
        ticket = self._insight_ticket
        table = self.table
        rows = self.store.recent(INSIGHT_SAMPLE_ROWS)
        self._run(lambda: self._run_insights(ticket, table, rows))

    def _run_insights(self, ticket: int, table: str, rows: list) -> None:
        try:
            result = self._insight_fn(table, rows)
        except Exception:  # noqa: BLE001
            logger.exception("Insight generation failed for %s", table)
            result = InsightData.unavailable()
        with self._lock:
            if ticket != self._insight_ticket:
                return
            self.insights = result
            self.analyzing = False

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------

    def status_label(self) -> str:
        with self._lock:
            if self.loading:
                return "loading"
            if self.error is not None:
                return "error"
            if self.store.row_count() == 0:
                return "empty"
            return "ready"

    def analytics(self) -> Optional[Analytics]:
        """Current aggregates; None while loading, after an error, or with no rows."""
        with self._lock:
            if self.loading or self.error is not None:
                return None
            return self.store.analytics()

    def snapshot(self) -> dict:
        with self._lock:
            return {
                "table": self.table,
                "status": self.status_label(),
                "error": self.error.to_dict() if self.error is not None else None,
                "table_exists": self.table_exists,
                "realtime": self.realtime_status,
                "record_count": self.store.row_count(),
                "insights": self.insights.to_dict() if self.insights is not None else None,
                "analyzing": self.analyzing,
            }
