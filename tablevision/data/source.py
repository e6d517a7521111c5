"""
Upstream table sources — the remote store the dashboard reads and subscribes to.

Two adapters share one interface:

* ``RestSource`` talks to a Supabase/PostgREST endpoint over HTTP and watches
  for inserts with a polling thread.
* ``MemorySource`` keeps tables in process (seeded from CSV files) and pushes
  inserted rows to subscribers synchronously.

Subscriptions report connection status as "connecting", then "connected" or
"disconnected".
"""
from __future__ import annotations

import threading
from typing import Callable, Optional, Protocol

import requests

from tablevision.config import POLL_SECONDS, REQUEST_TIMEOUT
from tablevision.data.errors import FetchFailure
from tablevision.logging_setup import get_logger

logger = get_logger(__name__)

InsertCallback = Callable[[dict], None]
StatusCallback = Callable[[str], None]

CONNECTING = "connecting"
CONNECTED = "connected"
DISCONNECTED = "disconnected"


class Subscription(Protocol):
    def close(self) -> None: ...


class DataSource(Protocol):
    def table_exists(self, table: str) -> bool: ...

    def select_all(self, table: str, limit: int) -> list[dict]: ...

    def subscribe(
        self, table: str, on_insert: InsertCallback, on_status: StatusCallback,
    ) -> Subscription: ...


# ---------------------------------------------------------------------------
# In-process tables
# ---------------------------------------------------------------------------

class _MemorySubscription:
    def __init__(self, source: "MemorySource", table: str, on_insert: InsertCallback,
                 on_status: StatusCallback) -> None:
        self._source = source
        self.table = table
        self.on_insert = on_insert
        self.on_status = on_status
        self.closed = False

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        self._source._detach(self)
        self.on_status(DISCONNECTED)


class MemorySource:
    """Dictionary-backed tables; ``insert`` notifies live subscribers."""

    def __init__(self, tables: Optional[dict[str, list[dict]]] = None) -> None:
        self._tables: dict[str, list[dict]] = {k: list(v) for k, v in (tables or {}).items()}
        self._subs: list[_MemorySubscription] = []
        self._lock = threading.Lock()

    def add_table(self, name: str, rows: list[dict]) -> None:
        with self._lock:
            self._tables[name] = list(rows)

    def tables(self) -> list[str]:
        return sorted(self._tables)

    def table_exists(self, table: str) -> bool:
        return table in self._tables

    def select_all(self, table: str, limit: int) -> list[dict]:
        if table not in self._tables:
            raise FetchFailure(f'relation "{table}" does not exist')
        with self._lock:
            return [dict(r) for r in self._tables[table][:limit]]

    def subscribe(self, table: str, on_insert: InsertCallback, on_status: StatusCallback) -> _MemorySubscription:
        on_status(CONNECTING)
        sub = _MemorySubscription(self, table, on_insert, on_status)
        with self._lock:
            self._subs.append(sub)
        on_status(CONNECTED)
        return sub

    def insert(self, table: str, row: dict) -> None:
        """Append a row and push it to every open subscription on that table."""
        with self._lock:
            self._tables.setdefault(table, []).append(dict(row))
            targets = [s for s in self._subs if s.table == table]
        for sub in targets:
            sub.on_insert(dict(row))

    def _detach(self, sub: _MemorySubscription) -> None:
        with self._lock:
            if sub in self._subs:
                self._subs.remove(sub)


# ---------------------------------------------------------------------------
# Supabase / PostgREST
# ---------------------------------------------------------------------------

def _total_from_content_range(header: Optional[str]) -> Optional[int]:
    """Parse the total out of a PostgREST Content-Range header ("0-24/1234")."""
    if not header or "/" not in header:
        return None
    total = header.rsplit("/", 1)[1]
    return int(total) if total.isdigit() else None


class _PollingSubscription(threading.Thread):
    """Watches a table's exact row count and fetches rows past the last seen offset."""

    def __init__(self, source: "RestSource", table: str, on_insert: InsertCallback,
                 on_status: StatusCallback, interval: float) -> None:
        super().__init__(name=f"tablevision-poll-{table}", daemon=True)
        self._source = source
        self.table = table
        self._on_insert = on_insert
        self._on_status = on_status
        self._interval = interval
        self._halt = threading.Event()
        self._seen: Optional[int] = None
        self._connected: Optional[bool] = None

    def close(self) -> None:
        self._halt.set()

    def run(self) -> None:
        self._on_status(CONNECTING)
        while not self._halt.is_set():
            try:
                self._poll_once()
            except requests.RequestException as exc:
                logger.warning("Live updates for %s lost: %s", self.table, exc)
                self._mark_disconnected()
            except Exception:  # noqa: BLE001
                logger.exception("Live update poll for %s failed", self.table)
                self._mark_disconnected()
            else:
                if not self._connected:
                    self._connected = True
                    self._on_status(CONNECTED)
            self._halt.wait(self._interval)
        self._on_status(DISCONNECTED)

    def _mark_disconnected(self) -> None:
        if self._connected is not False:
            self._connected = False
            self._on_status(DISCONNECTED)

    def _poll_once(self) -> None:
        total = self._source.count_rows(self.table)
        if self._seen is None or total < self._seen:
            self._seen = total
            return
        if total == self._seen:
            return
        new_rows = self._source.fetch_page(self.table, offset=self._seen, limit=total - self._seen)
        self._seen += len(new_rows)
        for row in new_rows:
            if self._halt.is_set():
                return
            self._on_insert(row)


class RestSource:
    """Supabase REST (PostgREST) client built on ``requests``."""

    def __init__(
        self,
        url: str,
        key: str,
        session: Optional[requests.Session] = None,
        timeout: float = REQUEST_TIMEOUT,
        poll_interval: float = POLL_SECONDS,
    ) -> None:
        self.base_url = f"{url.rstrip('/')}/rest/v1"
        self.session = session or requests.Session()
        self.session.headers.update({
            "apikey": key,
            "Authorization": f"Bearer {key}",
            "Accept": "application/json",
        })
        self.timeout = timeout
        self.poll_interval = poll_interval

    def _get(self, table: str, params: dict, headers: Optional[dict] = None) -> requests.Response:
        return self.session.get(
            f"{self.base_url}/{table}", params=params, headers=headers, timeout=self.timeout,
        )

    def table_exists(self, table: str) -> bool:
        try:
            resp = self._get(table, {"select": "*", "limit": 0}, headers={"Prefer": "count=exact"})
        except requests.RequestException as exc:
            logger.warning("Error checking table %s: %s", table, exc)
            return False
        if not resp.ok:
            logger.warning("Error checking table %s: HTTP %s %s", table, resp.status_code, resp.text[:200])
            return False
        return True

    def fetch_page(self, table: str, offset: int, limit: int) -> list[dict]:
        resp = self._get(table, {"select": "*", "offset": offset, "limit": limit})
        resp.raise_for_status()
        return list(resp.json())

    def count_rows(self, table: str) -> int:
        resp = self._get(table, {"select": "*", "limit": 0}, headers={"Prefer": "count=exact"})
        resp.raise_for_status()
        total = _total_from_content_range(resp.headers.get("Content-Range"))
        return total if total is not None else 0

    def select_all(self, table: str, limit: int) -> list[dict]:
        try:
            resp = self._get(table, {"select": "*", "limit": limit})
            resp.raise_for_status()
            payload = resp.json()
        except requests.HTTPError as exc:
            detail = exc.response.text[:300] if exc.response is not None else ""
            raise FetchFailure(f"Query on {table} failed: {exc} {detail}".strip()) from exc
        except (requests.RequestException, ValueError) as exc:
            raise FetchFailure(f"Query on {table} failed: {exc}") from exc
        if not isinstance(payload, list):
            raise FetchFailure(f"Unexpected response for {table}: expected a list of rows")
        return payload

    def subscribe(self, table: str, on_insert: InsertCallback, on_status: StatusCallback) -> _PollingSubscription:
        sub = _PollingSubscription(self, table, on_insert, on_status, self.poll_interval)
        sub.start()
        return sub
