"""Pytest configuration and shared fixtures.

Every test gets its own exports directory and runs without an OpenAI key, so
nothing reaches the network and no report lands in the real data folder.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from tablevision.api import dependencies
from tablevision.controller import DashboardController
from tablevision.data.source import MemorySource

SAMPLE_ROWS = [
    {"revenue": 100, "cost": 40, "department": "Sales", "created_at": "2024-01-05"},
    {"revenue": 200, "cost": 50, "department": "Sales", "created_at": "2024-02-10"},
    {"revenue": 50, "cost": 60, "department": "Marketing", "created_at": "2024-01-20"},
]


@pytest.fixture(autouse=True)
def _isolate_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    exports = tmp_path / "exports"
    exports.mkdir()
    monkeypatch.setattr("tablevision.api.router_export.EXPORTS_FOLDER", exports)
    monkeypatch.setattr("tablevision.main.EXPORTS_FOLDER", exports)
    monkeypatch.setattr("tablevision.cli.EXPORTS_FOLDER", exports)
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    yield
    dependencies.set_controller(None)


@pytest.fixture
def sample_rows() -> list[dict]:
    return [dict(r) for r in SAMPLE_ROWS]


@pytest.fixture
def source(sample_rows) -> MemorySource:
    return MemorySource({"orders": sample_rows, "empty": []})


class InsightRecorder:
    """Insight function double that records each call and returns a fixed result."""

    def __init__(self, result=None) -> None:
        self.result = result
        self.calls: list[tuple[str, list]] = []

    def __call__(self, table, rows):
        self.calls.append((table, list(rows)))
        return self.result


@pytest.fixture
def insight_recorder() -> InsightRecorder:
    return InsightRecorder()


@pytest.fixture
def make_controller(source, insight_recorder):
    """Build a controller whose background work runs inline."""

    def _make(table: str = "orders", **kwargs) -> DashboardController:
        kwargs.setdefault("insight_fn", insight_recorder)
        kwargs.setdefault("run_in_background", lambda fn: fn())
        return DashboardController(kwargs.pop("source", source), table, **kwargs)

    return _make
