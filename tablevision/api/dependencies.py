"""
FastAPI dependencies — DashboardController singleton, error translation.
"""
from __future__ import annotations

from fastapi import HTTPException

from tablevision.controller import DashboardController
from tablevision.data.errors import DashboardError, TableUnavailable

# ---------------------------------------------------------------------------
# Global controller singleton (set during startup)
# ---------------------------------------------------------------------------
_controller: DashboardController | None = None


def set_controller(controller: DashboardController | None) -> None:
    global _controller
    _controller = controller


def get_controller() -> DashboardController:
    if _controller is None:
        raise HTTPException(503, "Server not initialized yet")
    return _controller


def error_to_http(error: DashboardError) -> HTTPException:
    """404 for a missing table, 502 for upstream fetch failures."""
    status = 404 if isinstance(error, TableUnavailable) else 502
    return HTTPException(status, error.to_dict())


def raise_for_error(controller: DashboardController) -> None:
    if controller.error is not None:
        raise error_to_http(controller.error)
