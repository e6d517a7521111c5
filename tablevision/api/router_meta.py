"""
Meta endpoints: health, configuration, active table, manual refetch.
"""
from __future__ import annotations

import os

from fastapi import APIRouter, Depends, HTTPException

from tablevision.controller import DashboardController
from tablevision.api.dependencies import get_controller, raise_for_error
from tablevision.api.response_models import ConfigResponse, HealthResponse, TableChangeRequest

router = APIRouter(prefix="/api", tags=["meta"])


@router.get("/health", response_model=HealthResponse)
def health(controller: DashboardController = Depends(get_controller)):
    return HealthResponse(
        status="ok",
        table=controller.table,
        dashboard=controller.status_label(),
        records=controller.store.row_count(),
        realtime=controller.realtime_status,
    )


def _config(controller: DashboardController) -> ConfigResponse:
    return ConfigResponse(
        table=controller.table,
        max_rows=controller.store.max_rows,
        source=type(controller.source).__name__,
        insights_enabled=bool(os.environ.get("OPENAI_API_KEY")),
    )


@router.get("/config", response_model=ConfigResponse)
def get_config(controller: DashboardController = Depends(get_controller)):
    return _config(controller)


@router.put("/config/table", response_model=ConfigResponse)
def change_table(req: TableChangeRequest, controller: DashboardController = Depends(get_controller)):
    """Switch the active table; discards buffered rows, aggregates and insights."""
    try:
        controller.set_table(req.table)
    except ValueError as exc:
        raise HTTPException(400, str(exc))
    raise_for_error(controller)
    return _config(controller)


@router.post("/refresh")
def refresh(controller: DashboardController = Depends(get_controller)):
    """Refetch the active table. Returns "skipped" while another refetch runs."""
    refreshed = controller.refresh()
    raise_for_error(controller)
    return {
        "status": "refreshed" if refreshed else "skipped",
        "records": controller.store.row_count(),
    }
