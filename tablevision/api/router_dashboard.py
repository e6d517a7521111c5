"""
Dashboard endpoints — aggregated views, AI insights, live row ingestion.
"""
from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException

from tablevision.analytics.dashboard import dashboard_payload
from tablevision.controller import DashboardController
from tablevision.api.dependencies import get_controller
from tablevision.api.response_models import DashboardResponse, InsightsResponse, RowAccepted

router = APIRouter(prefix="/api", tags=["dashboard"])


@router.get("/dashboard", response_model=DashboardResponse)
def dashboard(controller: DashboardController = Depends(get_controller)):
    """Dashboard state plus monthly, category, top-expense and top-row views when ready."""
    state = controller.snapshot()
    analytics = controller.analytics()
    state["views"] = dashboard_payload(analytics) if analytics is not None else None
    return state


@router.get("/insights", response_model=InsightsResponse)
def insights(controller: DashboardController = Depends(get_controller)):
    state = controller.snapshot()
    return {"insights": state["insights"], "analyzing": state["analyzing"]}


@router.post("/insights/refresh", response_model=InsightsResponse)
def refresh_insights(controller: DashboardController = Depends(get_controller)):
    """Re-run AI insights; a request already in flight is not doubled."""
    if controller.store.row_count() == 0:
        raise HTTPException(409, "No data loaded to analyse")
    controller.refresh_insights()
    state = controller.snapshot()
    return {"insights": state["insights"], "analyzing": state["analyzing"]}


def _unwrap_row(payload: dict[str, Any], table: str) -> dict[str, Any]:
    """Accept a bare row or a database-webhook envelope {type, table, record}."""
    if "record" in payload and "type" in payload:
        if str(payload["type"]).upper() != "INSERT":
            raise HTTPException(400, f"Only INSERT events are applied (got {payload['type']})")
        if payload.get("table") not in (None, table):
            raise HTTPException(409, f"Event is for table {payload.get('table')}, active table is {table}")
        record = payload["record"]
        if not isinstance(record, dict):
            raise HTTPException(400, "record must be an object")
        return record
    return payload


@router.post("/rows", response_model=RowAccepted, status_code=202)
def push_row(
    payload: dict[str, Any] = Body(...),
    controller: DashboardController = Depends(get_controller),
):
    """Append one live row to the active table's buffer."""
    row = _unwrap_row(payload, controller.table)
    if not controller.apply_live_row(row):
        raise HTTPException(409, f"Dashboard is {controller.status_label()}; row not applied")
    return RowAccepted(status="accepted", records=controller.store.row_count())
