"""
Export endpoint — download the current dashboard as an Excel workbook.
"""
from __future__ import annotations

import re

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import FileResponse

from tablevision.config import EXPORTS_FOLDER
from tablevision.controller import DashboardController
from tablevision.api.dependencies import get_controller, raise_for_error
from tablevision.reports.dashboard_report import generate_excel

router = APIRouter(prefix="/api", tags=["export"])


def export_filename(table: str) -> str:
    safe = re.sub(r"[^\w\-]", "_", table)[:40]
    return f"Dashboard_{safe}.xlsx"


@router.get("/export")
def export_dashboard(controller: DashboardController = Depends(get_controller)):
    raise_for_error(controller)
    analytics = controller.analytics()
    if analytics is None:
        raise HTTPException(409, f"No data available in {controller.table}")

    out = EXPORTS_FOLDER / export_filename(controller.table)
    generate_excel(controller.table, analytics, out, controller.insights)
    return FileResponse(
        path=str(out),
        filename=out.name,
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    )
