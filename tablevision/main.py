"""
TableVision — FastAPI app factory with startup fetch of the active table.
"""
from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from tablevision.config import (
    DEFAULT_TABLE, EXPORTS_FOLDER, INBOX_FOLDER, SUPABASE_KEY, SUPABASE_URL,
)
from tablevision.controller import DashboardController
from tablevision.data.loader import load_inbox_source
from tablevision.data.source import DataSource, RestSource
from tablevision.logging_setup import configure_logging, get_logger
from tablevision.api.dependencies import set_controller
from tablevision.api.router_meta import router as meta_router
from tablevision.api.router_dashboard import router as dashboard_router
from tablevision.api.router_export import router as export_router

logger = get_logger(__name__)


def build_source() -> DataSource:
    """Supabase when SUPABASE_URL/SUPABASE_KEY are set, else CSV tables from the inbox."""
    if SUPABASE_URL and SUPABASE_KEY:
        logger.info("Using Supabase REST source at %s", SUPABASE_URL)
        return RestSource(SUPABASE_URL, SUPABASE_KEY)
    logger.info("SUPABASE_URL not set; serving CSV tables from %s", INBOX_FOLDER)
    return load_inbox_source(INBOX_FOLDER)


def create_app(controller: Optional[DashboardController] = None) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Fetch the active table at startup; stop live updates on shutdown."""
        configure_logging()
        EXPORTS_FOLDER.mkdir(parents=True, exist_ok=True)

        ctl = controller if controller is not None else DashboardController(build_source(), DEFAULT_TABLE)
        set_controller(ctl)
        ctl.refresh()

        if ctl.error is not None:
            logger.warning("TableVision started with an error on %s: %s", ctl.table, ctl.error)
        else:
            logger.info("TableVision ready — table %s, %d rows", ctl.table, ctl.store.row_count())
        yield
        ctl.close()
        set_controller(None)

    app = FastAPI(
        title="TableVision API",
        description="Real-time financial dashboard over any table — inferred columns, monthly and category views, AI insights",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(meta_router)
    app.include_router(dashboard_router)
    app.include_router(export_router)

    return app


app = create_app()
