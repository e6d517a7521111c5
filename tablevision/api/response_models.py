"""
Pydantic request/response schemas for the API.
"""
from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    status: str
    table: str
    dashboard: str
    records: int
    realtime: str


class ConfigResponse(BaseModel):
    table: str
    max_rows: int
    source: str
    insights_enabled: bool


class TableChangeRequest(BaseModel):
    table: str = Field(..., min_length=1)


class Insights(BaseModel):
    summary: str
    trends: list[str]
    anomalies: list[str]


class InsightsResponse(BaseModel):
    insights: Optional[Insights] = None
    analyzing: bool


class RowAccepted(BaseModel):
    status: str
    records: int


class DashboardResponse(BaseModel):
    """Dashboard state; ``views`` is present only when status is "ready"."""
    table: str
    status: str
    error: Optional[dict[str, Any]] = None
    table_exists: bool
    realtime: str
    record_count: int
    insights: Optional[Insights] = None
    analyzing: bool
    views: Optional[dict[str, Any]] = None
