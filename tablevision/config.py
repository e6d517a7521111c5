"""
TableVision — Configuration: paths, upstream connection, inference tables, palette.
"""
import os
from pathlib import Path

# ---------------------------------------------------------------------------
# Paths: override with TABLEVISION_DATA_DIR env var for cloud deployment
# ---------------------------------------------------------------------------
_data_dir = Path(os.environ.get("TABLEVISION_DATA_DIR", str(Path.home() / "TableVision")))
BASE_FOLDER = _data_dir
INBOX_FOLDER = _data_dir / "inbox"
EXPORTS_FOLDER = _data_dir / "exports"

# ---------------------------------------------------------------------------
# Upstream data source (Supabase / PostgREST). Empty URL → CSV inbox tables.
# ---------------------------------------------------------------------------
SUPABASE_URL = os.environ.get("SUPABASE_URL", "").rstrip("/")
SUPABASE_KEY = os.environ.get("SUPABASE_KEY", "")
DEFAULT_TABLE = os.environ.get("TABLEVISION_TABLE", "orders")

MAX_ROWS = int(os.environ.get("TABLEVISION_MAX_ROWS", "1000"))
POLL_SECONDS = float(os.environ.get("TABLEVISION_POLL_SECONDS", "5"))
REQUEST_TIMEOUT = float(os.environ.get("TABLEVISION_REQUEST_TIMEOUT", "30"))

# ---------------------------------------------------------------------------
# AI insights
# ---------------------------------------------------------------------------
OPENAI_MODEL = os.environ.get("TABLEVISION_OPENAI_MODEL", "gpt-4o-mini")
INSIGHT_SAMPLE_ROWS = 30

# ---------------------------------------------------------------------------
# Column role inference (order matters: first candidate that matches wins)
# ---------------------------------------------------------------------------
ROLE_CANDIDATES = {
    "date": ["created_at", "date", "time"],
    "category": ["department", "category", "dept", "group"],
    "revenue": ["revenue", "sales", "amount", "total", "price"],
    "expense": ["expense", "cost", "spending"],
    "profit": ["profit", "net", "margin"],
    "id": ["id", "order", "name"],
}

# Literal column names used when no candidate matches
ROLE_DEFAULTS = {
    "date": "created_at",
    "category": "department",
    "revenue": "revenue",
    "expense": "expenses",
    "profit": "profit",
    "id": "id",
}

UNKNOWN_MONTH = "Unknown"
UNASSIGNED_CATEGORY = "Unassigned"

# ---------------------------------------------------------------------------
# Chart palette: categories get colors round-robin in name order
# ---------------------------------------------------------------------------
PALETTE = [
    "#6366f1",
    "#ec4899",
    "#10b981",
    "#f59e0b",
    "#06b6d4",
    "#8b5cf6",
    "#a855f7",
    "#ef4444",
]

# ---------------------------------------------------------------------------
# Ranking view sizes
# ---------------------------------------------------------------------------
TOP_EXPENSE_CATEGORIES = 5
TOP_PROFIT_ROWS = 10
