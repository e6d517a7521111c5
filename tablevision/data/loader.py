"""
CSV table discovery and loading for the in-memory source.

Every ``*.csv`` under the inbox becomes one table named after the file stem.
"""
from __future__ import annotations

from pathlib import Path

import pandas as pd

from tablevision.config import INBOX_FOLDER
from tablevision.data.source import MemorySource
from tablevision.logging_setup import get_logger

logger = get_logger(__name__)


def discover_csvs(inbox: Path = INBOX_FOLDER) -> list[Path]:
    """Recursively find CSVs in the inbox, sorted by path."""
    if not inbox.exists():
        return []
    return sorted(inbox.rglob("*.csv"))


def table_name_for(path: Path) -> str:
    return path.stem.strip().lower().replace(" ", "_")


def load_csv_rows(path: Path) -> list[dict]:
    """Read a CSV into row dicts; empty cells become None."""
    df = pd.read_csv(path, low_memory=False)
    df.columns = [str(c).strip() for c in df.columns]
    df = df.astype(object).where(df.notna(), None)
    return df.to_dict("records")


def load_inbox_source(inbox: Path = INBOX_FOLDER) -> MemorySource:
    """Build a MemorySource with one table per CSV file in the inbox."""
    source = MemorySource()
    for csv_file in discover_csvs(inbox):
        name = table_name_for(csv_file)
        try:
            rows = load_csv_rows(csv_file)
        except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as exc:
            logger.warning("Skipping %s: %s", csv_file.name, exc)
            continue
        source.add_table(name, rows)
        logger.info("Loaded table %s from %s (%d rows)", name, csv_file.name, len(rows))
    return source
