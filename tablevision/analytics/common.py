"""
Numeric and serialisation helpers shared by the aggregation and payload builders.
"""
from __future__ import annotations

import datetime as dt
import math
from dataclasses import asdict, is_dataclass
from typing import Any, Mapping

import numpy as np
import pandas as pd


def safe_divide(numerator: float, denominator: float, default: float = 0.0) -> float:
    """numerator / denominator, or ``default`` for a zero/NaN denominator or a non-finite result."""
    if not denominator or pd.isna(denominator):
        return default
    result = float(numerator) / float(denominator)
    return result if math.isfinite(result) else default


def calc_margin(profit: float, revenue: float) -> float:
    """Profit as a percentage of revenue; 0 unless revenue is positive."""
    if revenue <= 0:
        return 0.0
    return safe_divide(profit, revenue) * 100


def pct_of_total(part: float, total: float) -> float:
    return safe_divide(part, total) * 100


def sanitize_for_json(obj: Any) -> Any:
    """Copy a payload into plain Python: dataclasses and mappings to dicts,
    numpy scalars to builtins, non-finite floats to 0, dates to ISO strings.
    """
    if is_dataclass(obj) and not isinstance(obj, type):
        return sanitize_for_json(asdict(obj))
    if isinstance(obj, Mapping):
        return {str(k): sanitize_for_json(v) for k, v in obj.items() if k is not None}
    if isinstance(obj, (list, tuple)):
        return [sanitize_for_json(v) for v in obj]
    if obj is None or obj is pd.NaT:
        return None
    if isinstance(obj, (bool, np.bool_)):
        return bool(obj)
    if isinstance(obj, (int, np.integer)):
        return int(obj)
    if isinstance(obj, (float, np.floating)):
        value = float(obj)
        return value if math.isfinite(value) else 0.0
    if isinstance(obj, (pd.Timestamp, dt.date)):
        return obj.isoformat()
    return obj
