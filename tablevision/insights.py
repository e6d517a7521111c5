"""
AI narrative insights for the active table via the OpenAI Chat Completions API.

``generate_insights`` returns:

* ``None`` when there is nothing to analyse or no API key is configured,
* an ``InsightData`` parsed from the model's JSON reply on success,
* ``InsightData.unavailable()`` when the call or the parsing fails.

Failures never propagate to the aggregation pipeline.
"""
from __future__ import annotations

import json
import os
from typing import Any, Optional, Sequence

from openai import OpenAI

from tablevision.config import INSIGHT_SAMPLE_ROWS, OPENAI_MODEL
from tablevision.data.schemas import InsightData, Row
from tablevision.logging_setup import get_logger

logger = get_logger(__name__)

SYSTEM_PROMPT = """You are a financial analyst reviewing rows from a company database table.

Focus on:
1. Revenue and profit trends.
2. Departmental performance (expenses vs revenue).
3. Significant outliers in individual orders.

Reply with a JSON object with exactly these keys:
- "summary": a short financial executive summary (string).
- "trends": key financial trends, e.g. "Marketing expenses up 15%" (list of strings).
- "anomalies": suspicious or notable records, e.g. "Order #123 has negative margin" (list of strings).

Use only the figures present in the data."""


def build_user_prompt(table_name: str, rows: Sequence[Row]) -> str:
    data = json.dumps(list(rows), default=str)
    return f'Data from table "{table_name}":\n{data}'


def _create_client() -> Optional[OpenAI]:
    api_key = os.environ.get("OPENAI_API_KEY", "").strip()
    if not api_key:
        return None
    return OpenAI(api_key=api_key)


def _reply_text(response: Any) -> Optional[str]:
    choice = response.choices[0] if response.choices else None
    if not choice or not choice.message:
        return None
    return choice.message.content or None


def generate_insights(
    table_name: str,
    rows: Sequence[Row],
    client: Optional[Any] = None,
    model: str = OPENAI_MODEL,
) -> Optional[InsightData]:
    """Summarise the most recent rows of a table into an InsightData."""
    if not rows:
        return None
    client = client if client is not None else _create_client()
    if client is None:
        logger.info("OPENAI_API_KEY not set; AI insights disabled")
        return None

    sample = list(rows)[-INSIGHT_SAMPLE_ROWS:]
    try:
        response = client.chat.completions.create(
            model=model,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": build_user_prompt(table_name, sample)},
            ],
            response_format={"type": "json_object"},
            temperature=0.2,
        )
        text = _reply_text(response)
        if text is None:
            return None
        payload = json.loads(text)
        if not isinstance(payload, dict):
            raise ValueError("insight reply is not a JSON object")
        return InsightData.from_mapping(payload)
    except Exception:  # noqa: BLE001 - any AI failure degrades to the stub
        logger.exception("Error generating insights for %s", table_name)
        return InsightData.unavailable()
