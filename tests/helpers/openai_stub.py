"""Test helper to stub the OpenAI Chat Completions client used by insights.py.

The stub records each ``chat.completions.create`` call's kwargs and replies
with a fixed message content, or raises a provided exception.
"""

from __future__ import annotations

from types import SimpleNamespace
from typing import Any


class OpenAIStub:
    """Minimal stand-in for ``openai.OpenAI`` exposing ``chat.completions.create``."""

    def __init__(self, content: str | None = None, error: Exception | None = None) -> None:
        self._content = content
        self._error = error
        self.calls: list[dict[str, Any]] = []
        self.chat = SimpleNamespace(completions=SimpleNamespace(create=self._create))

    def _create(self, **kwargs):
        self.calls.append(kwargs)
        if self._error is not None:
            raise self._error
        message = SimpleNamespace(content=self._content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])
