"""Best-effort extraction of JSON values embedded in free-form model text."""

from __future__ import annotations

import json
import re
from typing import Any

_OBJECT_RE = re.compile(r"\{[\s\S]*\}")
_ARRAY_RE = re.compile(r"\[[\s\S]*\]")


def _extract(pattern: re.Pattern[str], text: str) -> Any | None:
    if not text:
        return None
    match = pattern.search(text)
    if not match:
        return None
    try:
        return json.loads(match.group(0))
    except json.JSONDecodeError:
        return None


def extract_json_object(text: str) -> dict[str, Any] | None:
    """Parse the span from the first ``{`` to the last ``}``; None if it is not a JSON object."""
    value = _extract(_OBJECT_RE, text)
    return value if isinstance(value, dict) else None


def extract_json_array(text: str) -> list[Any] | None:
    """Parse the span from the first ``[`` to the last ``]``; None if it is not a JSON array."""
    value = _extract(_ARRAY_RE, text)
    return value if isinstance(value, list) else None


def string_list(value: Any, *, limit: int | None = None) -> list[str]:
    """Keep the non-blank string entries of a list, stripped."""
    if not isinstance(value, list):
        return []
    items = [item.strip() for item in value if isinstance(item, str) and item.strip()]
    if limit is not None:
        items = items[:limit]
    return items
