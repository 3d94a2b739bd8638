"""Utility helpers for the taste profiler."""

from __future__ import annotations

import json
import re
from typing import Any, Iterable


JSON_BLOCK_RE = re.compile(r"```(?:json)?\s*(\{.*?\})\s*```", re.DOTALL)
BARE_JSON_RE = re.compile(r"\{.*\}", re.DOTALL)


def extract_json_object(content: str) -> dict[str, Any]:
    """Extract and parse the first JSON object from the model response."""

    match = JSON_BLOCK_RE.search(content)
    if match:
        payload = match.group(1)
    else:
        match = BARE_JSON_RE.search(content)
        if not match:
            raise ValueError("No JSON object found in response")
        payload = match.group(0)

    try:
        parsed = json.loads(payload)
    except json.JSONDecodeError as exc:
        raise ValueError("Invalid JSON payload produced by the model") from exc
    if not isinstance(parsed, dict):
        raise ValueError("Model response is not a JSON object")
    return parsed


def unique(values: Iterable[str]) -> list[str]:
    """Return ``values`` without duplicates, keeping first-seen order."""

    seen: set[str] = set()
    ordered: list[str] = []
    for value in values:
        if value in seen:
            continue
        seen.add(value)
        ordered.append(value)
    return ordered


def join_or(values: Iterable[object], fallback: str, separator: str = ", ") -> str:
    """Join non-empty values, returning ``fallback`` when nothing remains."""

    cleaned = [str(value) for value in values if value not in (None, "")]
    return separator.join(cleaned) or fallback
