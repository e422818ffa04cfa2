"""Helpers for reading structured JSON out of model replies."""

import json
import re
from typing import Any

from wordplay.core.domain.models import PlannedToolCall

_FENCE_RE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL)


def parse_json_object(raw: str | None) -> dict[str, Any]:
    """
    Parse a JSON object from a model reply.

    Tolerates Markdown code fences and leading/trailing prose around a single
    top-level object.

    Raises:
        ValueError: If no JSON object can be decoded
    """
    if not raw or not raw.strip():
        raise ValueError("Empty model reply")
    text = raw.strip()
    fenced = _FENCE_RE.match(text)
    if fenced:
        text = fenced.group(1)
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        start, end = text.find("{"), text.rfind("}")
        if start == -1 or end <= start:
            raise ValueError("No JSON object in model reply") from None
        try:
            data = json.loads(text[start : end + 1])
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in model reply: {e}") from e
    if not isinstance(data, dict):
        raise ValueError("Model reply is not a JSON object")
    return data


def parse_tool_calls(
    items: Any, known_tools: set[str] | None = None
) -> tuple[list[PlannedToolCall], list[str]]:
    """
    Convert raw tool-call dicts into PlannedToolCalls.

    Returns:
        (calls, rejected) where rejected lists tool names that were unknown or
        malformed.
    """
    calls: list[PlannedToolCall] = []
    rejected: list[str] = []
    if not isinstance(items, list):
        return calls, rejected
    for item in items:
        if not isinstance(item, dict):
            rejected.append(str(item)[:50])
            continue
        tool = item.get("tool") or item.get("name")
        params = item.get("params") or item.get("parameters") or {}
        if not isinstance(tool, str) or not isinstance(params, dict):
            rejected.append(str(tool))
            continue
        if known_tools is not None and tool not in known_tools:
            rejected.append(tool)
            continue
        calls.append(
            PlannedToolCall(tool=tool, params=params, reasoning=str(item.get("reasoning", "")))
        )
    return calls, rejected
