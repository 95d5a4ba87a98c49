"""Human readable rendering of payload values."""

import json
from typing import Any, Iterable


def _to_json(value: Any) -> str:
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False, default=str)


def _line_number(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def format_value(item: Any) -> str:
    """Render one payload value.

    Tagged mappings (``_type`` of exception, object or resource) get their
    dedicated form; other mappings and sequences render as compact JSON.
    """
    if isinstance(item, dict):
        tag = item.get("_type")
        if tag == "exception":
            return "%s: %s in %s:%d" % (
                item.get("class", ""),
                item.get("message", ""),
                item.get("file", ""),
                _line_number(item.get("line")),
            )
        if tag == "object":
            if item.get("value") is not None:
                return "%s: %s" % (item.get("class", ""), item["value"])
            return "%s %s" % (item.get("class", ""), _to_json(item.get("properties", {})))
        if tag == "resource":
            return "Resource(%s)" % item.get("type", "")
        return _to_json(item)

    if isinstance(item, (list, tuple)):
        return _to_json(list(item))

    # must precede str(): str(True) is "True"
    if isinstance(item, bool):
        return "true" if item else "false"

    if item is None:
        return "null"

    return str(item)


def format_payload(data: Iterable[Any]) -> str:
    """Render all payload values joined by single spaces."""
    return " ".join(format_value(item) for item in data)
