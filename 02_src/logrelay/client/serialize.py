"""Conversion of Python values into the relay's wire Value form."""

import io
import socket
import traceback
from typing import Any

MAX_DEPTH = 10

_PRIMITIVES = (str, int, float, bool, type(None))


def _type_name(item: Any) -> str:
    cls = type(item)
    if cls.__module__ in ("builtins", "__main__"):
        return cls.__qualname__
    return f"{cls.__module__}.{cls.__qualname__}"


def _exception(item: BaseException) -> dict[str, Any]:
    file, line = "", 0
    tb = item.__traceback__
    if tb is not None:
        last = traceback.extract_tb(tb)[-1]
        file, line = last.filename, last.lineno or 0
    code = getattr(item, "errno", None)
    return {
        "_type": "exception",
        "class": _type_name(item),
        "message": str(item),
        "code": code if isinstance(code, int) else 0,
        "file": file,
        "line": line,
        "trace": "".join(traceback.format_exception(type(item), item, tb)),
    }


def prepare_item(item: Any, depth: int = 0) -> Any:
    """Convert one value. Nesting deeper than MAX_DEPTH falls back to repr()."""
    if isinstance(item, _PRIMITIVES):
        return item

    if depth >= MAX_DEPTH:
        return repr(item)

    if isinstance(item, BaseException):
        return _exception(item)

    if isinstance(item, (io.IOBase, socket.socket)):
        return {"_type": "resource", "type": _type_name(item)}

    if isinstance(item, dict):
        return {str(k): prepare_item(v, depth + 1) for k, v in item.items()}

    if isinstance(item, (list, tuple, set, frozenset)):
        return [prepare_item(v, depth + 1) for v in item]

    if type(item).__str__ is not object.__str__:
        return {"_type": "object", "class": _type_name(item), "value": str(item)}

    properties = getattr(item, "__dict__", {})
    return {
        "_type": "object",
        "class": _type_name(item),
        "properties": {
            name: prepare_item(value, depth + 1)
            for name, value in properties.items()
            if not name.startswith("_")
        },
    }


def prepare_data(data: tuple[Any, ...] | list[Any]) -> list[Any]:
    return [prepare_item(item) for item in data]
