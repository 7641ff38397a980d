"""
Deterministic JSON encoding for structured leaf items.

The output is modelled on RFC 8785 but is not byte-compatible with it: object
keys are sorted by Python code point rather than UTF-16 code unit, and
floats are written in plain decimal notation rather than with
ECMAScript number formatting (``1e21`` becomes a 22-digit integer).

Items that are not already bytes or text (dicts, lists, numbers, pydantic
models) are hashed through their canonical JSON form so that equal values
always produce the same leaf digest.
"""

import json
import math
from decimal import Decimal
from typing import Any, Dict

from pydantic import BaseModel


class CanonicalizationError(ValueError):
    """Raised when canonicalization fails due to invalid input."""

    pass


def _is_finite_number(value: float) -> bool:
    """Check if a number is finite and not NaN or infinite."""
    return not (math.isnan(value) or math.isinf(value))


def _canonicalize_value(value: Any) -> str:
    """Recursively convert a Python value to its canonical JSON string representation."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if not _is_finite_number(value):
            raise CanonicalizationError(f"Non-finite number: {value}")
        if value.is_integer():
            return str(int(value))
        return format(Decimal(str(value)).normalize(), "f")
    if isinstance(value, str):
        return json.dumps(value, ensure_ascii=False)
    if isinstance(value, (list, tuple)):
        return "[" + ",".join(_canonicalize_value(item) for item in value) + "]"
    if isinstance(value, dict):
        return _canonicalize_object(value)
    if isinstance(value, BaseModel):
        return _canonicalize_object(value.model_dump(mode="json", by_alias=True))
    if hasattr(value, "isoformat"):
        # datetime, date and time
        return json.dumps(value.isoformat())

    raise CanonicalizationError(f"Unsupported type for canonicalization: {type(value).__name__}")


def _canonicalize_object(obj: Dict[str, Any]) -> str:
    """Convert a dictionary to a canonical JSON object string."""
    items = []
    # Keys sorted by code point
    for key, value in sorted(obj.items(), key=lambda x: str(x[0])):
        if not isinstance(key, str):
            raise CanonicalizationError(f"Dictionary keys must be strings, got {type(key).__name__}")
        items.append(f"{json.dumps(key, ensure_ascii=False)}:{_canonicalize_value(value)}")

    return "{" + ",".join(items) + "}"


def canonicalize(data: Any) -> bytes:
    """
    Convert a Python object to canonical JSON bytes.

    Args:
        data: The Python object to canonicalize (dict, list, model or primitive)

    Returns:
        bytes: The canonical JSON representation as UTF-8 bytes

    Raises:
        CanonicalizationError: If the input cannot be canonicalized
    """
    try:
        return _canonicalize_value(data).encode("utf-8")
    except RecursionError as e:
        raise CanonicalizationError("Structure is too deeply nested to canonicalize") from e


def canonical_json_dumps(data: Any) -> str:
    """Convert a Python object to a canonical JSON string."""
    return canonicalize(data).decode("utf-8")
