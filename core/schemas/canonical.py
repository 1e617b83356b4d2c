"""
Schemas
File: canonical.py

Purpose: Deterministic JSON serialization for persisted tree records and
proof documents, so that saving the same tree twice yields identical bytes.
"""

import json
from typing import Any

from pydantic import BaseModel

# Canonical JSON separators - no whitespace
CANONICAL_JSON_SEPARATORS: tuple[str, str] = (",", ":")


def canonicalize_value(value: Any) -> Any:
    """
    Convert a value into plain JSON data.

    Pydantic models are dumped in JSON mode; bytes become 0x-prefixed hex;
    tuples become lists. Everything else is returned as-is and left for
    json.dumps to accept or reject.
    """
    if isinstance(value, BaseModel):
        return canonicalize_value(value.model_dump(mode="json", by_alias=True))

    if isinstance(value, dict):
        return {str(k): canonicalize_value(v) for k, v in value.items()}

    if isinstance(value, (list, tuple)):
        return [canonicalize_value(item) for item in value]

    if isinstance(value, (bytes, bytearray)):
        return "0x" + bytes(value).hex()

    return value


def dumps_canonical(obj: Any) -> str:
    """
    Serialize an object to canonical JSON string.

    Returns:
        A canonical JSON string with sorted keys and no extra whitespace.

    Raises:
        TypeError: If the object holds values JSON cannot represent.

    Example:
        >>> dumps_canonical({"b": 2, "a": [1, 2]})
        '{"a":[1,2],"b":2}'
    """
    return json.dumps(
        canonicalize_value(obj),
        sort_keys=True,
        separators=CANONICAL_JSON_SEPARATORS,
        ensure_ascii=False,
        allow_nan=False,
    )


__all__ = [
    "CANONICAL_JSON_SEPARATORS",
    "canonicalize_value",
    "dumps_canonical",
]
