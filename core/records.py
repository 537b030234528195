"""Record value helpers: text rendering and nested-record flattening."""
from __future__ import annotations

import datetime as dt
import json
from typing import Any, Dict, List, Union

Value = Union[None, bool, int, float, str, bytes, List[Any], Dict[str, Any]]
Record = Dict[str, Any]


def _json_default(value: Any) -> Any:
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8", errors="replace")
    return to_text(value)


def to_text(value: Any) -> str:
    """Render a record value as text."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8", errors="replace")
    if isinstance(value, (list, tuple, dict)):
        return json.dumps(value, ensure_ascii=False, default=_json_default)
    if isinstance(value, (dt.date, dt.time)):
        return value.isoformat()
    return str(value)


def is_empty(value: Any) -> bool:
    return value is None or to_text(value) == ""


def _is_record(value: Any) -> bool:
    return isinstance(value, dict) and all(isinstance(k, str) for k in value)


def flatten_record(record: Record) -> Record:
    """Flatten nested dicts into dot-joined keys.

    Lists are kept as single values. Where two paths produce the same key,
    the first one written is kept.
    """
    flat: Record = {}
    for key, value in record.items():
        if _is_record(value):
            for sub_key, sub_value in flatten_record(value).items():
                flat.setdefault(f"{key}.{sub_key}", sub_value)
        else:
            flat.setdefault(key, value)
    return flat
