"""Data types for mappings and the conversion rules between them."""
from __future__ import annotations

import datetime as dt
import ipaddress
import re
from enum import Enum
from typing import Any, Optional
from urllib.parse import urlsplit
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from core.errors import CoercionError
from core.records import to_text


class DataType(Enum):
    LITERAL = "LITERAL"
    STRING = "STRING"
    BOOLEAN = "BOOLEAN"
    INTEGER = "INTEGER"
    DOUBLE = "DOUBLE"
    DATE = "DATE"
    DATETIME = "DATETIME"
    TIME = "TIME"
    URL = "URL"
    IPADDRESS = "IPADDRESS"


_MONTHS = {
    name: idx + 1
    for idx, name in enumerate(
        ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]
    )
}
_MONTH_ALT = "|".join(_MONTHS)

_INTEGER = re.compile(r"^[+-]?\d+\Z")
_DOUBLE = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?\Z|^[+-]?(?:NaN|Infinity)\Z")
_ISO_DATE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})\Z")
_SHORT_DATE = re.compile(rf"^(\d{{1,2}})-({_MONTH_ALT})-(\d{{4}})\Z")  # 6-Nov-2017
_ISO_TIME = re.compile(r"^(\d{2}):(\d{2})(?::(\d{2})(?:\.(\d{1,9}))?)?\Z")
_ISO_DATETIME = re.compile(
    r"^(\d{4})-(\d{2})-(\d{2})T(\d{2}):(\d{2})(?::(\d{2})(?:\.(\d{1,9}))?)?"
    r"(Z|[+-]\d{2}:\d{2}(?::\d{2})?)?(?:\[([^\]]+)\])?\Z"
)
_RFC_1123 = re.compile(
    rf"^(?:(?:Mon|Tue|Wed|Thu|Fri|Sat|Sun), )?(\d{{1,2}}) ({_MONTH_ALT}) (\d{{4}}) "
    r"(\d{2}):(\d{2})(?::(\d{2}))? (GMT|[+-]\d{4})\Z"
)
_PLAIN_DATETIME = re.compile(r"^(\d{4})-(\d{2})-(\d{2}) (\d{2}):(\d{2}):(\d{2})\Z")
_URL_SCHEMES = {"http", "https", "ftp", "file", "jar", "mailto"}
_EPOCH = dt.datetime(1970, 1, 1, tzinfo=dt.timezone.utc)


def convert(value: Any, data_type: DataType) -> Any:
    """Convert a raw record value to the given data type.

    Raises CoercionError when the value can't be converted. BOOLEAN and
    IPADDRESS conversions never fail.
    """
    if data_type is DataType.LITERAL:
        return value
    if data_type is DataType.STRING:
        return value if isinstance(value, str) else to_text(value)
    if data_type is DataType.BOOLEAN:
        if isinstance(value, bool):
            return value
        return to_text(value).lower() in ("true", "yes")
    if data_type is DataType.INTEGER:
        if isinstance(value, int) and not isinstance(value, bool):
            return value
        text = to_text(value)
        if not _INTEGER.match(text):
            raise CoercionError(f"Couldn't parse integer {text!r}")
        return int(text)
    if data_type is DataType.DOUBLE:
        if isinstance(value, float):
            return value
        text = to_text(value).strip()
        if not _DOUBLE.match(text):
            raise CoercionError(f"Couldn't parse double {text!r}")
        return float(text.replace("Infinity", "inf"))
    if data_type is DataType.DATE:
        if isinstance(value, dt.datetime):
            return value.date()
        if isinstance(value, dt.date):
            return value
        return _parse_date(to_text(value))
    if data_type is DataType.DATETIME:
        if isinstance(value, dt.datetime):
            return value if value.tzinfo else value.replace(tzinfo=dt.timezone.utc)
        return _parse_datetime(to_text(value))
    if data_type is DataType.TIME:
        if isinstance(value, dt.time):
            return value
        return _parse_time(to_text(value))
    if data_type is DataType.URL:
        return _parse_url(to_text(value))
    if data_type is DataType.IPADDRESS:
        if isinstance(value, (bytes, bytearray)) and len(value) in (4, 16):
            return str(ipaddress.ip_address(bytes(value)))
        return to_text(value)
    raise CoercionError(f"Unsupported type {data_type}")


def _fraction(digits: Optional[str]) -> int:
    if not digits:
        return 0
    return int(digits[:6].ljust(6, "0"))


def _parse_date(text: str) -> dt.date:
    try:
        m = _ISO_DATE.match(text)
        if m:
            return dt.date(int(m.group(1)), int(m.group(2)), int(m.group(3)))
        m = _SHORT_DATE.match(text)
        if m:
            return dt.date(int(m.group(3)), _MONTHS[m.group(2)], int(m.group(1)))
    except ValueError as exc:
        raise CoercionError(f"Couldn't parse date {text!r}") from exc
    raise CoercionError(f"Couldn't parse date {text!r} - unrecognised format")


def _parse_time(text: str) -> dt.time:
    m = _ISO_TIME.match(text)
    if m:
        try:
            return dt.time(int(m.group(1)), int(m.group(2)), int(m.group(3) or 0), _fraction(m.group(4)))
        except ValueError as exc:
            raise CoercionError(f"Couldn't parse time {text!r}") from exc
    raise CoercionError(f"Couldn't parse time {text!r} - unrecognised format")


def _offset(text: str) -> dt.timezone:
    if text in ("Z", "GMT"):
        return dt.timezone.utc
    sign = -1 if text[0] == "-" else 1
    digits = text[1:].replace(":", "")
    hours, minutes, seconds = int(digits[0:2]), int(digits[2:4]), int(digits[4:6] or 0)
    return dt.timezone(sign * dt.timedelta(hours=hours, minutes=minutes, seconds=seconds))


def _iso_datetime(text: str) -> Optional[dt.datetime]:
    m = _ISO_DATETIME.match(text)
    if not m or not (m.group(8) or m.group(9)):
        return None
    try:
        if m.group(8):
            tz = _offset(m.group(8))
        else:
            tz = ZoneInfo(m.group(9))
        return dt.datetime(
            int(m.group(1)), int(m.group(2)), int(m.group(3)),
            int(m.group(4)), int(m.group(5)), int(m.group(6) or 0),
            _fraction(m.group(7)), tzinfo=tz,
        )
    except (ValueError, ZoneInfoNotFoundError):
        return None


def _rfc_1123_datetime(text: str) -> Optional[dt.datetime]:
    m = _RFC_1123.match(text)
    if not m:
        return None
    try:
        return dt.datetime(
            int(m.group(3)), _MONTHS[m.group(2)], int(m.group(1)),
            int(m.group(4)), int(m.group(5)), int(m.group(6) or 0),
            tzinfo=_offset(m.group(7)),
        )
    except ValueError:
        return None


def _plain_datetime(text: str) -> Optional[dt.datetime]:
    m = _PLAIN_DATETIME.match(text)
    if not m:
        return None
    try:
        return dt.datetime(*(int(g) for g in m.groups()), tzinfo=dt.timezone.utc)
    except ValueError:
        return None


def _epoch_datetime(text: str) -> Optional[dt.datetime]:
    if not _INTEGER.match(text):
        return None
    epoch = int(text)
    try:
        # More than 10 characters means milliseconds
        if len(text) > 10:
            return _EPOCH + dt.timedelta(milliseconds=epoch)
        return _EPOCH + dt.timedelta(seconds=epoch)
    except OverflowError:
        return None


def _parse_datetime(text: str) -> dt.datetime:
    for parser in (_iso_datetime, _rfc_1123_datetime, _plain_datetime, _epoch_datetime):
        parsed = parser(text)
        if parsed is not None:
            return parsed
    raise CoercionError(f"Couldn't parse datetime {text!r} - unrecognised format")


def _parse_url(text: str) -> str:
    try:
        parts = urlsplit(text)
    except ValueError as exc:
        raise CoercionError(f"Couldn't parse URL {text!r}") from exc
    if parts.scheme.lower() not in _URL_SCHEMES or text != text.strip():
        raise CoercionError(f"Couldn't parse URL {text!r}")
    if not (parts.netloc or parts.path):
        raise CoercionError(f"Couldn't parse URL {text!r}")
    return text
