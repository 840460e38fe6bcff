"""Built-in validators

Each validator is ``(subject, *options) -> bool``. Leaf validators get the
raw field value; group validators (validMin, invalidMax) get the group
result node.
"""
from __future__ import annotations

import math
import re
from datetime import date, datetime
from email.utils import parseaddr
from typing import Any

# Leading decimal prefix, the way a browser's parseFloat reads "12.5kg" as 12.5
_FLOAT_PREFIX = re.compile(r"\s*([+-]?(?:Infinity|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?))")
_EMAIL = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")
_DATE_FORMATS = ("%m/%d/%Y",)


def parse_float(value: Any) -> float:
    """Parse the leading number of ``value``; NaN when there is none."""
    if isinstance(value, bool):
        return math.nan
    if isinstance(value, (int, float)):
        return float(value)
    if not isinstance(value, str):
        return math.nan
    if not (match := _FLOAT_PREFIX.match(value)):
        return math.nan
    return float(match.group(1).replace("Infinity", "inf"))


def _as_number(value: Any, strict: bool) -> float:
    if strict:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return math.nan
        return float(value)
    return parse_float(value)


def range_(value: Any, min_len: int, max_len: int) -> bool:
    """String (or sequence) length within [min_len, max_len]."""
    try:
        length = len(value)
    except TypeError:
        return False
    return min_len <= length <= max_len


def between(value: Any, min_value: float, max_value: float) -> bool:
    """Parsed number within [min_value, max_value]."""
    return min_value <= parse_float(value) <= max_value


def is_number(value: Any, strict: bool = False) -> bool:
    return not math.isnan(_as_number(value, strict))


def is_number_positive(value: Any, strict: bool = False) -> bool:
    number = _as_number(value, strict)
    return not math.isnan(number) and number > 0


def is_time(value: Any) -> bool:
    """``HH:MM:SS`` with HH in [0, 24] and MM, SS in [0, 60]."""
    if not isinstance(value, str):
        return False
    parts = value.split(":")
    if len(parts) != 3:
        return False
    for index, part in enumerate(parts):
        try:
            number = float(part)
        except ValueError:
            return False
        upper = 24 if index == 0 else 60
        if not 0 <= number <= upper:
            return False
    return True


def is_date(value: Any) -> bool:
    """Calendar date: ISO 8601 (date or datetime) or MM/DD/YYYY."""
    if isinstance(value, (date, datetime)):
        return True
    if not isinstance(value, str) or not value.strip():
        return False
    text = value.strip()
    try:
        datetime.fromisoformat(text.replace("Z", "+00:00"))
        return True
    except ValueError:
        pass
    for fmt in _DATE_FORMATS:
        try:
            datetime.strptime(text, fmt)
            return True
        except ValueError:
            continue
    return False


def is_email(value: Any) -> bool:
    if not isinstance(value, str):
        return False
    _, address = parseaddr(value)
    return address == value and bool(_EMAIL.match(value))


def valid_min(group: Any, minimum: int) -> bool:
    """At least ``minimum`` direct children of the group are valid."""
    return sum(1 for child in group.keys.values() if child.valid) >= minimum


def invalid_max(group: Any, maximum: int) -> bool:
    """At most ``maximum`` direct children of the group are invalid."""
    return sum(1 for child in group.keys.values() if not child.valid) <= maximum


VALIDATORS = {
    "range": range_,
    "between": between,
    "isNumber": is_number,
    "isNumberPositive": is_number_positive,
    "isTime": is_time,
    "isDate": is_date,
    "isEmail": is_email,
    "validMin": valid_min,
    "invalidMax": invalid_max,
}
