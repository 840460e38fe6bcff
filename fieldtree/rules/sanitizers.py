"""Built-in sanitizers

Each sanitizer is ``(value, *options) -> new value``. Sanitizers are chained,
so they must not raise on input they cannot transform: they return it
unchanged instead.
"""
from __future__ import annotations

import math
from typing import Any

from .validators import parse_float


def trim(value: Any) -> Any:
    return value.strip() if isinstance(value, str) else value


def dot_add(value: Any) -> str:
    """Append a dot. Not idempotent."""
    return f"{value}."


def plus_add(value: Any, side: str | None = None) -> str:
    """Prepend (``side="left"``) or append (``side="right"``) a plus sign."""
    return f"{'+' if side == 'left' else ''}{value}{'+' if side == 'right' else ''}"


def to_float(value: Any) -> Any:
    number = parse_float(value)
    return value if math.isnan(number) else number


def to_int(value: Any) -> Any:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    number = parse_float(value)
    if math.isnan(number) or math.isinf(number):
        return value
    return int(number)


SANITIZERS = {
    "trim": trim,
    "dotAdd": dot_add,
    "plusAdd": plus_add,
    "toFloat": to_float,
    "toInt": to_int,
}
