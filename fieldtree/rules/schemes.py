"""Built-in schemes

Validator schemes return ``[(validator, options), ...]``; sanitizer schemes
return ``[(sanitizer, options), ...]``. Both are called with the current
subject first, so an expansion may depend on it.
"""
from __future__ import annotations

from typing import Any


def name(value: Any) -> list:
    return [["range", [2, 35]]]


def password(value: Any) -> list:
    return [["range", [6, 50]]]


def text(value: Any) -> list:
    return [["range", [1, 150]]]


def boolean(value: Any) -> list:
    return [
        ["isNumber"],
        ["between", [0, 1]],
    ]


def dot_plus(value: Any, *options: Any) -> list:
    return [
        ["plusAdd", ["left"]],
        ["dotAdd"],
    ]


VALIDATOR_SCHEMES = {
    "name": name,
    "password": password,
    "text": text,
    "boolean": boolean,
}

SANITIZER_SCHEMES = {
    "dotPlus": dot_plus,
}
