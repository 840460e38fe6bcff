"""Result Extractors

Two read-only projections over a result tree.
"""
from __future__ import annotations

from typing import Any

from .results import Errors, GroupResult

ROOT_KEY = "*"


def collect_errors(group: GroupResult, key: str = ROOT_KEY) -> dict[str, Errors]:
    """Errors of failing nodes only, keyed by leaf or group name.

    Valid subtrees are pruned, so the output grows with the number of
    failures rather than with the size of the tree. An invalid group reports
    its own group-level errors under its name (``"*"`` for the root).
    """
    errors: dict[str, Errors] = {}
    if group.valid:
        return errors
    if group.errors:
        errors[key] = dict(group.errors)
    for name, child in group.keys.items():
        if isinstance(child, GroupResult):
            errors.update(collect_errors(child, name))
        elif not child.valid:
            errors[name] = dict(child.errors)
    return errors


def collect_values(group: GroupResult) -> dict[str, Any]:
    """Every leaf's sanitized value, valid or not, flattened by leaf name."""
    values: dict[str, Any] = {}
    for name, child in group.keys.items():
        if isinstance(child, GroupResult):
            values.update(collect_values(child))
        else:
            values[name] = child.value_sanitized
    return values
