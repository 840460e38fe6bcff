"""Result nodes

A result tree mirrors the declaration tree it was produced from. It is
allocated fresh for every run; declarations are never written to.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union

Errors = dict[str, list[Any]]


@dataclass(slots=True)
class LeafResult:
    """Outcome for one field: validity, failed rules, raw and sanitized value."""
    valid: bool
    errors: Errors = field(default_factory=dict)
    value: Any = None
    value_sanitized: Any = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "valid": self.valid,
            "errors": self.errors,
            "value": self.value,
            "valueSanitized": self.value_sanitized,
        }


@dataclass(slots=True)
class GroupResult:
    """Outcome for a group: its children's results plus group-level errors.

    Group-level validators receive this node as their subject, so they can
    inspect ``group.keys[name].valid`` across siblings.
    """
    keys: dict[str, ResultNode]
    valid: bool = True
    errors: Errors = field(default_factory=dict)

    def __getitem__(self, name: str) -> ResultNode:
        return self.keys[name]

    def __contains__(self, name: object) -> bool:
        return name in self.keys

    def to_dict(self) -> dict[str, Any]:
        return {
            "valid": self.valid,
            "errors": self.errors,
            "keys": {name: child.to_dict() for name, child in self.keys.items()},
        }


ResultNode = Union[LeafResult, GroupResult]
