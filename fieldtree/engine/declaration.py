"""Declaration Models

Frozen pydantic models for the caller-authored declaration tree. Raw
mappings such as

    {
        "keys": {
            "first_name": {"validatorSchemes": [["name"]], "sanitizations": ["trim"]},
            "contact": {
                "keys": {"phone": {"optional": True}, "email": {"optional": True}},
                "validators": [["validMin", [1]]],
            },
        },
    }

are parsed once into GroupDeclaration / LeafDeclaration instances. A child
carrying its own ``keys`` mapping is a group, anything else is a leaf.
Parsed declarations are immutable, so one declaration can serve any number
of concurrent runs.
"""
from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Annotated, Any, Callable, Union

import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    Discriminator,
    Field,
    Tag,
    TypeAdapter,
    ValidationError,
    model_validator,
)

from fieldtree.core.errors import DeclarationError


class RuleCall(BaseModel):
    """One ``(name, options)`` rule invocation.

    Accepts ``"trim"``, ``["trim"]``, ``["range", [2, 35]]`` or
    ``{"name": "range", "options": [2, 35]}``.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(min_length=1)
    options: tuple[Any, ...] = ()

    @model_validator(mode="before")
    @classmethod
    def _from_shorthand(cls, data: Any) -> Any:
        if isinstance(data, str):
            return {"name": data}
        if isinstance(data, (list, tuple)):
            if not 1 <= len(data) <= 2:
                raise ValueError(f"expected (name,) or (name, options), got {len(data)} items")
            options = data[1] if len(data) == 2 and data[1] is not None else ()
            if not isinstance(options, (list, tuple)):
                raise ValueError(f"options must be a list, got {type(options).__name__}")
            return {"name": data[0], "options": options}
        return data

    def __str__(self) -> str:
        return f"{self.name}({', '.join(repr(o) for o in self.options)})"


RuleCalls = tuple[RuleCall, ...]


class _Node(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    validators: RuleCalls = ()
    validator_schemes: RuleCalls = Field(default=(), alias="validatorSchemes")


class LeafDeclaration(_Node):
    """A terminal field and the rules applied to its scalar value."""

    sanitizations: RuleCalls = ()
    sanitization_schemes: RuleCalls = Field(default=(), alias="sanitizationSchemes")
    optional: bool = False
    allow_empty: bool = Field(default=False, alias="allowEmpty")

    @model_validator(mode="before")
    @classmethod
    def _null_is_empty(cls, data: Any) -> Any:
        # YAML ``dob:`` parses to None: a required leaf with no rules
        return {} if data is None else data


def _node_kind(value: Any) -> str:
    if isinstance(value, GroupDeclaration):
        return "group"
    if isinstance(value, LeafDeclaration):
        return "leaf"
    return "group" if isinstance(value, Mapping) and "keys" in value else "leaf"


ChildDeclaration = Annotated[
    Union[
        Annotated["GroupDeclaration", Tag("group")],
        Annotated[LeafDeclaration, Tag("leaf")],
    ],
    Discriminator(_node_kind),
]


class GroupDeclaration(_Node):
    """A named tree of child declarations plus optional cross-field rules.

    ``validators`` and ``validator_schemes`` here receive the group result
    node (children already evaluated), not a scalar. ``condition`` (``if``)
    is a bool or a callable taking the raw input mapping; when it is false
    the group's own validity is not enforced.
    """

    keys: dict[str, ChildDeclaration]
    condition: Union[bool, Callable[..., Any]] = Field(default=True, alias="if")

    def leaves(self) -> dict[str, LeafDeclaration]:
        """All leaf declarations in the tree, flattened by name."""
        found: dict[str, LeafDeclaration] = {}
        for name, child in self.keys.items():
            if isinstance(child, GroupDeclaration):
                found.update(child.leaves())
            else:
                found[name] = child
        return found


GroupDeclaration.model_rebuild()

_RULE_CALLS = TypeAdapter(RuleCalls)


def _describe(exc: ValidationError) -> tuple[str, str]:
    first = exc.errors()[0]
    path = ".".join(str(part) for part in first.get("loc", ())) or "$"
    return path, f"{path}: {first.get('msg', 'invalid value')}"


def parse_declaration(data: GroupDeclaration | Mapping[str, Any]) -> GroupDeclaration:
    """Parse a raw declaration mapping, raising DeclarationError on bad shape."""
    if isinstance(data, GroupDeclaration):
        return data
    if not isinstance(data, Mapping) or "keys" not in data:
        raise DeclarationError("the root declaration must be a group with a 'keys' mapping", path="$")
    try:
        return GroupDeclaration.model_validate(data)
    except ValidationError as exc:
        path, message = _describe(exc)
        raise DeclarationError(message, path=path) from exc


def parse_rule_calls(data: Any, *, origin: str) -> RuleCalls:
    """Normalise a scheme expansion into rule calls."""
    if data is None:
        return ()
    try:
        return _RULE_CALLS.validate_python(data)
    except ValidationError as exc:
        _, message = _describe(exc)
        raise DeclarationError(f"{origin} returned an invalid rule list ({message})", path=origin) from exc


def load_declaration(path: str | Path) -> GroupDeclaration:
    """Load a declaration from a YAML (or JSON) file.

    File-based declarations cannot carry callable ``if`` conditions.
    """
    path = Path(path)
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except OSError as exc:
        raise DeclarationError(f"cannot read declaration file ({exc})", path=str(path)) from exc
    except yaml.YAMLError as exc:
        raise DeclarationError(f"{path.name} is not valid YAML ({exc})", path=str(path)) from exc
    return parse_declaration(data or {})
