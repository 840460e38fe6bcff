"""Rule Registry

Four independent namespaces of named rule implementations, resolved once
when an engine is built and immutable afterwards. Caller overrides are
merged shallowly over the built-in defaults per rule class: an override
replaces a default of the same name, nothing else is touched.

Lookups of names that were never registered raise UnknownRuleError at
evaluation time, not at construction.
"""
from __future__ import annotations

import inspect
from collections.abc import Mapping
from enum import Enum
from types import MappingProxyType
from typing import Any, Callable

from fieldtree.core.errors import (
    AppErrorException,
    ConfigurationError,
    RuleExecutionError,
    UnknownRuleError,
    invalid_registry,
)

Rule = Callable[..., Any]
RuleSet = Mapping[str, Mapping[str, Rule]]


class RuleClass(str, Enum):
    """The four rule namespaces, valued by their declaration keys."""
    VALIDATOR = "validators"
    VALIDATOR_SCHEME = "validatorSchemes"
    SANITIZER = "sanitizations"
    SANITIZER_SCHEME = "sanitizationSchemes"

    @property
    def label(self) -> str:
        return {
            RuleClass.VALIDATOR: "Validator",
            RuleClass.VALIDATOR_SCHEME: "Validator scheme",
            RuleClass.SANITIZER: "Sanitization",
            RuleClass.SANITIZER_SCHEME: "Sanitization scheme",
        }[self]

    @classmethod
    def parse(cls, key: str | RuleClass) -> RuleClass:
        """Accept the camelCase declaration key or its snake_case spelling."""
        if isinstance(key, RuleClass):
            return key
        try:
            return cls(_SNAKE_CASE.get(key, key))
        except ValueError:
            known = ", ".join(c.value for c in cls)
            raise ConfigurationError(invalid_registry(f"unknown rule class '{key}', expected one of: {known}").error) from None


_SNAKE_CASE = {
    "validator_schemes": "validatorSchemes",
    "sanitization_schemes": "sanitizationSchemes",
}


class RuleRegistry:
    """Immutable name -> implementation mapping for every rule class.

    Usage:
        registry = RuleRegistry.from_overrides(DEFAULT_RULES, {"validators": {"even": is_even}})
        registry.lookup(RuleClass.VALIDATOR, "even")
    """

    __slots__ = ("_rules",)

    def __init__(self, rules: Mapping[RuleClass, Mapping[str, Rule]]):
        self._rules = MappingProxyType({
            rule_class: MappingProxyType(dict(rules.get(rule_class, {})))
            for rule_class in RuleClass
        })

    @classmethod
    def from_overrides(cls, defaults: RuleSet, overrides: RuleSet | None = None) -> RuleRegistry:
        """Merge ``overrides`` over ``defaults`` one rule class at a time."""
        merged: dict[RuleClass, dict[str, Rule]] = {rule_class: {} for rule_class in RuleClass}
        for source in (defaults, overrides or {}):
            for key, rules in source.items():
                rule_class = RuleClass.parse(key)
                for name, implementation in rules.items():
                    if not callable(implementation):
                        raise ConfigurationError(invalid_registry(
                            f"{rule_class.label} '{name}' is not callable ({type(implementation).__name__})"
                        ).error)
                    merged[rule_class][name] = implementation
        return cls(merged)

    def lookup(self, rule_class: RuleClass, name: str) -> Rule:
        try:
            return self._rules[rule_class][name]
        except KeyError:
            raise UnknownRuleError(rule_class.label, name) from None

    def names(self, rule_class: RuleClass) -> list[str]:
        return list(self._rules[rule_class])

    def __contains__(self, item: object) -> bool:
        if not isinstance(item, tuple) or len(item) != 2:
            return False
        rule_class, name = item
        return name in self._rules.get(rule_class, {})

    async def invoke(self, rule_class: RuleClass, name: str, subject: Any, options: tuple[Any, ...] = ()) -> Any:
        """Call a rule as ``rule(subject, *options)``, awaiting coroutine rules.

        Exceptions raised by the implementation are wrapped in
        RuleExecutionError; AppErrorExceptions pass through unchanged.
        """
        implementation = self.lookup(rule_class, name)
        try:
            outcome = implementation(subject, *options)
            if inspect.isawaitable(outcome):
                outcome = await outcome
        except AppErrorException:
            raise
        except Exception as exc:
            raise RuleExecutionError(rule_class.label, name, exc) from exc
        return outcome
