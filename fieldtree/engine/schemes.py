"""Scheme Expander

A scheme is a named macro: called with the current subject and its own
options, it returns the primitive rule calls to evaluate next. Expansion
happens at evaluation time, so a scheme may inspect the value (or the group
result) it is about to check.
"""
from __future__ import annotations

from typing import Any

from .declaration import RuleCall, RuleCalls, parse_rule_calls
from .registry import RuleClass, RuleRegistry


class SchemeExpander:
    """Resolve validator and sanitizer schemes into primitive rule calls."""

    __slots__ = ("registry",)

    def __init__(self, registry: RuleRegistry):
        self.registry = registry

    async def expand_validator_scheme(self, call: RuleCall, subject: Any) -> RuleCalls:
        return await self._expand(RuleClass.VALIDATOR_SCHEME, call, subject)

    async def expand_sanitizer_scheme(self, call: RuleCall, subject: Any) -> RuleCalls:
        return await self._expand(RuleClass.SANITIZER_SCHEME, call, subject)

    async def _expand(self, rule_class: RuleClass, call: RuleCall, subject: Any) -> RuleCalls:
        expansion = await self.registry.invoke(rule_class, call.name, subject, call.options)
        return parse_rule_calls(expansion, origin=f"{rule_class.label} '{call.name}'")
