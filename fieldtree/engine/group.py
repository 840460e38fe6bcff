"""Group Aggregator

Computes a group's validity once every child in its tier has settled.
"""
from __future__ import annotations

import inspect
from collections.abc import Mapping
from typing import Any

from fieldtree.core.logging import engine_logger

from .declaration import GroupDeclaration
from .results import GroupResult, ResultNode
from .runner import RuleRunner

log = engine_logger()


class GroupAggregator:
    """Aggregate child results and run group-level (cross-field) validators."""

    __slots__ = ("runner",)

    def __init__(self, runner: RuleRunner):
        self.runner = runner

    async def condition_holds(self, declaration: GroupDeclaration, values: Mapping[str, Any]) -> bool:
        condition = declaration.condition
        if callable(condition):
            condition = condition(values)
            if inspect.isawaitable(condition):
                condition = await condition
        return bool(condition)

    async def process(
        self,
        name: str,
        declaration: GroupDeclaration,
        keys: dict[str, ResultNode],
        values: Mapping[str, Any],
    ) -> GroupResult:
        group = GroupResult(keys=keys)

        if not await self.condition_holds(declaration, values):
            log.debug("group_skipped", group=name)
            return group

        group.valid = all(child.valid for child in keys.values())

        # Group-level rules replace the plain "all children valid" check
        if declaration.validators or declaration.validator_schemes:
            errors = await self.runner.validate(declaration.validators, group)
            errors.update(await self.runner.validate_schemes(declaration.validator_schemes, group))
            group.errors = errors
            group.valid = not errors

        return group
