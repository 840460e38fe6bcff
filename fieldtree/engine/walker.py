"""Tree Walker

Depth-first over the declaration tree; all children of one group are
dispatched concurrently and joined before the group aggregates.

Input lookup is flat: every group receives the same full input mapping,
so a leaf named ``x`` reads ``values["x"]`` however deeply it is declared.
Groups structure the rules, not the input.
"""
from __future__ import annotations

from collections.abc import Awaitable, Mapping
from typing import Any

from .declaration import GroupDeclaration, LeafDeclaration
from .group import GroupAggregator
from .leaf import LeafProcessor
from .results import GroupResult, ResultNode
from .runner import fan_out


def lookup(values: Mapping[str, Any], name: str) -> Any:
    """Flat input lookup by bare leaf name."""
    return values.get(name)


class TreeWalker:
    __slots__ = ("leaf_processor", "group_aggregator")

    def __init__(self, leaf_processor: LeafProcessor, group_aggregator: GroupAggregator):
        self.leaf_processor = leaf_processor
        self.group_aggregator = group_aggregator

    def _visit(
        self, name: str, child: GroupDeclaration | LeafDeclaration, values: Mapping[str, Any]
    ) -> Awaitable[ResultNode]:
        if isinstance(child, GroupDeclaration):
            return self.walk(name, child, values)
        return self.leaf_processor.process(name, child, lookup(values, name))

    async def walk(self, name: str, declaration: GroupDeclaration, values: Mapping[str, Any]) -> GroupResult:
        names = list(declaration.keys)
        children = await fan_out(
            self._visit(key, declaration.keys[key], values) for key in names
        )
        return await self.group_aggregator.process(name, declaration, dict(zip(names, children)), values)
