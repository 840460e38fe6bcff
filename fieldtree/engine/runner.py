"""Rule evaluation shared by leaves and groups

Errors are collected positionally and merged in declaration order, so the
resulting mapping does not depend on which concurrently dispatched rule
settles first. A rule name appears once per mapping; when it fails more
than once the last failing call supplies the options.
"""
from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Iterable
from typing import Any, Literal, TypeVar

from fieldtree.core.errors import RuleExecutionError
from fieldtree.core.logging import engine_logger

from .declaration import RuleCall, RuleCalls
from .registry import RuleClass, RuleRegistry
from .results import Errors
from .schemes import SchemeExpander

log = engine_logger()

T = TypeVar("T")

FailurePolicy = Literal["raise", "record"]


async def fan_out(aws: Iterable[Awaitable[T]]) -> list[T]:
    """Run awaitables concurrently and join them, preserving input order.

    The first exception propagates; the remaining tasks are cancelled and
    joined before it does, so no sibling outlives the tier.
    """
    tasks = [asyncio.ensure_future(aw) for aw in aws]
    try:
        return list(await asyncio.gather(*tasks))
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise


class RuleRunner:
    """Evaluates declared rule lists against a subject."""

    __slots__ = ("registry", "expander", "concurrent", "failure_policy")

    def __init__(
        self,
        registry: RuleRegistry,
        *,
        concurrent: bool = True,
        failure_policy: FailurePolicy = "raise",
    ):
        self.registry = registry
        self.expander = SchemeExpander(registry)
        self.concurrent = concurrent
        self.failure_policy = failure_policy

    async def _gather(self, aws: Iterable[Awaitable[T]]) -> list[T]:
        if self.concurrent:
            return await fan_out(aws)
        return [await aw for aw in aws]

    def _recordable(self, exc: RuleExecutionError) -> bool:
        if self.failure_policy != "record":
            return False
        log.warning("rule_failed_recorded", rule_class=exc.rule_class, rule=exc.name, error=str(exc.__cause__))
        return True

    async def _check(self, call: RuleCall, subject: Any) -> bool:
        try:
            passed = await self.registry.invoke(RuleClass.VALIDATOR, call.name, subject, call.options)
        except RuleExecutionError as exc:
            if not self._recordable(exc):
                raise
            return False
        return bool(passed)

    async def validate(self, calls: RuleCalls, subject: Any) -> Errors:
        """Run validators; return the failing ones keyed by name."""
        outcomes = await self._gather(self._check(call, subject) for call in calls)
        errors: Errors = {}
        for call, passed in zip(calls, outcomes):
            if not passed:
                errors[call.name] = list(call.options)
        return errors

    async def _validate_scheme(self, call: RuleCall, subject: Any) -> Errors:
        try:
            expanded = await self.expander.expand_validator_scheme(call, subject)
        except RuleExecutionError as exc:
            if not self._recordable(exc):
                raise
            return {call.name: list(call.options)}
        return await self.validate(expanded, subject)

    async def validate_schemes(self, calls: RuleCalls, subject: Any) -> Errors:
        """Expand each validator scheme and run the validators it yields."""
        errors: Errors = {}
        for scheme_errors in await self._gather(self._validate_scheme(call, subject) for call in calls):
            errors.update(scheme_errors)
        return errors

    async def sanitize(self, calls: RuleCalls, value: Any) -> tuple[Any, Errors]:
        """Thread ``value`` through sanitizers one after another."""
        errors: Errors = {}
        for call in calls:
            try:
                value = await self.registry.invoke(RuleClass.SANITIZER, call.name, value, call.options)
            except RuleExecutionError as exc:
                if not self._recordable(exc):
                    raise
                errors[call.name] = list(call.options)
        return value, errors

    async def sanitize_schemes(self, calls: RuleCalls, value: Any) -> tuple[Any, Errors]:
        """Expand each sanitizer scheme against the current value, then apply it."""
        errors: Errors = {}
        for call in calls:
            try:
                expanded = await self.expander.expand_sanitizer_scheme(call, value)
            except RuleExecutionError as exc:
                if not self._recordable(exc):
                    raise
                errors[call.name] = list(call.options)
                continue
            value, failed = await self.sanitize(expanded, value)
            errors.update(failed)
        return value, errors
