"""Validation Engine

Entry point tying the registry, leaf processor, group aggregator and tree
walker together.

Usage:
    engine = create_engine({"validators": {"even": lambda v: int(v) % 2 == 0}})
    result = await engine.run(declaration, request_body)
    errors, values = engine.collect_errors(result), engine.collect_values(result)
"""
from __future__ import annotations

import time
from functools import lru_cache
from collections.abc import Mapping
from typing import Any

from fieldtree.core.config import Settings, get_settings
from fieldtree.core.errors import (
    AppError,
    AppErrorException,
    Err,
    Ok,
    Result,
    RuleExecutionError,
    UnknownRuleError,
    invalid_payload,
)
from fieldtree.core.logging import engine_logger
from fieldtree.rules import DEFAULT_RULES

from .declaration import GroupDeclaration, parse_declaration
from .extract import collect_errors, collect_values
from .group import GroupAggregator
from .leaf import LeafProcessor
from .registry import RuleRegistry, RuleSet
from .results import Errors, GroupResult
from .runner import RuleRunner
from .walker import TreeWalker

log = engine_logger()


class Engine:
    """Validates and sanitizes input mappings against declaration trees."""

    __slots__ = ("registry", "settings", "_walker")

    def __init__(self, registry: RuleRegistry, settings: Settings | None = None):
        self.registry = registry
        self.settings = settings or get_settings()
        runner = RuleRunner(
            registry,
            concurrent=self.settings.CONCURRENT_RULES,
            failure_policy=self.settings.RULE_FAILURE_POLICY,
        )
        self._walker = TreeWalker(LeafProcessor(runner), GroupAggregator(runner))

    async def run(
        self,
        declaration: GroupDeclaration | Mapping[str, Any],
        values: Mapping[str, Any] | None = None,
    ) -> GroupResult:
        """Validate ``values`` against ``declaration`` and return a fresh result tree.

        Raises ConfigurationError (UnknownRuleError, DeclarationError) for
        programmer mistakes and RuleExecutionError when a rule raises under
        the default failure policy. Validation failures are never raised.
        """
        group = parse_declaration(declaration)
        if values is None:
            values = {}
        if not isinstance(values, Mapping):
            raise AppErrorException(
                invalid_payload("input", f"expected an object, got {type(values).__name__}", origin="engine").error
            )

        start = time.perf_counter()
        root = self.settings.ERROR_ROOT_KEY
        try:
            result = await self._walker.walk(root, group, values)
        except UnknownRuleError as exc:
            log.error("unknown_rule", rule_class=exc.rule_class, rule=exc.name)
            raise
        except RuleExecutionError as exc:
            log.error("rule_failed", rule_class=exc.rule_class, rule=exc.name, error=str(exc.__cause__))
            raise

        log.debug(
            "run_completed",
            valid=result.valid,
            fields=len(group.leaves()),
            failing=len(collect_errors(result, root)),
            duration_ms=round((time.perf_counter() - start) * 1000, 2),
        )
        return result

    async def try_run(
        self,
        declaration: GroupDeclaration | Mapping[str, Any],
        values: Mapping[str, Any] | None = None,
    ) -> Result[GroupResult, AppError]:
        """Result-returning variant of run: fatal errors come back as Err."""
        try:
            return Ok(await self.run(declaration, values))
        except AppErrorException as exc:
            return Err(exc.error)

    def collect_errors(self, result: GroupResult) -> dict[str, Errors]:
        return collect_errors(result, self.settings.ERROR_ROOT_KEY)

    def collect_values(self, result: GroupResult) -> dict[str, Any]:
        return collect_values(result)


def create_engine(overrides: RuleSet | None = None, *, settings: Settings | None = None) -> Engine:
    """Build an engine with the built-in rules plus ``overrides``.

    ``overrides`` maps rule class ("validators", "validatorSchemes",
    "sanitizations", "sanitizationSchemes") to ``{name: implementation}``.
    """
    return Engine(RuleRegistry.from_overrides(DEFAULT_RULES, overrides), settings)


@lru_cache
def get_engine() -> Engine:
    """Process-wide engine with the built-in rules and environment settings."""
    return create_engine()
