"""Leaf Processor

Evaluates one terminal field. Validation and sanitization are independent:
a failing validator never stops sanitization, so callers always get the
best-effort sanitized value back.
"""
from __future__ import annotations

from typing import Any

from fieldtree.core.logging import engine_logger

from .declaration import LeafDeclaration
from .results import LeafResult
from .runner import RuleRunner

log = engine_logger()

OPTIONAL = "optional"


def is_absent(value: Any) -> bool:
    """A missing key and an explicit null are both treated as absent."""
    return value is None


class LeafProcessor:
    """Resolve a leaf's validators, validator schemes, sanitizers and sanitizer schemes."""

    __slots__ = ("runner",)

    def __init__(self, runner: RuleRunner):
        self.runner = runner

    async def process(self, name: str, declaration: LeafDeclaration, raw: Any) -> LeafResult:
        if declaration.allow_empty and isinstance(raw, str) and raw == "":
            return LeafResult(valid=True, value=raw, value_sanitized=raw)

        if is_absent(raw):
            if declaration.optional:
                return LeafResult(valid=True)
            return LeafResult(valid=False, errors={OPTIONAL: []})

        runner = self.runner
        errors = await runner.validate(declaration.validators, raw)
        errors.update(await runner.validate_schemes(declaration.validator_schemes, raw))

        sanitized, failed = await runner.sanitize(declaration.sanitizations, raw)
        errors.update(failed)
        sanitized, failed = await runner.sanitize_schemes(declaration.sanitization_schemes, sanitized)
        errors.update(failed)

        if errors:
            log.debug("leaf_invalid", field=name, failed=list(errors))
        return LeafResult(valid=not errors, errors=errors, value=raw, value_sanitized=sanitized)
