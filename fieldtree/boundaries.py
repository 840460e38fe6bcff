"""Validation at the Request Boundary

FastAPI integration: a dependency that pulls the raw input object out of a
request, runs the engine over it, and either rejects the request with a
structured 400 failure or hands the outcome to the route.

Usage:
    SIGNUP = {"keys": {"first_name": {"validatorSchemes": [["name"]]}}}

    @app.post("/signup")
    async def signup(outcome: ValidationOutcome = validated(SIGNUP)):
        return outcome.values
"""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Literal, get_args

from fastapi import Depends, Request

from fieldtree.core.errors import (
    ConfigurationError,
    FieldValidationError,
    configuration_error,
    invalid_payload,
    raise_error,
)
from fieldtree.core.logging import api_logger
from fieldtree.engine import Engine, GroupDeclaration, GroupResult, get_engine, parse_declaration
from fieldtree.engine.results import Errors

log = api_logger()

Location = Literal["body", "query", "path", "headers", "cookies", "form"]
LOCATIONS: tuple[str, ...] = get_args(Location)


@dataclass(frozen=True, slots=True)
class ValidationOutcome:
    """What a validated route receives (and what lands on ``request.state.validation``)."""
    result: GroupResult
    errors: dict[str, Errors]
    values: dict[str, Any]

    @property
    def valid(self) -> bool:
        return not self.errors


async def extract_input(request: Request, location: Location) -> Mapping[str, Any]:
    """Read the raw input object from one location of the request."""
    if location == "body":
        if not await request.body():
            return {}
        try:
            data = await request.json()
        except ValueError as e:
            raise_error(invalid_payload("body", f"invalid JSON ({e})", origin="ingress").error)
        if not isinstance(data, dict):
            raise_error(invalid_payload("body", f"expected a JSON object, got {type(data).__name__}", origin="ingress").error)
        return data
    if location == "query":
        return dict(request.query_params)
    if location == "path":
        return dict(request.path_params)
    if location == "headers":
        return dict(request.headers)
    if location == "cookies":
        return dict(request.cookies)
    form = await request.form()
    return {key: value for key, value in form.items()}


class ValidatedInput:
    """FastAPI dependency validating one request location against a declaration.

    The declaration is parsed when the dependency is built, so a malformed
    declaration fails at import time instead of on the first request.
    """

    __slots__ = ("declaration", "location", "throw_on_error", "_engine")

    def __init__(
        self,
        declaration: GroupDeclaration | Mapping[str, Any],
        location: Location = "body",
        *,
        throw_on_error: bool = True,
        engine: Engine | None = None,
    ):
        if location not in LOCATIONS:
            raise ConfigurationError(configuration_error(
                f"unknown input location '{location}', expected one of: {', '.join(LOCATIONS)}",
                origin="adapter",
            ).error)
        self.declaration = parse_declaration(declaration)
        self.location = location
        self.throw_on_error = throw_on_error
        self._engine = engine

    @property
    def engine(self) -> Engine:
        return self._engine or get_engine()

    async def __call__(self, request: Request) -> ValidationOutcome:
        engine = self.engine
        raw = await extract_input(request, self.location)
        result = await engine.run(self.declaration, raw)
        outcome = ValidationOutcome(
            result=result,
            errors=engine.collect_errors(result),
            values=engine.collect_values(result),
        )

        if self.throw_on_error and outcome.errors:
            log.info("validation_failed", location=self.location, failing_fields=sorted(outcome.errors))
            raise FieldValidationError(outcome.errors, outcome.values)

        request.state.validation = outcome
        return outcome


def validated(
    declaration: GroupDeclaration | Mapping[str, Any],
    location: Location = "body",
    *,
    throw_on_error: bool = True,
    engine: Engine | None = None,
) -> Any:
    """FastAPI dependency factory for a validated request location.

    Usage:
        @router.post("/users")
        async def create_user(outcome: ValidationOutcome = validated(USER, "body")):
            ...
    """
    return Depends(ValidatedInput(declaration, location, throw_on_error=throw_on_error, engine=engine))
