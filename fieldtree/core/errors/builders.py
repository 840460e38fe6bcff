"""Error Builders

One constructor per failure the engine, the adapter or the handlers can
report. Each returns ``Err(AppError)``; callers that raise wrap
``.error`` in the matching exception.
"""
from typing import Any

from .types import AppError, ErrorCode, ErrorContext, Err


def _build(
    code: ErrorCode,
    message: str,
    *,
    origin: str = "",
    cause: Exception | None = None,
    **metadata: Any,
) -> Err[AppError]:
    return Err(AppError(
        code=code,
        message=message,
        context=ErrorContext(origin=origin),
        metadata={k: v for k, v in metadata.items() if v is not None},
        cause=cause,
    ))


# --- input (E2xxx) -----------------------------------------------------------

def validation_failed(errors: dict[str, Any], values: dict[str, Any], origin: str = "") -> Err[AppError]:
    """Field failures collected from a result tree, for the structured 400 body."""
    noun = "field" if len(errors) == 1 else "fields"
    return _build(
        ErrorCode.E2000_VALIDATION_GENERIC,
        f"{len(errors)} {noun} failed validation",
        origin=origin,
        errors=errors,
        values=values,
    )


def invalid_payload(location: str, reason: str, origin: str = "") -> Err[AppError]:
    """The input object itself could not be read (bad JSON, not an object)."""
    return _build(
        ErrorCode.E2021_INVALID_PAYLOAD,
        f"Invalid {location} payload: {reason}",
        origin=origin,
        location=location,
    )


# --- declarations and registries (E7xxx) ------------------------------------

def configuration_error(message: str, *, origin: str = "", **metadata: Any) -> Err[AppError]:
    return _build(ErrorCode.E7000_CONFIGURATION_GENERIC, message, origin=origin, **metadata)


def unknown_rule(rule_class: str, name: str, origin: str = "") -> Err[AppError]:
    return _build(
        ErrorCode.E7001_UNKNOWN_RULE,
        f"{rule_class} '{name}' does not exist",
        origin=origin,
        rule_class=rule_class,
        rule=name,
    )


def invalid_declaration(message: str, *, path: str | None = None, origin: str = "") -> Err[AppError]:
    return _build(ErrorCode.E7002_INVALID_DECLARATION, f"Invalid declaration: {message}", origin=origin, path=path)


def invalid_registry(message: str, origin: str = "") -> Err[AppError]:
    return _build(ErrorCode.E7003_INVALID_REGISTRY, f"Invalid rule registry: {message}", origin=origin)


def rule_failed(rule_class: str, name: str, cause: Exception, origin: str = "") -> Err[AppError]:
    return _build(
        ErrorCode.E7010_RULE_FAILED,
        f"{rule_class} '{name}' raised {type(cause).__name__}: {cause}",
        origin=origin,
        cause=cause,
        rule_class=rule_class,
        rule=name,
    )


# --- everything else (E9xxx) -------------------------------------------------

def internal_error(message: str, *, origin: str = "", cause: Exception | None = None) -> Err[AppError]:
    return _build(ErrorCode.E9001_UNEXPECTED_ERROR, message, origin=origin, cause=cause)
