"""Error Handling System

- Result[T, E]: container for success/failure at API boundaries
- AppError: immutable error value with code, message, context, metadata
- ErrorCode: error code taxonomy (validation, configuration, internal)
- Exceptions: AppErrorException hierarchy raised by the engine and adapter
- Builders and FastAPI handlers

Usage:
    from fieldtree.core.errors import Ok, Err, UnknownRuleError

    match await engine.try_run(declaration, values):
        case Ok(result):
            ...
        case Err(error):
            log.error(error.message, code=error.code.name)
"""
from .types import (
    Result,
    Ok,
    Err,
    AppError,
    ErrorCode,
    ErrorContext,
    from_exception,
)

from .builders import (
    validation_failed,
    invalid_payload,
    configuration_error,
    unknown_rule,
    invalid_declaration,
    invalid_registry,
    rule_failed,
    internal_error,
)

from .exceptions import (
    AppErrorException,
    ConfigurationError,
    UnknownRuleError,
    DeclarationError,
    RuleExecutionError,
    FieldValidationError,
)

from .handlers import (
    register_error_handlers,
    result_to_response,
    raise_error,
    raise_result,
)

__all__ = [
    # Core types
    "Result",
    "Ok",
    "Err",
    "AppError",
    "ErrorCode",
    "ErrorContext",
    "from_exception",
    # Builders
    "validation_failed",
    "invalid_payload",
    "configuration_error",
    "unknown_rule",
    "invalid_declaration",
    "invalid_registry",
    "rule_failed",
    "internal_error",
    # Exceptions
    "AppErrorException",
    "ConfigurationError",
    "UnknownRuleError",
    "DeclarationError",
    "RuleExecutionError",
    "FieldValidationError",
    # Handlers
    "register_error_handlers",
    "result_to_response",
    "raise_error",
    "raise_result",
]
