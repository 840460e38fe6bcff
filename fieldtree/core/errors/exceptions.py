"""Exception hierarchy

Every exception wraps an AppError so that it can be rendered by the HTTP
handlers or converted back into an Err at a Result boundary.

    AppErrorException
    ├── ConfigurationError        fatal, programmer mistake
    │   ├── UnknownRuleError
    │   └── DeclarationError
    ├── RuleExecutionError        a rule implementation raised
    └── FieldValidationError      structured 400 failure raised by the adapter
"""
from __future__ import annotations

from typing import Any

from .types import AppError
from .builders import (
    invalid_declaration,
    rule_failed,
    unknown_rule,
    validation_failed,
)


class AppErrorException(Exception):
    """Exception wrapper for AppError.

    Use this when you need to raise an AppError in code that
    doesn't use Result (e.g., the engine or FastAPI dependencies).
    """

    def __init__(self, error: AppError):
        self.error = error
        super().__init__(error.message)


class ConfigurationError(AppErrorException):
    """A declaration or registry is wrong. Never a user input failure."""


class UnknownRuleError(ConfigurationError):
    """A declared rule or scheme name has no registered implementation."""

    def __init__(self, rule_class: str, name: str):
        self.rule_class, self.name = rule_class, name
        super().__init__(unknown_rule(rule_class, name, origin="registry").error)


class DeclarationError(ConfigurationError):
    """A declaration tree (or a scheme expansion) has the wrong shape."""

    def __init__(self, message: str, *, path: str | None = None):
        self.path = path
        super().__init__(invalid_declaration(message, path=path, origin="declaration").error)


class RuleExecutionError(AppErrorException):
    """A rule implementation raised while being evaluated."""

    def __init__(self, rule_class: str, name: str, cause: Exception):
        self.rule_class, self.name = rule_class, name
        super().__init__(rule_failed(rule_class, name, cause, origin="engine").error)


class FieldValidationError(AppErrorException):
    """Structured request failure: ``{statusCode: 400, key: 'validation', errors, values}``."""

    status_code = 400
    key = "validation"

    def __init__(self, errors: dict[str, Any], values: dict[str, Any]):
        self.errors, self.values = errors, values
        super().__init__(validation_failed(errors, values, origin="adapter").error)

    def to_dict(self) -> dict[str, Any]:
        return {
            "statusCode": self.status_code,
            "key": self.key,
            "errors": self.errors,
            "values": self.values,
        }
