"""Error Types

Immutable error values and a minimal Result type. The engine raises (see
``exceptions``); ``Engine.try_run`` and the HTTP handlers convert between
raised exceptions and these values at the edges.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Generic, NoReturn, TypeVar, Union, final
from uuid import uuid4

T = TypeVar("T")
U = TypeVar("U")
E = TypeVar("E", bound="AppError")


class ErrorCode(Enum):
    """Error code taxonomy.

    E2xxx: the input is wrong (never raised for ordinary field failures,
           which live in result trees)
    E7xxx: the declaration, registry or a rule implementation is wrong
    E9xxx: anything else
    """
    E2000_VALIDATION_GENERIC = 2000
    E2021_INVALID_PAYLOAD = 2021

    E7000_CONFIGURATION_GENERIC = 7000
    E7001_UNKNOWN_RULE = 7001
    E7002_INVALID_DECLARATION = 7002
    E7003_INVALID_REGISTRY = 7003
    E7010_RULE_FAILED = 7010

    E9001_UNEXPECTED_ERROR = 9001

    @property
    def http_status(self) -> int:
        # Configuration mistakes are server faults, not client errors
        return 400 if self.category == "validation" else 500

    @property
    def category(self) -> str:
        code = self.value
        if 2000 <= code < 3000:
            return "validation"
        if 7000 <= code < 8000:
            return "configuration"
        return "internal"


@dataclass(frozen=True, slots=True)
class ErrorContext:
    """Where and when an error was produced."""
    correlation_id: str = field(default_factory=lambda: uuid4().hex[:8])
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    origin: str = ""
    request_id: str | None = None


@dataclass(frozen=True, slots=True)
class AppError:
    """An error value: code, message, tracing context and structured metadata.

    ``metadata`` carries the machine-readable details (rule class and name,
    declaration path, input location) that the message summarises.
    """
    code: ErrorCode
    message: str
    context: ErrorContext = field(default_factory=ErrorContext)
    metadata: dict[str, Any] = field(default_factory=dict)
    cause: Exception | None = None

    def with_context(self, **kwargs: Any) -> AppError:
        """Copy with request tracing attached; ``None`` keeps the current value."""
        ctx = self.context
        return AppError(
            code=self.code,
            message=self.message,
            context=ErrorContext(
                correlation_id=kwargs.get("correlation_id") or ctx.correlation_id,
                timestamp=ctx.timestamp,
                origin=kwargs.get("origin") or ctx.origin,
                request_id=kwargs.get("request_id") or ctx.request_id,
            ),
            metadata=self.metadata,
            cause=self.cause,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": {
                "code": self.code.name,
                "code_num": self.code.value,
                "category": self.code.category,
                "message": self.message,
                "correlation_id": self.context.correlation_id,
                "timestamp": self.context.timestamp.isoformat(),
                "metadata": self.metadata,
            }
        }

    def __str__(self) -> str:
        return f"[{self.code.name}] {self.message}"


@final
@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self.value

    def unwrap_or(self, default: T) -> T:
        return self.value

    def map(self, f: Callable[[T], U]) -> Ok[U]:
        return Ok(f(self.value))


@final
@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    error: E

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self) -> NoReturn:
        raise ValueError(f"Called unwrap on Err: {self.error}")

    def unwrap_or(self, default: T) -> T:
        return default

    def unwrap_err(self) -> E:
        return self.error

    def map(self, f: Callable[[Any], Any]) -> Err[E]:
        return self


Result = Union[Ok[T], Err[E]]


def from_exception(
    exc: Exception,
    code: ErrorCode = ErrorCode.E9001_UNEXPECTED_ERROR,
    message: str | None = None,
    origin: str = "",
    **metadata: Any,
) -> Err[AppError]:
    """Wrap an arbitrary exception as an Err."""
    return Err(AppError(
        code=code,
        message=message or str(exc),
        context=ErrorContext(origin=origin),
        metadata=metadata,
        cause=exc,
    ))
