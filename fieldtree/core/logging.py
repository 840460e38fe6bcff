"""Structured Logging for fieldtree

structlog on top of the standard library, so events from the engine, the
request adapter and any host application end up in one stream:

- console output while developing, JSON lines in production (``LOG_JSON``)
- per-request correlation ids bound through contextvars
- raw field values and secrets redacted before rendering

Usage:
    from fieldtree.core.logging import engine_logger

    log = engine_logger()
    log.debug("run_completed", valid=False, failing=2)
"""
import logging
import sys
from functools import lru_cache
from typing import Any
from uuid import uuid4

import structlog
from structlog.types import EventDict, Processor

from fieldtree import __version__

# Keys whose values never reach a log line; field values count as user data
REDACTED_KEYS = frozenset({"password", "token", "secret", "authorization", "cookie", "values", "value"})
MAX_REDACT_DEPTH = 5


def _redact(obj: Any, depth: int = 0) -> Any:
    if depth > MAX_REDACT_DEPTH:
        return obj
    if isinstance(obj, dict):
        return {
            key: "[REDACTED]" if isinstance(key, str) and key.lower() in REDACTED_KEYS else _redact(value, depth + 1)
            for key, value in obj.items()
        }
    if isinstance(obj, (list, tuple)):
        return [_redact(item, depth + 1) for item in obj]
    return obj


def redact_field_values(logger: logging.Logger, method_name: str, event_dict: EventDict) -> EventDict:
    """Processor replacing user-supplied values with a placeholder."""
    return _redact(event_dict)


def add_library_version(logger: logging.Logger, method_name: str, event_dict: EventDict) -> EventDict:
    event_dict.setdefault("fieldtree", __version__)
    return event_dict


def shared_processors() -> list[Processor]:
    """Processors applied to structlog and foreign stdlib records alike."""
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        add_library_version,
        redact_field_values,
    ]


def configure_logging(level: str = "INFO", json_logs: bool = False) -> None:
    """Route structlog and stdlib logging through one stdout handler.

    Args:
        level: Root log level name; unknown names fall back to INFO.
        json_logs: Render JSON lines instead of colored console output.
    """
    processors = shared_processors()
    renderer: Processor
    if json_logs:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=True, exception_formatter=structlog.dev.plain_traceback)

    structlog.configure(
        processors=[
            *processors,
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=processors,
        processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
    ))

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(getattr(logging, level.upper(), logging.INFO))


def get_logger(name: str = __name__) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def generate_correlation_id() -> str:
    return uuid4().hex[:8]


def bind_context(**kwargs: Any) -> None:
    """Attach key-value pairs to every event logged in the current context."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()


@lru_cache
def domain_logger(domain: str) -> structlog.stdlib.BoundLogger:
    """One logger per fieldtree domain, named ``fieldtree.<domain>``."""
    return get_logger(f"fieldtree.{domain}")


def api_logger() -> structlog.stdlib.BoundLogger:
    """Request adapter and HTTP events."""
    return domain_logger("api")


def engine_logger() -> structlog.stdlib.BoundLogger:
    """Rule resolution and tree evaluation events."""
    return domain_logger("engine")
