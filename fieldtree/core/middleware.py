"""Request correlation and timing

Binds a correlation id to the logging context of every request, echoes it
in the ``X-Correlation-ID`` response header, and logs one completion event
per request, including the validation verdict when a route was guarded by
``validated(...)`` and let the request through.
"""
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from fieldtree.core.logging import api_logger, bind_context, clear_context, generate_correlation_id

CORRELATION_HEADER = "X-Correlation-ID"

log = api_logger()


def _elapsed_ms(start: float) -> float:
    return round((time.perf_counter() - start) * 1000, 2)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        correlation_id = request.headers.get(CORRELATION_HEADER) or generate_correlation_id()
        clear_context()
        bind_context(correlation_id=correlation_id, method=request.method, path=request.url.path)
        start = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception as exc:
            log.exception("request_failed", error_type=type(exc).__name__, duration_ms=_elapsed_ms(start))
            clear_context()
            raise

        response.headers[CORRELATION_HEADER] = correlation_id
        outcome = getattr(request.state, "validation", None)
        level = log.info if response.status_code < 400 else log.warning
        level(
            "request_completed",
            status=response.status_code,
            duration_ms=_elapsed_ms(start),
            validated=None if outcome is None else outcome.valid,
        )
        clear_context()
        return response
