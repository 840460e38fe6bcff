"""FastAPI Exception Handlers

Field failures render as the structured ``{statusCode, key, errors, values}``
body; every other AppErrorException renders as ``AppError.to_dict()`` with
the code's HTTP status; anything unexpected becomes a 500.
"""
from __future__ import annotations

from typing import NoReturn

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from fieldtree.core.logging import api_logger
from fieldtree.core.middleware import CORRELATION_HEADER

from .builders import internal_error
from .exceptions import AppErrorException, FieldValidationError
from .types import AppError, Result

log = api_logger()

REQUEST_ID_HEADER = "X-Request-ID"


def result_to_response(error: AppError) -> JSONResponse:
    status_code = error.code.http_status
    (log.warning if status_code < 500 else log.error)(
        "error_response",
        error_code=error.code.name,
        category=error.code.category,
        origin=error.context.origin,
        detail=error.message,
    )
    return JSONResponse(status_code=status_code, content=error.to_dict())


async def field_validation_handler(request: Request, exc: FieldValidationError) -> JSONResponse:
    log.info("validation_rejected", failing_fields=sorted(exc.errors))
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def app_error_handler(request: Request, exc: AppErrorException) -> JSONResponse:
    return result_to_response(exc.error.with_context(
        correlation_id=request.headers.get(CORRELATION_HEADER),
        request_id=request.headers.get(REQUEST_ID_HEADER),
    ))


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    log.exception("unhandled_exception", error_type=type(exc).__name__)
    error = internal_error("An unexpected error occurred", origin="unhandled", cause=exc).error
    return result_to_response(error.with_context(correlation_id=request.headers.get(CORRELATION_HEADER)))


def register_error_handlers(app: FastAPI) -> None:
    """Install the handlers; more specific exception classes win."""
    app.add_exception_handler(FieldValidationError, field_validation_handler)
    app.add_exception_handler(AppErrorException, app_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)


def raise_error(error: AppError) -> NoReturn:
    raise AppErrorException(error)


def raise_result(result: Result) -> None:
    """Raise the error of an Err; do nothing for Ok."""
    if result.is_err():
        raise_error(result.unwrap_err())
