"""Response envelope and exception handlers for the HTTP layer.

Every response is `{success, data?, error?, timestamp}`. Input errors map to
400 with their message; anything unexpected maps to a generic 500 and is
logged with its traceback, never echoed to the client.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from core.domain.errors import InputError
from core.logging import get_logger

log = get_logger("api")

INTERNAL_ERROR_MESSAGE = "Internal server error"


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def success_response(data: Any, status_code: int = status.HTTP_200_OK) -> JSONResponse:
    return JSONResponse(
        {"success": True, "data": data, "timestamp": _timestamp()},
        status_code=status_code,
    )


def error_response(message: str, status_code: int) -> JSONResponse:
    return JSONResponse(
        {"success": False, "error": message, "timestamp": _timestamp()},
        status_code=status_code,
    )


def internal_error_response(request: Request, exc: Exception) -> JSONResponse:
    log.error(
        "unhandled error on %s %s",
        request.method,
        request.url.path,
        exc_info=(type(exc), exc, exc.__traceback__),
    )
    return error_response(INTERNAL_ERROR_MESSAGE, status.HTTP_500_INTERNAL_SERVER_ERROR)


async def input_error_handler(request: Request, exc: InputError) -> JSONResponse:
    log.info("rejected input on %s: %s", request.url.path, exc)
    return error_response(str(exc), status.HTTP_400_BAD_REQUEST)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return error_response("Invalid request", status.HTTP_400_BAD_REQUEST)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(InputError, input_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, validation_error_handler)  # type: ignore[arg-type]
