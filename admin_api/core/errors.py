"""
admin_api/core/errors.py

Exception handlers that render every failure as the shared envelope
{"success": false, "error": "..."}.

  HTTPException            → its own status, detail as the error text
  RequestValidationError   → 400
  botocore ClientError /
  BotoCoreError / anything → 500 "Internal server error" (logged with traceback)

Internal details are logged, never returned to the caller.
"""

from __future__ import annotations

import logging

from botocore.exceptions import BotoCoreError, ClientError
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from admin_api.models.user import Envelope

logger = logging.getLogger(__name__)

INTERNAL_ERROR = "Internal server error"

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)


def error_response(
    status_code: int, message: str, headers: dict[str, str] | None = None
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=Envelope(success=False, error=message).model_dump(exclude_none=True),
        headers=headers,
    )


async def handle_http_exception(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    return error_response(exc.status_code, str(exc.detail), getattr(exc, "headers", None))


async def handle_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    logger.info("Invalid request to %s %s: %s", request.method, request.url.path, exc.errors())
    return error_response(status.HTTP_400_BAD_REQUEST, "Invalid request")


async def handle_internal_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error("%s %s failed", request.method, request.url.path, exc_info=exc)
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(ClientError, handle_internal_error)
    app.add_exception_handler(BotoCoreError, handle_internal_error)
    # Last resort; Starlette routes this one through ServerErrorMiddleware
    app.add_exception_handler(Exception, handle_internal_error)
