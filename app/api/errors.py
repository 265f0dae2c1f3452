"""Exception handlers rendering every failure as ``{message, errors?}``."""

from __future__ import annotations

import logging
import traceback

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.constants import MSG_INTERNAL_ERROR, MSG_VALIDATION_FAILED
from app.core.errors import AppError, AuthenticationRequired
from app.schemas.response import ApiError, FieldError

logger = logging.getLogger(__name__)


def _error_response(status_code: int, body: ApiError, headers: dict | None = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True), headers=headers)


def _field_name(loc: tuple) -> str:
    # ("body", "email") -> "email"; whole-body errors -> "body"
    parts = [str(p) for p in loc if p != "body"]
    return ".".join(parts) or "body"


def _clean_message(msg: str) -> str:
    return msg.removeprefix("Value error, ")


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the envelope-producing handlers to ``app``."""

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthenticationRequired) else None
        return _error_response(exc.status_code, ApiError(message=exc.message), headers)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        errors = [
            FieldError(field=_field_name(tuple(err.get("loc", ()))), message=_clean_message(err.get("msg", "")))
            for err in exc.errors()
        ]
        return _error_response(400, ApiError(message=MSG_VALIDATION_FAILED, errors=errors))

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404 and exc.detail == "Not Found":
            message = f"Route {request.url.path} not found"
        else:
            message = str(exc.detail)
        return _error_response(exc.status_code, ApiError(message=message), getattr(exc, "headers", None))

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        settings = request.app.state.settings
        detail = None
        if settings.environment == "development":
            detail = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
        return _error_response(500, ApiError(message=MSG_INTERNAL_ERROR, error=detail))
