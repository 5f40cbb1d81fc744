from __future__ import annotations

from http import HTTPStatus
from typing import Any

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from stockroom.core.config import settings
from stockroom.core.logging import get_logger
from stockroom.services.exceptions import (
    AuthenticationError,
    DomainValidationError,
    PermissionDeniedError,
    ResourceNotFoundError,
    ServiceError,
)

logger = get_logger("stockroom.errors")

_SERVICE_STATUS: tuple[tuple[type[ServiceError], int], ...] = (
    (DomainValidationError, 400),
    (AuthenticationError, 401),
    (PermissionDeniedError, 403),
    (ResourceNotFoundError, 404),
)


def _label(status_code: int) -> str:
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return "Error"


def error_response(
    status_code: int,
    message: str,
    *,
    code: str | None = None,
    details: Any = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    body: dict[str, Any] = {"error": _label(status_code), "message": message}
    if code:
        body["code"] = code
    if details is not None:
        body["details"] = jsonable_encoder(details)
    return JSONResponse(status_code=status_code, content=body, headers=headers)


def status_for(exc: ServiceError) -> int:
    for exc_type, status_code in _SERVICE_STATUS:
        if isinstance(exc, exc_type):
            return status_code
    return 400


def _db_error_message(exc: SQLAlchemyError) -> str:
    orig = getattr(exc, "orig", None)
    return str(orig) if orig is not None else str(exc)


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(ServiceError)
    async def handle_service_error(_: Request, exc: ServiceError) -> JSONResponse:
        return error_response(status_for(exc), exc.detail, code=exc.code)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_error(_: Request, exc: StarletteHTTPException) -> JSONResponse:
        return error_response(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(_: Request, exc: RequestValidationError) -> JSONResponse:
        return error_response(400, "Invalid request", code="validation_error", details=exc.errors())

    @app.exception_handler(IntegrityError)
    async def handle_integrity_error(request: Request, exc: IntegrityError) -> JSONResponse:
        orig = getattr(exc, "orig", None)
        code = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None) or "integrity_error"
        logger.warning(
            "Integrity error",
            extra={"path": request.url.path, "method": request.method, "code": code},
        )
        return error_response(400, _db_error_message(exc), code=code)

    @app.exception_handler(SQLAlchemyError)
    async def handle_database_error(request: Request, exc: SQLAlchemyError) -> JSONResponse:
        logger.error(
            "Database error",
            exc_info=exc,
            extra={"path": request.url.path, "method": request.method},
        )
        return error_response(500, _db_error_message(exc), code=getattr(exc, "code", None))

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
        logger.error(
            "Unhandled exception",
            exc_info=exc,
            extra={"path": request.url.path, "method": request.method},
        )
        message = str(exc) if settings.is_development else "Internal server error"
        return error_response(500, message)
