"""Error and action-result rendering shared by all endpoints."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from campus_board.core.errors import DomainError, ValidationFailedError
from campus_board.schemas.common import ActionResult, ErrorResponse

logger = logging.getLogger(__name__)


def validation_details(errors: list[Any]) -> list[dict[str, Any]]:
    """Reduce pydantic error dicts to JSON-safe field-level entries."""
    return [
        {"loc": list(error.get("loc", ())), "msg": error.get("msg", ""), "type": error.get("type")}
        for error in errors
    ]


def validation_failed(exc: ValidationError) -> ValidationFailedError:
    return ValidationFailedError(details=validation_details(exc.errors()))


def error_response(exc: DomainError) -> JSONResponse:
    body = ErrorResponse(error=exc.message, details=exc.details)
    return JSONResponse(status_code=exc.status_code, content=body.model_dump(exclude_none=True))


def action_failure(exc: DomainError) -> JSONResponse:
    """Render a failed form-style action as ``{"success": false, "error": ...}``."""
    body = ActionResult(success=False, error=exc.message)
    return JSONResponse(status_code=exc.status_code, content=body.model_dump(exclude_none=True))


async def _domain_error_handler(_request: Request, exc: DomainError) -> JSONResponse:
    return error_response(exc)


async def _request_validation_handler(
    _request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    return error_response(ValidationFailedError(details=validation_details(list(exc.errors()))))


async def _storage_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error("Unhandled storage error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install the handlers that keep every failure a structured response."""
    app.add_exception_handler(DomainError, _domain_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, _request_validation_handler)  # type: ignore[arg-type]
    app.add_exception_handler(SQLAlchemyError, _storage_error_handler)  # type: ignore[arg-type]
