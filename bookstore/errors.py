"""
HTTP Error Mapping

Turns repository outcomes into HTTP errors and renders every error the API
returns in one envelope:

    {"success": false, "message": "...", "errors": [{"field": ..., "message": ...}]}

Status mapping:
- VALIDATION_FAILED → 400
- DUPLICATE_KEY → 409
- NOT_FOUND → 404
- STORE_UNAVAILABLE → 500 (generic message; store text only in debug mode)
"""

import logging
from typing import Any, TypeVar

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from bookstore.config import Settings
from bookstore.schemas.book import ErrorDetail, ErrorEnvelope
from bookstore.services.outcomes import Outcome, OutcomeKind

logger = logging.getLogger(__name__)

T = TypeVar("T")

STORE_ERROR_MESSAGE = "A database error occurred. Please try again later."


class CatalogHTTPException(StarletteHTTPException):
    """HTTP error carrying field violations and an internal detail."""

    def __init__(
        self,
        status_code: int,
        message: str,
        errors: list[ErrorDetail] | None = None,
        internal_detail: str | None = None,
    ) -> None:
        super().__init__(status_code=status_code, detail=message)
        self.errors = errors or []
        self.internal_detail = internal_detail


def unwrap(outcome: Outcome[T], not_found_message: str = "Book not found") -> T:
    """
    Return the value of a successful outcome or raise the matching HTTP error.
    """
    if outcome.kind is OutcomeKind.OK:
        return outcome.value  # type: ignore[return-value]

    errors = [ErrorDetail(field=v.field, message=v.message) for v in outcome.violations]

    if outcome.kind is OutcomeKind.NOT_FOUND:
        raise CatalogHTTPException(status.HTTP_404_NOT_FOUND, not_found_message)
    if outcome.kind is OutcomeKind.DUPLICATE_KEY:
        raise CatalogHTTPException(
            status.HTTP_409_CONFLICT,
            errors[0].message if errors else "Duplicate key",
            errors=errors,
            internal_detail=outcome.detail,
        )
    if outcome.kind is OutcomeKind.VALIDATION_FAILED:
        raise CatalogHTTPException(status.HTTP_400_BAD_REQUEST, "Validation failed", errors=errors)

    raise CatalogHTTPException(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        STORE_ERROR_MESSAGE,
        internal_detail=outcome.detail,
    )


def error_response(
    status_code: int,
    message: str,
    errors: list[ErrorDetail] | None = None,
    error: str | None = None,
) -> JSONResponse:
    envelope = ErrorEnvelope(message=message, errors=errors or [], error=error)
    return JSONResponse(
        status_code=status_code,
        content=envelope.model_dump(mode="json", exclude_none=True),
    )


def _request_errors(exc: RequestValidationError) -> list[ErrorDetail]:
    details = []
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ()) if part != "body"]
        details.append(ErrorDetail(field=".".join(loc) or "body", message=error["msg"]))
    return details


def register_error_handlers(app: FastAPI, settings: Settings) -> None:
    """Install the envelope-producing exception handlers on ``app``."""

    def debug_detail(detail: Any) -> str | None:
        return str(detail) if settings.debug and detail else None

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request,
        exc: StarletteHTTPException,
    ) -> JSONResponse:
        if isinstance(exc, CatalogHTTPException):
            if exc.status_code >= 500:
                logger.error(f"{request.method} {request.url.path}: {exc.internal_detail}")
            return error_response(
                exc.status_code,
                str(exc.detail),
                errors=exc.errors,
                error=debug_detail(exc.internal_detail),
            )

        # Unknown routes and methods
        message = "Route not found" if exc.status_code == 404 else str(exc.detail)
        return error_response(exc.status_code, message)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        return error_response(
            status.HTTP_400_BAD_REQUEST,
            "Invalid request",
            errors=_request_errors(exc),
        )

    @app.exception_handler(SQLAlchemyError)
    async def sqlalchemy_exception_handler(
        request: Request,
        exc: SQLAlchemyError,
    ) -> JSONResponse:
        logger.error(f"Database error: {exc}")
        return error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            STORE_ERROR_MESSAGE,
            error=debug_detail(exc),
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        logger.error(f"Unhandled error: {exc}", exc_info=True)
        return error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Internal server error",
            error=debug_detail(exc),
        )
