"""
Knowledge base error handling.

Maps the application exception hierarchy onto the structured failure
envelope {ok: false, error, details?} with consistent logging.

Dependencies: fastapi, helpdesk.core.exceptions, helpdesk.observability
System role: Exception-to-HTTP translation for API routes
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from helpdesk.core.exceptions import (
    DocumentNotFoundError,
    HelpdeskException,
    ValidationError,
)
from helpdesk.models.common import ErrorResponse
from helpdesk.observability.log_utils import log_exception_with_context

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "An internal error occurred"


def _error_response(status_code: int, error: str, details: dict | None = None) -> JSONResponse:
    body = ErrorResponse(error=error, details=details or None)
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    """Invalid caller input -> 400."""
    logger.warning(
        "Invalid knowledge base request",
        extra={"path": request.url.path, "error": exc.message},
    )
    return _error_response(status.HTTP_400_BAD_REQUEST, exc.message, exc.details)


async def request_validation_error_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """Malformed request body or parameters -> 400."""
    logger.warning(
        "Request validation failed",
        extra={"path": request.url.path, "error": str(exc.errors())},
    )
    return _error_response(
        status.HTTP_400_BAD_REQUEST,
        "Invalid request",
        {"errors": jsonable_errors(exc)},
    )


async def not_found_handler(request: Request, exc: DocumentNotFoundError) -> JSONResponse:
    """Missing document -> 404."""
    logger.warning(
        "Document not found",
        extra={"path": request.url.path, "document_id": exc.details.get("document_id")},
    )
    return _error_response(status.HTTP_404_NOT_FOUND, exc.message, exc.details)


async def helpdesk_error_handler(request: Request, exc: HelpdeskException) -> JSONResponse:
    """Any other application failure -> 500."""
    log_exception_with_context(
        logger,
        "Knowledge base operation failed",
        exc,
        path=request.url.path,
    )
    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, exc.message, exc.details)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Unexpected failure -> 500; the exception text stays in the log only."""
    log_exception_with_context(
        logger,
        "Unexpected failure in knowledge base operation",
        exc,
        path=request.url.path,
    )
    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR_MESSAGE)


def jsonable_errors(exc: RequestValidationError) -> list[dict]:
    """Reduce pydantic error entries to JSON-safe loc/msg pairs."""
    return [
        {"loc": [str(part) for part in error.get("loc", ())], "msg": str(error.get("msg", ""))}
        for error in exc.errors()
    ]


def register_exception_handlers(app: FastAPI) -> None:
    """
    Install the envelope handlers on an application.

    More specific exception classes are matched first by Starlette, so
    ValidationError and DocumentNotFoundError win over HelpdeskException.
    """
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(DocumentNotFoundError, not_found_handler)
    app.add_exception_handler(HelpdeskException, helpdesk_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
