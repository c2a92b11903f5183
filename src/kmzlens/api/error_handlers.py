"""
Exception handlers that render every failure as an ErrorResponse body.
"""

import logging
import traceback
from typing import Optional, Union

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError

from kmzlens.core.config import settings
from kmzlens.core.errors import KmzlensException
from kmzlens.models.errors import ErrorDetail, ErrorResponse

logger = logging.getLogger(__name__)


def get_request_id(request: Request) -> Optional[str]:
    """Correlation ID stored on the request by RequestCorrelationMiddleware."""
    return getattr(request.state, "request_id", None)


def _error_json(status_code: int, body: ErrorResponse) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(mode="json", exclude_none=True),
    )


async def kmzlens_exception_handler(
    request: Request, exc: KmzlensException
) -> JSONResponse:
    """
    Render a KmzlensException with its own status code.

    Parse failures (422) and bad uploads (400) arrive here; the error code,
    details and suggestions of the exception are passed through unchanged.
    """
    logger.error(
        f"{type(exc).__name__} on {request.url.path}: {exc}",
        extra={"error_code": exc.error_code, "status_code": exc.status_code},
    )

    body = ErrorResponse(
        error_code=exc.error_code,
        message=exc.message,
        details=exc.details or None,
        request_id=get_request_id(request),
        suggestions=exc.suggestions or None,
    )
    return _error_json(exc.status_code, body)


async def validation_error_handler(
    request: Request, exc: Union[RequestValidationError, PydanticValidationError]
) -> JSONResponse:
    """Render request validation failures, one ErrorDetail per field."""
    errors = [
        ErrorDetail(
            field=".".join(str(part) for part in error.get("loc", ())),
            message=error.get("msg", "Validation error"),
            code=error.get("type", "validation_error"),
        )
        for error in exc.errors()
    ]
    logger.warning(f"Request validation failed on {request.url.path}: {len(errors)} error(s)")

    body = ErrorResponse(
        error_code="VALIDATION_ERROR",
        message="Request validation failed",
        request_id=get_request_id(request),
        suggestions=["Send the archive as multipart/form-data in the 'file' field"],
        errors=errors,
    )
    return _error_json(status.HTTP_422_UNPROCESSABLE_ENTITY, body)


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Render unexpected exceptions; internals are only exposed in development."""
    logger.exception(f"Unhandled {type(exc).__name__} on {request.url.path}")

    details = None
    if settings.environment == "development":
        details = {
            "exception_type": type(exc).__name__,
            "exception_message": str(exc),
            "traceback": traceback.format_exc(),
        }

    body = ErrorResponse(
        error_code="INTERNAL_ERROR",
        message="An unexpected error occurred",
        details=details,
        request_id=get_request_id(request),
    )
    return _error_json(status.HTTP_500_INTERNAL_SERVER_ERROR, body)


def register_error_handlers(app: FastAPI) -> None:
    """Attach all kmzlens exception handlers to an application."""
    app.add_exception_handler(KmzlensException, kmzlens_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(PydanticValidationError, validation_error_handler)
    app.add_exception_handler(Exception, generic_exception_handler)
