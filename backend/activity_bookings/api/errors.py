"""
Maps domain errors to HTTP responses.

Every failure is rendered as {"message": ..., "errors": [{"field", "message"}]}.
"""

from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from activity_bookings.core.exceptions import DomainError, FieldError
from activity_bookings.core.logging import get_logger
from activity_bookings.schemas.error import ErrorResponse

logger = get_logger(__name__)


def error_response(status_code: int, message: str, errors: Optional[list[FieldError]] = None) -> JSONResponse:
    body = ErrorResponse(message=message, errors=errors or [])
    return JSONResponse(status_code=status_code, content=body.model_dump())


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    logger.info(
        "domain_error",
        error_type=type(exc).__name__,
        status_code=exc.status_code,
        message=exc.message,
    )
    return error_response(exc.status_code, exc.message, exc.errors)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = []
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ()) if part != "body"]
        errors.append(FieldError(field=".".join(location) or "body", message=error.get("msg", "Invalid value")))
    logger.info("request_validation_failed", errors=len(errors))
    return error_response(status.HTTP_400_BAD_REQUEST, "Validation failed", errors)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled_error", error=str(exc))
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


EXCEPTION_HANDLERS = {
    DomainError: domain_error_handler,
    RequestValidationError: request_validation_handler,
    Exception: unhandled_error_handler,
}


def register_exception_handlers(app: FastAPI) -> None:
    for exception_class, handler in EXCEPTION_HANDLERS.items():
        app.add_exception_handler(exception_class, handler)
