"""FastAPI exception handlers for the schedule service.

Every failure leaves the API as ``{"detail", "code", "errors"?}``:

- loan terms, record columns and calculation settings the calculator rejects
  (``ValidationError`` and its subclasses) -> 422
- accrual dates a period strategy cannot produce (``InvalidArgumentError``) -> 422
- a computed schedule that breaks its balance invariants (``InternalError``) -> 500
"""

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from loan_schedule.domain.errors import DomainError

logger = logging.getLogger(__name__)

STATUS_CODE_MAP: dict[str, int] = {
    "VALIDATION_ERROR": 422,  # HTTP_422_UNPROCESSABLE_CONTENT
    "INVALID_ARGUMENT": 422,
    "INTERNAL_ERROR": status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def _field_errors(exc: DomainError, error_dict: dict[str, Any]) -> list[dict[str, Any]] | None:
    if "errors" in error_dict:
        return error_dict["errors"]
    # single-field errors such as an unknown method or an unusable scale
    field = exc.context.get("field")
    if field:
        return [{"field": field, "message": exc.message, "code": exc.error_code}]
    return None


async def handle_domain_error(request: Request, exc: DomainError) -> JSONResponse:
    """Map a domain error to its status code; unmapped codes become 400.

    Broken schedules are logged at ERROR with their context, since they
    point at a calculator bug rather than at the caller's terms.
    """
    error_dict = exc.to_dict()
    status_code = STATUS_CODE_MAP.get(exc.error_code, status.HTTP_400_BAD_REQUEST)

    if status_code >= 500:
        logger.error(
            "Domain error occurred",
            extra={
                "error_code": exc.error_code,
                "error_message": exc.message,
                "context": exc.context,
                "path": request.url.path,
                "method": request.method,
            },
        )
    else:
        logger.info(
            "Client error",
            extra={
                "error_code": exc.error_code,
                "error_message": exc.message,
                "path": request.url.path,
                "method": request.method,
            },
        )

    response_content: dict[str, Any] = {
        "detail": error_dict.get("message", str(exc)),
        "code": error_dict.get("code", exc.error_code),
    }

    if status_code < 500:
        errors = _field_errors(exc, error_dict)
        if errors:
            response_content["errors"] = errors

    return JSONResponse(status_code=status_code, content=response_content)


async def handle_request_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Schema violations caught by pydantic before a request reaches the calculator.

    Examples:
        - principal="abc" (not a decimal string)
        - term_months=0 (below minimum)
        - interest_period.kind unknown
    """
    errors = []

    for error in exc.errors():
        field_path = ".".join(str(loc) for loc in error["loc"] if loc not in ("body", "query"))

        errors.append(
            {
                "field": field_path,
                "message": error["msg"],
                "code": error["type"],
            }
        )

    logger.info(
        "Request validation error",
        extra={
            "errors": errors,
            "path": request.url.path,
            "method": request.method,
        },
    )

    return JSONResponse(
        status_code=422,  # HTTP_422_UNPROCESSABLE_CONTENT
        content={
            "detail": "Invalid request parameters",
            "code": "VALIDATION_ERROR",
            "errors": errors,
        },
    )


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    """Anything that is not a domain error: logged with traceback, answered with 500."""
    logger.error(
        "Unexpected error occurred",
        exc_info=exc,
        extra={
            "error_type": type(exc).__name__,
            "error_message": str(exc),
            "path": request.url.path,
            "method": request.method,
        },
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "detail": "An unexpected error occurred",
            "code": "INTERNAL_ERROR",
        },
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DomainError, handle_domain_error)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, handle_unexpected_error)

    logger.info("Exception handlers registered successfully")
