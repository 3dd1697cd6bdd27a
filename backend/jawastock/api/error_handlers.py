"""Error Handlers: map every failure to the JawaStock error envelope.

Invariants:
    - Every error body is {"error": {code, message, category, severity, ...}}
    - JawaStockError subclasses keep their own status: 400 InputValidationError,
      401 AuthenticationError, 403 ForbiddenError, 404 ResourceNotFoundError,
      409 DuplicateKeyError / InvalidTransitionError, 503 DatabaseError
    - Pydantic request errors become 400 VALIDATION_ERROR with the same
      details list InputValidationError emits, so clients parse one shape
    - Anything else is a 500 INTERNAL_ERROR without internals

Design Decisions:
    - Caller refusals (401/403) and missing resources are routine traffic:
      logged at WARNING; 5xx at ERROR with the traceback for the catch-all
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from jawastock.core.errors import ErrorCategory, ErrorSeverity, JawaStockError

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(JawaStockError, handle_marketplace_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)


async def handle_marketplace_error(request: Request, exc: JawaStockError) -> JSONResponse:
    level = logging.ERROR if exc.http_status >= 500 else logging.WARNING
    logger.log(
        level,
        f"{exc.code} on {request.method} {request.url.path}: {exc.message}",
        extra={"error_code": exc.code, "path": request.url.path},
    )
    return JSONResponse(status_code=exc.http_status, content=exc.to_response())


async def handle_request_validation_error(
    request: Request, exc: RequestValidationError,
) -> JSONResponse:
    """Malformed body, path or query parameter rejected by a schema."""
    details = [_field_detail(e) for e in exc.errors()]
    logger.warning(
        f"Rejected request to {request.url.path}: "
        f"{', '.join(d['field'] for d in details)}",
        extra={"error_code": "VALIDATION_ERROR", "path": request.url.path},
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_envelope(
            "VALIDATION_ERROR", "Invalid request data",
            ErrorCategory.VALIDATION, ErrorSeverity.ERROR, details=details,
        ),
    )


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        f"Unhandled {type(exc).__name__} on {request.url.path}",
        exc_info=exc,
        extra={"error_code": "INTERNAL_ERROR", "path": request.url.path},
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_envelope(
            "INTERNAL_ERROR", "An unexpected error occurred",
            ErrorCategory.INTERNAL, ErrorSeverity.CRITICAL,
        ),
    )


def _field_detail(error: dict) -> dict:
    # Drop the "body"/"query" prefix so field names match InputValidationError.field
    loc = [str(part) for part in error["loc"] if part not in ("body", "query", "path")]
    return {
        "field": ".".join(loc) or "request",
        "message": error["msg"],
        "type": error["type"],
    }


def _envelope(
    code: str,
    message: str,
    category: ErrorCategory,
    severity: ErrorSeverity,
    **extra,
) -> dict:
    return {
        "error": {
            "code": code,
            "message": message,
            "category": category.value,
            "severity": severity.value,
            **extra,
        },
    }
