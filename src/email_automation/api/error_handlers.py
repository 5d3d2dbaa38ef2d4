"""
FastAPI exception handlers for structured error responses.

Maps domain exceptions to appropriate HTTP status codes and formats.
"""

import structlog
from fastapi import Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError

from email_automation.models.mail_models import utcnow
from email_automation.orchestration.exceptions import AllProvidersFailed
from email_automation.verification.exceptions import (
    AutomationFailed,
    MailboxError,
    MailboxUnavailable,
    NoVerificationLinkFound,
    VerificationError,
    VerificationTimedOut,
)

logger = structlog.get_logger(__name__)


VERIFICATION_ERRORS = {
    NoVerificationLinkFound: (status.HTTP_422_UNPROCESSABLE_ENTITY, "no_verification_link"),
    AutomationFailed: (status.HTTP_502_BAD_GATEWAY, "automation_failed"),
    MailboxUnavailable: (status.HTTP_503_SERVICE_UNAVAILABLE, "mailbox_unavailable"),
    VerificationTimedOut: (status.HTTP_504_GATEWAY_TIMEOUT, "verification_timed_out"),
}


def _error_content(error: str, message: str, details=None) -> dict:
    content = {
        "success": False,
        "error": error,
        "message": message,
        "timestamp": utcnow().isoformat(),
    }
    if details:
        content["details"] = jsonable_encoder(details)
    return content


async def verification_error_handler(request: Request, exc: VerificationError) -> JSONResponse:
    """
    Handle verification workflow failures.

    Maps each failure kind to its own status:
    no link -> 422, automation failed -> 502, mailbox unavailable -> 503,
    timed out -> 504.

    Args:
        request: FastAPI request
        exc: VerificationError instance

    Returns:
        JSON error response
    """
    status_code, error = VERIFICATION_ERRORS.get(
        type(exc), (status.HTTP_500_INTERNAL_SERVER_ERROR, "verification_failed")
    )
    logger.warning(
        "Verification failed",
        error_type=type(exc).__name__,
        details=exc.details,
    )
    return JSONResponse(
        status_code=status_code,
        content=_error_content(error, exc.message, exc.details),
    )


async def all_providers_failed_handler(request: Request, exc: AllProvidersFailed) -> JSONResponse:
    """
    Handle exhaustion of the provider cascade (thread summaries only).

    Maps to 503 Service Unavailable (temporary failure).
    """
    logger.error(
        "All providers failed",
        operation=exc.operation,
        failures=[f.as_dict() for f in exc.failures],
    )
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content=_error_content(
            "all_providers_failed",
            "No AI provider could complete the request",
            {"operation": exc.operation, "failures": [f.as_dict() for f in exc.failures]},
        ),
    )


async def mailbox_error_handler(request: Request, exc: MailboxError) -> JSONResponse:
    """
    Handle mailbox failures outside the verification workflow (email routes).

    Maps to 503 Service Unavailable.
    """
    logger.error("Mailbox error", error=exc.message)
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content=_error_content("mailbox_unavailable", exc.message),
    )


async def request_validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """
    Handle invalid request bodies, paths and query parameters.

    Maps to 400 Bad Request (client error).
    """
    logger.warning(
        "Invalid request format",
        errors=exc.errors(),
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_error_content("invalid_request", "Request validation failed", exc.errors()),
    )


async def pydantic_validation_error_handler(
    request: Request, exc: PydanticValidationError
) -> JSONResponse:
    """
    Handle Pydantic validation errors raised while building domain models.

    Maps to 400 Bad Request (client error).
    """
    logger.warning(
        "Invalid input",
        errors=exc.errors(),
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_error_content("invalid_request", "Input validation failed", exc.errors()),
    )


async def value_error_handler(request: Request, exc: ValueError) -> JSONResponse:
    """Handle input validation raised by domain code (e.g. an empty thread)."""
    logger.warning("Invalid input", error=str(exc))
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_error_content("invalid_request", str(exc)),
    )


async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Handle unexpected errors.

    Maps to 500 Internal Server Error.

    Args:
        request: FastAPI request
        exc: Exception instance

    Returns:
        JSON error response
    """
    logger.exception(
        "Unexpected error",
        error_type=type(exc).__name__,
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_content("internal_error", "An unexpected error occurred"),
    )


# Exception handler mapping for FastAPI app.add_exception_handler()
EXCEPTION_HANDLERS = {
    VerificationError: verification_error_handler,
    AllProvidersFailed: all_providers_failed_handler,
    MailboxError: mailbox_error_handler,
    RequestValidationError: request_validation_error_handler,
    PydanticValidationError: pydantic_validation_error_handler,
    ValueError: value_error_handler,
    Exception: generic_error_handler,
}
