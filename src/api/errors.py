"""
Error mapping - Domain exceptions to HTTP responses.

Verification-code failures share one status and one message so the
response does not reveal whether the code was wrong or merely expired.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from src.api.models import ErrorResponse
from src.domain import exceptions as domain_errors

logger = logging.getLogger(__name__)

_CODE_REJECTED_MESSAGE = "Invalid or expired verification code"

_STATUS_BY_ERROR: list[tuple[type[domain_errors.CustomerAuthError], int]] = [
    (domain_errors.ValidationError, status.HTTP_400_BAD_REQUEST),
    (domain_errors.ConflictError, status.HTTP_409_CONFLICT),
    (domain_errors.AuthError, status.HTTP_401_UNAUTHORIZED),
    (domain_errors.ForbiddenError, status.HTTP_403_FORBIDDEN),
    (domain_errors.NotFoundError, status.HTTP_404_NOT_FOUND),
    (domain_errors.StateError, status.HTTP_400_BAD_REQUEST),
    (domain_errors.InvalidTokenError, status.HTTP_400_BAD_REQUEST),
]


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(message=message).model_dump(),
    )


def domain_error_response(error: domain_errors.CustomerAuthError) -> JSONResponse:
    """Translate a domain exception into a low-information JSON error."""
    if isinstance(error, (domain_errors.ExpiredError, domain_errors.MismatchError)):
        return error_response(status.HTTP_400_BAD_REQUEST, _CODE_REJECTED_MESSAGE)

    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(error, error_type):
            return error_response(status_code, error.message)
    return error_response(status.HTTP_400_BAD_REQUEST, error.message)


def internal_error_response() -> JSONResponse:
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed bodies (invalid JSON, wrong field types) are plain 400s."""
    logger.debug("Rejected malformed request to %s: %s", request.url.path, exc.errors())
    return error_response(status.HTTP_400_BAD_REQUEST, "Invalid request body")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, request_validation_handler)
