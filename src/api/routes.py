"""
API routes - Customer credential endpoints.

This module defines the HTTP endpoints:
- POST /auth/customer - Action-discriminated signup, signin, verify-email,
  forgot-password, reset-password and verify-token
- GET /auth/customer - Resolve the bearer session token to its customer

Handlers are plain functions so FastAPI runs the blocking bcrypt and
database work in its threadpool.
"""

import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from src.api.dependencies import get_bearer_token, get_customer_auth_service
from src.api.errors import domain_error_response, internal_error_response
from src.api.models import AuthResponse, CustomerAuthRequest, CustomerOut, ErrorResponse
from src.domain.commands import Command, VerifySession, build_command
from src.domain.credentials import CustomerAuthService
from src.domain.exceptions import CustomerAuthError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["customer-auth"])

_ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Validation error or rejected code/token"},
    401: {"model": ErrorResponse, "description": "Invalid credentials or session"},
    403: {"model": ErrorResponse, "description": "Email not verified"},
    404: {"model": ErrorResponse, "description": "Customer not found"},
    409: {"model": ErrorResponse, "description": "Email already registered"},
    500: {"model": ErrorResponse, "description": "Internal server error"},
}


def _execute(service: CustomerAuthService, command: Command) -> AuthResponse | JSONResponse:
    """
    Run a command and shape the outcome.

    This is the single error boundary: domain errors become their mapped
    status, anything else becomes an opaque 500.
    """
    try:
        result = service.dispatch(command)
    except CustomerAuthError as e:
        return domain_error_response(e)
    except Exception:
        logger.exception("[CUSTOMER_AUTH_ERROR] %s failed", type(command).__name__)
        return internal_error_response()

    customer = CustomerOut.model_validate(result.customer) if result.customer else None
    return AuthResponse(customer=customer, token=result.token, message=result.message)


@router.post(
    "/customer",
    response_model=AuthResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_200_OK,
    responses=_ERROR_RESPONSES,
    summary="Customer credential action",
    description="Single endpoint for the customer credential lifecycle. "
    "The `action` field selects the operation; `verify-token` reads the "
    "`Authorization: Bearer` header.",
)
def customer_auth(
    request_data: CustomerAuthRequest,
    bearer_token: str | None = Depends(get_bearer_token),
    service: CustomerAuthService = Depends(get_customer_auth_service),
) -> AuthResponse | JSONResponse:
    """
    Dispatch a customer credential action.

    - **signup**: name, email, password
    - **signin**: email, password
    - **verify-email**: email, code
    - **forgot-password**: email
    - **reset-password**: token, password
    - **verify-token**: bearer header only
    """
    try:
        command = build_command(
            request_data.action,
            request_data.model_dump(exclude={"action"}),
            bearer_token=bearer_token,
        )
    except CustomerAuthError as e:
        return domain_error_response(e)
    return _execute(service, command)


@router.get(
    "/customer",
    response_model=AuthResponse,
    response_model_exclude_none=True,
    responses={
        401: _ERROR_RESPONSES[401],
        404: _ERROR_RESPONSES[404],
        500: _ERROR_RESPONSES[500],
    },
    summary="Current customer",
    description="Return the customer identified by the `Authorization: Bearer` session token.",
)
def current_customer(
    bearer_token: str | None = Depends(get_bearer_token),
    service: CustomerAuthService = Depends(get_customer_auth_service),
) -> AuthResponse | JSONResponse:
    """Equivalent to POST with ``action=verify-token``."""
    return _execute(service, VerifySession(bearer_token))
