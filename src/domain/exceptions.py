"""
Domain exceptions - Semantic error types for the credential lifecycle.

This module defines domain-specific exceptions that communicate
business rule violations without leaking infrastructure details.
Each exception carries a message that is safe to show to the caller;
the HTTP layer decides which status code it maps to.
"""


class CustomerAuthError(Exception):
    """Base class for credential lifecycle domain errors."""

    default_message = "Request could not be processed"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)

    @property
    def message(self) -> str:
        return str(self.args[0])


class ValidationError(CustomerAuthError):
    """Missing or malformed input."""

    default_message = "Invalid request"


class ConflictError(CustomerAuthError):
    """Email already belongs to a verified account."""

    default_message = "Email already registered"


class AuthError(CustomerAuthError):
    """Bad credentials or bad session token."""

    default_message = "Invalid credentials"


class ForbiddenError(CustomerAuthError):
    """Credentials are correct but the email is not verified yet."""

    default_message = "Please verify your email address first"


class NotFoundError(CustomerAuthError):
    """No customer for the given email or session identity."""

    default_message = "Customer not found"


class StateError(CustomerAuthError):
    """Operation not allowed in the customer's current state."""

    default_message = "Email already verified"


class ExpiredError(CustomerAuthError):
    """Verification code is past its expiry."""

    default_message = "Verification code expired"


class MismatchError(CustomerAuthError):
    """Verification code does not match the outstanding one."""

    default_message = "Invalid verification code"


class InvalidTokenError(CustomerAuthError):
    """Reset token unknown or expired (deliberately indistinguishable)."""

    default_message = "Invalid or expired reset token"
