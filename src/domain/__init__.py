"""
Domain layer - Pure business logic with zero framework imports.

This package contains the customer credential lifecycle: the service that
runs signup, verification, sign-in, reset and session checks, plus the
hashing, token and session primitives it uses. It defines its own port
interfaces for infrastructure abstraction, keeping the web framework and
database driver out of the core.
"""

from .commands import CustomerAction, build_command
from .credentials import AuthPolicy, AuthResult, CustomerAuthService
from .exceptions import (
    AuthError,
    ConflictError,
    CustomerAuthError,
    ExpiredError,
    ForbiddenError,
    InvalidTokenError,
    MismatchError,
    NotFoundError,
    StateError,
    ValidationError,
)
from .hashing import PasswordHasher
from .ports import Clock, Customer, CustomerProfile, CustomerRepository, EmailSender
from .sessions import SessionSigner

__all__ = [
    "AuthError",
    "AuthPolicy",
    "AuthResult",
    "Clock",
    "ConflictError",
    "Customer",
    "CustomerAction",
    "CustomerAuthError",
    "CustomerAuthService",
    "CustomerProfile",
    "CustomerRepository",
    "EmailSender",
    "ExpiredError",
    "ForbiddenError",
    "InvalidTokenError",
    "MismatchError",
    "NotFoundError",
    "PasswordHasher",
    "SessionSigner",
    "StateError",
    "ValidationError",
    "build_command",
]
