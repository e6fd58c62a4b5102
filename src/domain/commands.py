"""
Commands - Typed requests for the credential lifecycle service.

The HTTP boundary receives a string ``action``; it is converted to a
CustomerAction once, and from then on each request is one of a closed
set of frozen command dataclasses.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from .exceptions import ValidationError


class CustomerAction(str, Enum):
    """Action discriminator accepted by POST /auth/customer."""

    SIGN_UP = "signup"
    SIGN_IN = "signin"
    VERIFY_EMAIL = "verify-email"
    FORGOT_PASSWORD = "forgot-password"
    RESET_PASSWORD = "reset-password"
    VERIFY_TOKEN = "verify-token"


@dataclass(frozen=True)
class SignUp:
    name: str | None
    email: str | None
    password: str | None


@dataclass(frozen=True)
class SignIn:
    email: str | None
    password: str | None


@dataclass(frozen=True)
class VerifyEmail:
    email: str | None
    code: str | None


@dataclass(frozen=True)
class ForgotPassword:
    email: str | None


@dataclass(frozen=True)
class ResetPassword:
    token: str | None
    password: str | None


@dataclass(frozen=True)
class VerifySession:
    token: str | None


Command = SignUp | SignIn | VerifyEmail | ForgotPassword | ResetPassword | VerifySession


def build_command(
    action: str | None, fields: Mapping[str, Any], bearer_token: str | None = None
) -> Command:
    """
    Build a command from a raw action string and request fields.

    Field presence is not checked here; each operation validates its own
    inputs so that it stays independently testable.

    Raises:
        ValidationError: If the action is missing or unknown
    """
    try:
        parsed = CustomerAction(action)
    except ValueError:
        raise ValidationError("Invalid action") from None

    if parsed is CustomerAction.SIGN_UP:
        return SignUp(fields.get("name"), fields.get("email"), fields.get("password"))
    if parsed is CustomerAction.SIGN_IN:
        return SignIn(fields.get("email"), fields.get("password"))
    if parsed is CustomerAction.VERIFY_EMAIL:
        return VerifyEmail(fields.get("email"), fields.get("code"))
    if parsed is CustomerAction.FORGOT_PASSWORD:
        return ForgotPassword(fields.get("email"))
    if parsed is CustomerAction.RESET_PASSWORD:
        return ResetPassword(fields.get("token"), fields.get("password"))
    return VerifySession(bearer_token)
