"""
Unit tests for domain ports, commands and exceptions.

Tests verify:
- Customer record and its password-free profile
- Action enum and command building
- Exception hierarchy and messages
- Domain purity (zero framework imports)
"""

import json
import subprocess
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path

import pytest

from src.domain.commands import (
    CustomerAction,
    ForgotPassword,
    ResetPassword,
    SignIn,
    SignUp,
    VerifyEmail,
    VerifySession,
    build_command,
)
from src.domain.exceptions import (
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
from src.domain.ports import Customer, CustomerProfile, CustomerRepository, EmailSender

DOMAIN_DIR = Path(__file__).resolve().parents[2] / "src" / "domain"


class TestCustomerProfile:
    """Tests for Customer.to_profile."""

    def test_profile_has_no_password_hash(self) -> None:
        customer = Customer(
            id="c1",
            email="a@x.com",
            name="Amara",
            password_hash="$2b$10$hash",
            email_verification_token="123456",
            email_verification_expires=datetime(2026, 1, 1, tzinfo=timezone.utc),
        )

        profile = customer.to_profile()

        assert isinstance(profile, CustomerProfile)
        assert not hasattr(profile, "password_hash")
        assert "$2b$10$hash" not in repr(profile)

    def test_profile_copies_other_fields(self) -> None:
        expires = datetime(2026, 1, 1, tzinfo=timezone.utc)
        customer = Customer(
            id="c1",
            email="a@x.com",
            name="Amara",
            password_hash="h",
            password_reset_token="ab" * 32,
            password_reset_expires=expires,
        )

        profile = customer.to_profile()

        assert profile.id == "c1"
        assert profile.email == "a@x.com"
        assert profile.name == "Amara"
        assert profile.is_email_verified is False
        assert profile.password_reset_token == "ab" * 32
        assert profile.password_reset_expires == expires

    def test_customer_is_immutable(self) -> None:
        customer = Customer(id="c1", email="a@x.com", name="Amara", password_hash="h")
        with pytest.raises(AttributeError):
            customer.is_email_verified = True  # type: ignore[misc]


class TestCustomerAction:
    """Tests for the action discriminator."""

    def test_is_str_enum(self) -> None:
        assert issubclass(CustomerAction, Enum)
        assert issubclass(CustomerAction, str)

    def test_wire_values(self) -> None:
        assert {a.value for a in CustomerAction} == {
            "signup",
            "signin",
            "verify-email",
            "forgot-password",
            "reset-password",
            "verify-token",
        }

    def test_json_serializable(self) -> None:
        assert json.dumps(CustomerAction.VERIFY_EMAIL) == '"verify-email"'


class TestBuildCommand:
    """Tests for build_command."""

    fields = {
        "name": "Amara",
        "email": "a@x.com",
        "password": "secret1",
        "code": "123456",
        "token": "reset-token",
    }

    @pytest.mark.parametrize(
        ("action", "expected"),
        [
            ("signup", SignUp("Amara", "a@x.com", "secret1")),
            ("signin", SignIn("a@x.com", "secret1")),
            ("verify-email", VerifyEmail("a@x.com", "123456")),
            ("forgot-password", ForgotPassword("a@x.com")),
            ("reset-password", ResetPassword("reset-token", "secret1")),
            ("verify-token", VerifySession("bearer-jwt")),
        ],
    )
    def test_builds_each_action(self, action: str, expected: object) -> None:
        assert build_command(action, self.fields, bearer_token="bearer-jwt") == expected

    def test_missing_fields_become_none(self) -> None:
        assert build_command("signup", {}) == SignUp(None, None, None)

    def test_reset_token_comes_from_body_not_header(self) -> None:
        command = build_command("reset-password", {"token": "body"}, bearer_token="header")
        assert command == ResetPassword("body", None)

    @pytest.mark.parametrize("action", [None, "", "delete-account", "SIGNUP"])
    def test_unknown_action_rejected(self, action: str | None) -> None:
        with pytest.raises(ValidationError) as exc_info:
            build_command(action, {})
        assert exc_info.value.message == "Invalid action"


class TestPortProtocols:
    """Tests for repository and email sender protocols."""

    def test_repository_methods(self) -> None:
        for method in (
            "create",
            "find_by_email",
            "find_by_id",
            "find_by_reset_token",
            "refresh_pending_signup",
            "mark_email_verified",
            "set_password_reset",
            "complete_password_reset",
        ):
            assert hasattr(CustomerRepository, method)

    def test_email_sender_methods(self) -> None:
        assert hasattr(EmailSender, "send_verification_email")
        assert hasattr(EmailSender, "send_reset_password_email")


class TestDomainExceptions:
    """Tests for domain exceptions."""

    @pytest.mark.parametrize(
        "error_type",
        [
            ValidationError,
            ConflictError,
            AuthError,
            ForbiddenError,
            NotFoundError,
            StateError,
            ExpiredError,
            MismatchError,
            InvalidTokenError,
        ],
    )
    def test_inherits_base(self, error_type: type) -> None:
        assert issubclass(error_type, CustomerAuthError)
        assert issubclass(error_type, Exception)

    def test_explicit_message(self) -> None:
        assert ConflictError("Email already registered").message == "Email already registered"

    def test_default_message(self) -> None:
        assert InvalidTokenError().message == "Invalid or expired reset token"
        assert str(AuthError()) == "Invalid credentials"


class TestDomainPurity:
    """Tests for domain purity - zero framework imports."""

    @pytest.mark.parametrize(
        "pattern",
        [
            "from fastapi",
            "import fastapi",
            "from pydantic",
            "import pydantic",
            "from psycopg",
            "import psycopg",
        ],
    )
    def test_no_framework_imports_in_domain(self, pattern: str) -> None:
        result = subprocess.run(
            ["grep", "-r", pattern, str(DOMAIN_DIR)],
            capture_output=True,
            text=True,
        )
        assert result.returncode != 0, f"Framework import found: {result.stdout}"
