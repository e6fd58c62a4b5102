"""
Customer credential lifecycle service.

This module contains the core business logic for customer accounts:
signup, email verification, sign-in, password reset and session checks.

Verification sub-lifecycle (forward-only)
=========================================

    unverified (no code) --signup--> unverified (code pending)
    unverified (code pending) --signup again--> unverified (new code pending)
    unverified (code pending) --verify_email--> verified

``verified`` is terminal: a verified customer never loses the flag and
never gets a verification code again.

Reset sub-lifecycle (repeatable)
================================

    no reset pending --forgot_password--> reset pending
    reset pending --forgot_password--> reset pending (new token)
    reset pending --reset_password--> no reset pending

Transitions are applied with conditional writes in the repository, so a
concurrent request that loses a race sees the same error it would have
seen had it arrived second.
"""

import logging
import secrets
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import timedelta

from .clock import SystemClock
from .commands import (
    Command,
    ForgotPassword,
    ResetPassword,
    SignIn,
    SignUp,
    VerifyEmail,
    VerifySession,
)
from .exceptions import (
    AuthError,
    ConflictError,
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
from .tokens import generate_reset_token, generate_verification_code

logger = logging.getLogger(__name__)

ACCOUNT_CREATED_MESSAGE = "Account created! Please check your email for verification code."
CODE_RESENT_MESSAGE = "A new verification code has been sent to your email."
EMAIL_VERIFIED_MESSAGE = "Email verified successfully!"
RESET_REQUESTED_MESSAGE = "If the email exists, you'll receive a password reset link."
PASSWORD_RESET_MESSAGE = "Password reset successfully!"


def run_now(func: Callable[..., None], *args: object) -> None:
    """Default email scheduler: send inline."""
    func(*args)


@dataclass(frozen=True)
class AuthPolicy:
    """Time windows and input rules for the credential lifecycle."""

    verification_ttl: timedelta = timedelta(hours=1)
    reset_ttl: timedelta = timedelta(hours=1)
    min_password_length: int = 6


@dataclass(frozen=True)
class AuthResult:
    """Outcome of a successful operation. Absent parts are None."""

    customer: CustomerProfile | None = None
    token: str | None = None
    message: str | None = None


@dataclass
class CustomerAuthService:
    """
    Domain service for customer credentials.

    All collaborators are injected; nothing is read from the environment
    at call time. Emails go through ``defer_email``, which the HTTP layer
    points at a background task queue so delivery never holds the response.
    """

    repository: CustomerRepository
    email_sender: EmailSender
    hasher: PasswordHasher
    signer: SessionSigner
    clock: Clock = field(default_factory=SystemClock)
    policy: AuthPolicy = field(default_factory=AuthPolicy)
    defer_email: Callable[..., None] = field(default_factory=lambda: run_now)

    def dispatch(self, command: Command) -> AuthResult:
        """Route a command to its operation."""
        if isinstance(command, SignUp):
            return self.sign_up(command.name, command.email, command.password)
        if isinstance(command, SignIn):
            return self.sign_in(command.email, command.password)
        if isinstance(command, VerifyEmail):
            return self.verify_email(command.email, command.code)
        if isinstance(command, ForgotPassword):
            return self.forgot_password(command.email)
        if isinstance(command, ResetPassword):
            return self.reset_password(command.token, command.password)
        if isinstance(command, VerifySession):
            return self.verify_session(command.token)
        raise TypeError(f"Unsupported command: {type(command).__name__}")

    def sign_up(self, name: str | None, email: str | None, password: str | None) -> AuthResult:
        """
        Register a customer, or resend the code to a still-unverified one.

        Returns:
            AuthResult with the customer profile and a message; never a session

        Raises:
            ValidationError: If a field is missing or the password is too short
            ConflictError: If the email belongs to a verified customer
        """
        if not name or not email or not password:
            raise ValidationError("All fields are required")
        self._check_password_length(password)

        normalized_email = self._normalize_email(email)
        password_hash = self.hasher.hash(password)
        code = generate_verification_code()
        expires = self.clock.now() + self.policy.verification_ttl

        customer = self.repository.create(normalized_email, name, password_hash, code, expires)
        message = ACCOUNT_CREATED_MESSAGE
        if customer is None:
            # Email taken: resend if still unverified, otherwise a real conflict
            customer = self.repository.refresh_pending_signup(
                normalized_email, name, password_hash, code, expires
            )
            if customer is None:
                raise ConflictError("Email already registered")
            message = CODE_RESENT_MESSAGE
            logger.info("Verification code reissued for customer %s", customer.id)
        else:
            logger.info("Customer %s created", customer.id)

        self.defer_email(self._send_verification_email, customer.email, code, name)
        return AuthResult(customer=customer.to_profile(), message=message)

    def verify_email(self, email: str | None, code: str | None) -> AuthResult:
        """
        Confirm email ownership with the 6-digit code and open a session.

        Raises:
            ValidationError: If a field is missing or no code is outstanding
            NotFoundError: If no customer has this email
            StateError: If the email is already verified
            ExpiredError: If the code has expired (checked before the code itself)
            MismatchError: If the code is wrong
        """
        if not email or not code:
            raise ValidationError("Email and code are required")

        customer = self.repository.find_by_email(self._normalize_email(email))
        if customer is None:
            raise NotFoundError("Customer not found")
        if customer.is_email_verified:
            raise StateError("Email already verified")
        if not customer.email_verification_token or not customer.email_verification_expires:
            raise ValidationError("No verification code found")
        if self.clock.now() > customer.email_verification_expires:
            raise ExpiredError("Verification code expired")
        if not secrets.compare_digest(
            customer.email_verification_token.encode(), code.encode()
        ):
            raise MismatchError("Invalid verification code")

        verified = self.repository.mark_email_verified(customer.id)
        if verified is None:
            raise StateError("Email already verified")

        logger.info("Customer %s verified email", verified.id)
        return AuthResult(
            customer=verified.to_profile(),
            token=self.signer.issue(verified.id),
            message=EMAIL_VERIFIED_MESSAGE,
        )

    def sign_in(self, email: str | None, password: str | None) -> AuthResult:
        """
        Authenticate a verified customer and open a session.

        Unknown emails and wrong passwords raise the same AuthError; an
        unknown email still costs one bcrypt verification.

        Raises:
            ValidationError: If a field is missing
            AuthError: If the credentials are invalid
            ForbiddenError: If the credentials are valid but the email is unverified
        """
        if not email or not password:
            raise ValidationError("Email and password are required")

        customer = self.repository.find_by_email(self._normalize_email(email))
        if customer is None:
            self.hasher.verify_dummy(password)
            raise AuthError("Invalid credentials")
        if not self.hasher.verify(password, customer.password_hash):
            raise AuthError("Invalid credentials")
        if not customer.is_email_verified:
            raise ForbiddenError("Please verify your email address first")

        return AuthResult(customer=customer.to_profile(), token=self.signer.issue(customer.id))

    def forgot_password(self, email: str | None) -> AuthResult:
        """
        Issue a password reset link if the email belongs to a customer.

        The result is the same whether or not the account exists.

        Raises:
            ValidationError: If the email is missing
        """
        if not email:
            raise ValidationError("Email is required")

        customer = self.repository.find_by_email(self._normalize_email(email))
        if customer is not None:
            token = generate_reset_token()
            expires = self.clock.now() + self.policy.reset_ttl
            self.repository.set_password_reset(customer.id, token, expires)
            logger.info("Password reset requested for customer %s", customer.id)
            self.defer_email(
                self._send_reset_password_email, customer.email, token, customer.name
            )

        return AuthResult(message=RESET_REQUESTED_MESSAGE)

    def reset_password(self, token: str | None, password: str | None) -> AuthResult:
        """
        Replace the password of the customer holding a live reset token.

        Does not open a session; the customer signs in afterwards.

        Raises:
            ValidationError: If a field is missing or the password is too short
            InvalidTokenError: If the token is unknown, expired, or already used
        """
        if not token or not password:
            raise ValidationError("Token and password are required")
        self._check_password_length(password)

        customer = self.repository.find_by_reset_token(token, self.clock.now())
        if customer is None:
            raise InvalidTokenError("Invalid or expired reset token")

        password_hash = self.hasher.hash(password)
        updated = self.repository.complete_password_reset(customer.id, token, password_hash)
        if updated is None:
            raise InvalidTokenError("Invalid or expired reset token")

        logger.info("Password reset completed for customer %s", updated.id)
        return AuthResult(message=PASSWORD_RESET_MESSAGE)

    def verify_session(self, token: str | None) -> AuthResult:
        """
        Resolve a session token to the customer it identifies.

        Raises:
            AuthError: If the token is absent, invalid or expired
            NotFoundError: If the customer no longer exists
        """
        if not token:
            raise AuthError("No token provided")

        customer_id = self.signer.verify(token)
        customer = self.repository.find_by_id(customer_id)
        if customer is None:
            raise NotFoundError("Customer not found")
        return AuthResult(customer=customer.to_profile())

    def _check_password_length(self, password: str) -> None:
        minimum = self.policy.min_password_length
        if len(password) < minimum:
            raise ValidationError(f"Password must be at least {minimum} characters")

    def _normalize_email(self, email: str) -> str:
        """
        Normalize email address for consistent storage and lookup.

        Applies: strip whitespace + lowercase
        """
        return email.strip().lower()

    def _send_verification_email(self, email: str, code: str, name: str) -> None:
        try:
            self.email_sender.send_verification_email(email, code, name)
        except Exception:
            # Account state is already committed; the customer can sign up again to resend
            logger.exception("[EMAIL_ERROR] Verification email to %s failed", email)

    def _send_reset_password_email(self, email: str, token: str, name: str) -> None:
        try:
            self.email_sender.send_reset_password_email(email, token, name)
        except Exception:
            logger.exception("[EMAIL_ERROR] Reset password email to %s failed", email)
