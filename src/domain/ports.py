"""
Port interfaces - Protocol definitions for infrastructure abstraction.

This module defines the customer record shape and the interfaces (ports)
that the domain requires from infrastructure. Adapters implement these
protocols through structural subtyping.
"""

from dataclasses import dataclass, fields
from datetime import datetime
from typing import Protocol


@dataclass(frozen=True)
class CustomerProfile:
    """
    Outward-facing view of a customer.

    Identical to Customer minus the password hash. The HTTP layer narrows
    this further so that neither token leaves the process.
    """

    id: str
    email: str
    name: str
    is_email_verified: bool
    email_verification_token: str | None = None
    email_verification_expires: datetime | None = None
    password_reset_token: str | None = None
    password_reset_expires: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True)
class Customer:
    """
    Persisted customer record.

    Invariants maintained by the service and the storage constraints:
    - email is stripped and lowercased, and unique
    - is_email_verified implies both verification fields are None
    - every token field is None exactly when its expiry is None
    """

    id: str
    email: str
    name: str
    password_hash: str
    is_email_verified: bool = False
    email_verification_token: str | None = None
    email_verification_expires: datetime | None = None
    password_reset_token: str | None = None
    password_reset_expires: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def to_profile(self) -> CustomerProfile:
        """Strip the password hash."""
        values = {f.name: getattr(self, f.name) for f in fields(CustomerProfile)}
        return CustomerProfile(**values)


class Clock(Protocol):
    """Port interface for the current time (timezone-aware UTC)."""

    def now(self) -> datetime: ...


class CustomerRepository(Protocol):
    """
    Port interface for customer persistence.

    Every state transition is a conditional write so that concurrent
    requests cannot violate the invariants: the storage decides, the
    service reacts to the outcome.
    """

    def create(
        self,
        email: str,
        name: str,
        password_hash: str,
        verification_token: str,
        verification_expires: datetime,
    ) -> Customer | None:
        """
        Atomically create an unverified customer.

        Returns:
            The new Customer, or None if the email is already taken
        """
        ...

    def find_by_email(self, email: str) -> Customer | None:
        """Look up a customer by normalized email."""
        ...

    def find_by_id(self, customer_id: str) -> Customer | None:
        """Look up a customer by id. Unknown or malformed ids return None."""
        ...

    def find_by_reset_token(self, token: str, now: datetime) -> Customer | None:
        """Look up the customer holding this reset token, if it expires after now."""
        ...

    def refresh_pending_signup(
        self,
        email: str,
        name: str,
        password_hash: str,
        verification_token: str,
        verification_expires: datetime,
    ) -> Customer | None:
        """
        Overwrite name, password hash and verification code of an unverified customer.

        Returns:
            The updated Customer, or None if no unverified customer has this email
        """
        ...

    def mark_email_verified(self, customer_id: str) -> Customer | None:
        """
        Flip an unverified customer to verified and clear the verification pair.

        Returns:
            The updated Customer, or None if the customer was already verified
        """
        ...

    def set_password_reset(self, customer_id: str, token: str, expires: datetime) -> None:
        """Store a reset token, replacing any outstanding one."""
        ...

    def complete_password_reset(
        self, customer_id: str, token: str, password_hash: str
    ) -> Customer | None:
        """
        Replace the password hash and clear the reset pair.

        Only applies while the stored reset token is still ``token``.

        Returns:
            The updated Customer, or None if the token was consumed or replaced
        """
        ...


class EmailSender(Protocol):
    """Port interface for email delivery."""

    def send_verification_email(self, email: str, code: str, name: str) -> None:
        """
        Send the email verification code.

        Args:
            email: Recipient email address
            code: 6-digit verification code
            name: Customer display name
        """
        ...

    def send_reset_password_email(self, email: str, token: str, name: str) -> None:
        """
        Send a password reset link embedding the reset token.

        Args:
            email: Recipient email address
            token: 64-character hex reset token
            name: Customer display name
        """
        ...
