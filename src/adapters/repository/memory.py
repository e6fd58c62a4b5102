"""
In-memory repository adapter - Implements CustomerRepository protocol.

Process-local storage for development and tests. A single lock makes
each method atomic, giving the same conditional-write guarantees as the
PostgreSQL adapter within one process.
"""

import threading
import uuid
from dataclasses import replace
from datetime import datetime

from src.domain.clock import SystemClock
from src.domain.ports import Clock, Customer


class InMemoryCustomerRepository:
    """
    Implements CustomerRepository protocol with dictionaries.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def __init__(self, clock: Clock | None = None) -> None:
        self._clock = clock or SystemClock()
        self._lock = threading.Lock()
        self._by_id: dict[str, Customer] = {}
        self._id_by_email: dict[str, str] = {}

    def create(
        self,
        email: str,
        name: str,
        password_hash: str,
        verification_token: str,
        verification_expires: datetime,
    ) -> Customer | None:
        with self._lock:
            if email in self._id_by_email:
                return None
            now = self._clock.now()
            customer = Customer(
                id=str(uuid.uuid4()),
                email=email,
                name=name,
                password_hash=password_hash,
                email_verification_token=verification_token,
                email_verification_expires=verification_expires,
                created_at=now,
                updated_at=now,
            )
            self._by_id[customer.id] = customer
            self._id_by_email[email] = customer.id
            return customer

    def find_by_email(self, email: str) -> Customer | None:
        with self._lock:
            customer_id = self._id_by_email.get(email)
            return self._by_id.get(customer_id) if customer_id else None

    def find_by_id(self, customer_id: str) -> Customer | None:
        with self._lock:
            return self._by_id.get(customer_id)

    def find_by_reset_token(self, token: str, now: datetime) -> Customer | None:
        with self._lock:
            for customer in self._by_id.values():
                if (
                    customer.password_reset_token == token
                    and customer.password_reset_expires is not None
                    and customer.password_reset_expires > now
                ):
                    return customer
            return None

    def refresh_pending_signup(
        self,
        email: str,
        name: str,
        password_hash: str,
        verification_token: str,
        verification_expires: datetime,
    ) -> Customer | None:
        with self._lock:
            customer_id = self._id_by_email.get(email)
            customer = self._by_id.get(customer_id) if customer_id else None
            if customer is None or customer.is_email_verified:
                return None
            return self._save(
                customer,
                name=name,
                password_hash=password_hash,
                email_verification_token=verification_token,
                email_verification_expires=verification_expires,
            )

    def mark_email_verified(self, customer_id: str) -> Customer | None:
        with self._lock:
            customer = self._by_id.get(customer_id)
            if customer is None or customer.is_email_verified:
                return None
            return self._save(
                customer,
                is_email_verified=True,
                email_verification_token=None,
                email_verification_expires=None,
            )

    def set_password_reset(self, customer_id: str, token: str, expires: datetime) -> None:
        with self._lock:
            customer = self._by_id.get(customer_id)
            if customer is not None:
                self._save(customer, password_reset_token=token, password_reset_expires=expires)

    def complete_password_reset(
        self, customer_id: str, token: str, password_hash: str
    ) -> Customer | None:
        with self._lock:
            customer = self._by_id.get(customer_id)
            if customer is None or customer.password_reset_token != token:
                return None
            return self._save(
                customer,
                password_hash=password_hash,
                password_reset_token=None,
                password_reset_expires=None,
            )

    def _save(self, customer: Customer, **changes: object) -> Customer:
        # Caller holds the lock
        updated = replace(customer, updated_at=self._clock.now(), **changes)
        self._by_id[updated.id] = updated
        return updated
