"""
Shared test fixtures and configuration.

This module provides pytest fixtures for:
- A frozen, manually advanced clock
- A fast bcrypt hasher and a fixed-secret session signer
- An in-memory repository and a recording email sender
- A fully wired CustomerAuthService
"""

from datetime import datetime, timedelta, timezone
from unittest.mock import Mock

import pytest

from src.adapters.repository.memory import InMemoryCustomerRepository
from src.domain.credentials import CustomerAuthService
from src.domain.hashing import PasswordHasher
from src.domain.sessions import SessionSigner

TEST_SECRET = "test-session-secret-that-is-at-least-32-bytes"


class FrozenClock:
    """Implements Clock protocol with a time that only moves when told to."""

    def __init__(self, start: datetime | None = None) -> None:
        self.current = start or datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc)

    def now(self) -> datetime:
        return self.current

    def advance(self, **kwargs: float) -> None:
        self.current += timedelta(**kwargs)


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock()


@pytest.fixture(scope="session")
def hasher() -> PasswordHasher:
    """Lowest allowed cost keeps the suite fast."""
    return PasswordHasher(cost=10)


@pytest.fixture
def signer(clock: FrozenClock) -> SessionSigner:
    return SessionSigner(secret=TEST_SECRET, clock=clock)


@pytest.fixture
def repository(clock: FrozenClock) -> InMemoryCustomerRepository:
    return InMemoryCustomerRepository(clock=clock)


@pytest.fixture
def email_sender() -> Mock:
    return Mock()


@pytest.fixture
def service(
    repository: InMemoryCustomerRepository,
    email_sender: Mock,
    hasher: PasswordHasher,
    signer: SessionSigner,
    clock: FrozenClock,
) -> CustomerAuthService:
    return CustomerAuthService(
        repository=repository,
        email_sender=email_sender,
        hasher=hasher,
        signer=signer,
        clock=clock,
    )
