"""
Adversarial tests for timing oracle attack prevention.

Verifies that sign-in failure modes have statistically similar response
times, preventing attackers from inferring account existence through
timing analysis.

Security rationale:
- Timing oracle attacks measure response time differences to infer secrets
- "Email not found" skips the stored hash entirely, so without care it
  answers far faster than "password invalid"
- Our defense: run one bcrypt verification of the same cost on every
  sign-in path, including non-existent emails
- forgot-password only sends mail for real accounts, so delivery is
  queued and never runs inside the request
"""

import statistics
import time
from datetime import datetime, timezone
from unittest.mock import Mock

import pytest

from src.adapters.repository.memory import InMemoryCustomerRepository
from src.domain.credentials import CustomerAuthService
from src.domain.exceptions import AuthError, ForbiddenError
from src.domain.hashing import PasswordHasher
from src.domain.sessions import SessionSigner

CODE_EXPIRES = datetime(2030, 1, 1, tzinfo=timezone.utc)


@pytest.mark.adversarial
class TestTimingAttacks:
    """
    Verify constant-time behavior prevents timing oracle attacks.

    These tests measure response times for different failure scenarios
    and verify they are statistically indistinguishable.
    """

    # Number of measurements per scenario for statistical significance
    ITERATIONS = 15

    # Maximum allowed difference in median times
    MAX_VARIANCE_RATIO = 0.30

    def measure_sign_in(self, service: CustomerAuthService, email: str, password: str) -> float:
        """Measure execution time for a single failing sign_in call."""
        start = time.perf_counter()
        with pytest.raises((AuthError, ForbiddenError)):
            service.sign_in(email, password)
        return time.perf_counter() - start

    def assert_timing_similar(
        self,
        times1: list[float],
        times2: list[float],
        label1: str,
        label2: str,
    ) -> None:
        """Assert two timing distributions are statistically similar."""
        median1 = statistics.median(times1)
        median2 = statistics.median(times2)

        # Calculate ratio of difference to max
        ratio = abs(median1 - median2) / max(median1, median2)

        assert ratio < self.MAX_VARIANCE_RATIO, (
            f"Timing difference too large between {label1} and {label2}: "
            f"{ratio:.1%} (threshold: {self.MAX_VARIANCE_RATIO:.0%})\n"
            f"  {label1}: median={median1:.4f}s, stdev={statistics.stdev(times1):.4f}s\n"
            f"  {label2}: median={median2:.4f}s, stdev={statistics.stdev(times2):.4f}s"
        )

    def create_customers(
        self,
        repository: InMemoryCustomerRepository,
        hasher: PasswordHasher,
        prefix: str,
        password: str,
        verified: bool,
        count: int,
    ) -> list[str]:
        """Create customers directly in the repository, sharing one hash."""
        emails = [f"{prefix}{i}@example.com" for i in range(count)]
        password_hash = hasher.hash(password)
        for email in emails:
            customer = repository.create(email, "Timing", password_hash, "123456", CODE_EXPIRES)
            if verified:
                repository.mark_email_verified(customer.id)
        return emails

    def test_dummy_hash_matches_configured_cost(self, hasher: PasswordHasher) -> None:
        """The throwaway hash costs exactly as much as a real one."""
        real = hasher.hash("password123")
        hasher.verify_dummy("warm-up")

        assert hasher._dummy_hash[:7] == real[:7] == f"$2b${hasher.cost}$"

    def test_nonexistent_email_timing_similar_to_wrong_password(
        self,
        service: CustomerAuthService,
        repository: InMemoryCustomerRepository,
        hasher: PasswordHasher,
    ) -> None:
        """
        Non-existent email timing should be similar to valid email with wrong password.

        This is the primary timing oracle attack: comparing "email not found"
        vs "email exists but password wrong" to enumerate valid emails.
        """
        emails = self.create_customers(
            repository, hasher, "valid", "password123", verified=True, count=self.ITERATIONS
        )
        # Build the dummy hash before measuring
        hasher.verify_dummy("warm-up")

        nonexistent_times = [
            self.measure_sign_in(service, f"nonexist{i}@example.com", "wrong-password")
            for i in range(self.ITERATIONS)
        ]
        wrong_password_times = [
            self.measure_sign_in(service, emails[i], "wrong-password")
            for i in range(self.ITERATIONS)
        ]

        self.assert_timing_similar(
            nonexistent_times,
            wrong_password_times,
            "nonexistent_email",
            "valid_email_wrong_password",
        )

    def test_unverified_timing_similar_to_wrong_password(
        self,
        service: CustomerAuthService,
        repository: InMemoryCustomerRepository,
        hasher: PasswordHasher,
    ) -> None:
        """
        Correct password on an unverified account costs the same as a wrong one.

        Both paths perform exactly one bcrypt verification before answering.
        """
        unverified = self.create_customers(
            repository, hasher, "pending", "password123", verified=False, count=self.ITERATIONS
        )
        verified = self.create_customers(
            repository, hasher, "valid", "password123", verified=True, count=self.ITERATIONS
        )

        unverified_times = [
            self.measure_sign_in(service, unverified[i], "password123")
            for i in range(self.ITERATIONS)
        ]
        wrong_password_times = [
            self.measure_sign_in(service, verified[i], "wrong-password")
            for i in range(self.ITERATIONS)
        ]

        self.assert_timing_similar(
            unverified_times,
            wrong_password_times,
            "unverified_correct_password",
            "verified_wrong_password",
        )

    def test_forgot_password_timing_independent_of_mail_delivery(
        self,
        repository: InMemoryCustomerRepository,
        hasher: PasswordHasher,
        signer: SessionSigner,
        clock,
    ) -> None:
        """
        A slow mail server does not make known emails answer slower.

        Attack scenario: time forgot-password for candidate emails; only real
        accounts trigger an SMTP exchange.
        """
        delivery_seconds = 0.3
        slow_sender = Mock()
        slow_sender.send_reset_password_email.side_effect = lambda *args: time.sleep(
            delivery_seconds
        )
        queued: list = []
        service = CustomerAuthService(
            repository=repository,
            email_sender=slow_sender,
            hasher=hasher,
            signer=signer,
            clock=clock,
            defer_email=lambda func, *args: queued.append((func, args)),
        )
        emails = self.create_customers(
            repository, hasher, "valid", "password123", verified=True, count=self.ITERATIONS
        )

        def measure_forgot(email: str) -> float:
            start = time.perf_counter()
            service.forgot_password(email)
            return time.perf_counter() - start

        known_times = [measure_forgot(email) for email in emails]
        unknown_times = [
            measure_forgot(f"nonexist{i}@example.com") for i in range(self.ITERATIONS)
        ]

        assert max(known_times) < delivery_seconds / 3, (
            f"known-email forgot-password waited on delivery: max={max(known_times):.4f}s"
        )
        assert abs(statistics.median(known_times) - statistics.median(unknown_times)) < 0.05
        assert len(queued) == self.ITERATIONS

        func, args = queued[0]
        func(*args)
        slow_sender.send_reset_password_email.assert_called_once()
