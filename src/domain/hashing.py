"""
Password hashing - bcrypt with a configurable cost factor.

bcrypt.checkpw() compares in constant time, so verification does not
leak how much of a candidate matched. verify_dummy() runs the same
amount of work for accounts that do not exist, keeping sign-in response
time independent of account existence.
"""

from functools import cached_property

import bcrypt

MIN_COST = 10
MAX_COST = 14

# bcrypt only reads the first 72 bytes of its input
_BCRYPT_MAX_BYTES = 72


def _encode(plaintext: str) -> bytes:
    return plaintext.encode("utf-8")[:_BCRYPT_MAX_BYTES]


class PasswordHasher:
    """One-way salted password hashing."""

    def __init__(self, cost: int = 12) -> None:
        if not MIN_COST <= cost <= MAX_COST:
            raise ValueError(f"bcrypt cost must be between {MIN_COST} and {MAX_COST}, got {cost}")
        self.cost = cost

    def hash(self, plaintext: str) -> str:
        """Hash a plaintext password with a fresh salt."""
        return bcrypt.hashpw(_encode(plaintext), bcrypt.gensalt(rounds=self.cost)).decode()

    def verify(self, plaintext: str, hashed: str) -> bool:
        """Check a plaintext password against a stored hash."""
        try:
            return bcrypt.checkpw(_encode(plaintext), hashed.encode())
        except ValueError:
            # Malformed stored hash
            return False

    def verify_dummy(self, plaintext: str) -> None:
        """Burn one verification against a throwaway hash of the same cost."""
        bcrypt.checkpw(_encode(plaintext), self._dummy_hash.encode())

    @cached_property
    def _dummy_hash(self) -> str:
        return self.hash("dummy_password_for_timing_safety")
