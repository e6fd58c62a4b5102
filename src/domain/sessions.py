"""
Session signing - stateless bearer tokens for verified customers.

Sessions are HMAC-signed JWTs (PyJWT) carrying the customer id plus
iat/exp claims. Expiry is checked against the injected clock rather than
PyJWT's own wall-clock check, so tests can move time forward without
sleeping. There is no revocation list: rotating the secret invalidates
every outstanding session.
"""

import logging
from datetime import timedelta

import jwt

from .clock import SystemClock
from .exceptions import AuthError
from .ports import Clock

logger = logging.getLogger(__name__)

CUSTOMER_ID_CLAIM = "customerId"
DEFAULT_SESSION_TTL = timedelta(days=7)


class SessionSigner:
    """Issues and verifies signed, time-limited session tokens."""

    def __init__(
        self,
        secret: str,
        ttl: timedelta = DEFAULT_SESSION_TTL,
        algorithm: str = "HS256",
        clock: Clock | None = None,
    ) -> None:
        if not secret:
            raise ValueError("Session signing secret must not be empty")
        self._secret = secret
        self.ttl = ttl
        self.algorithm = algorithm
        self.clock = clock or SystemClock()

    def issue(self, customer_id: str) -> str:
        """Sign a session token for the given customer."""
        issued_at = self.clock.now()
        payload = {
            CUSTOMER_ID_CLAIM: customer_id,
            "iat": issued_at,
            "exp": issued_at + self.ttl,
        }
        return jwt.encode(payload, self._secret, algorithm=self.algorithm)

    def verify(self, token: str) -> str:
        """
        Verify a session token and return the customer id it binds.

        Raises:
            AuthError: If the token is malformed, tampered with, signed with
                another secret or algorithm, missing claims, or expired
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self.algorithm],
                options={
                    "verify_exp": False,
                    "verify_iat": False,
                    "require": ["exp", "iat", CUSTOMER_ID_CLAIM],
                },
            )
        except jwt.PyJWTError as e:
            logger.debug("Session token rejected: %s", e)
            raise AuthError("Invalid token") from None

        customer_id = payload[CUSTOMER_ID_CLAIM]
        expires_at = payload["exp"]
        if not isinstance(customer_id, str) or not isinstance(expires_at, (int, float)):
            raise AuthError("Invalid token")
        if self.clock.now().timestamp() >= expires_at:
            raise AuthError("Invalid token")
        return customer_id
