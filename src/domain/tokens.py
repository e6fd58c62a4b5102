"""
Token generation - verification codes and password reset tokens.

Both generators draw from the secrets module (OS CSPRNG). Tokens are
returned as strings so they can be stored and compared verbatim.
"""

import secrets

VERIFICATION_CODE_MIN = 100_000
VERIFICATION_CODE_MAX = 999_999
RESET_TOKEN_BYTES = 32  # 256 bits, 64 hex characters


def generate_verification_code() -> str:
    """
    Generate a 6-digit, human-typeable email verification code.

    Uniform over 100000..999999 inclusive, so the code never has a
    leading zero and is always exactly six characters.
    """
    span = VERIFICATION_CODE_MAX - VERIFICATION_CODE_MIN + 1
    return str(VERIFICATION_CODE_MIN + secrets.randbelow(span))


def generate_reset_token() -> str:
    """Generate a 256-bit hex-encoded password reset token."""
    return secrets.token_hex(RESET_TOKEN_BYTES)
