"""
API request and response models.

Pydantic models for FastAPI endpoint validation and OpenAPI schema generation.
Field presence is checked by the domain service so that missing fields
produce the same 400 responses as any other validation failure.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class CustomerAuthRequest(BaseModel):
    """Action-discriminated request body for POST /auth/customer."""

    model_config = ConfigDict(extra="ignore")

    action: str | None = Field(
        default=None,
        description="signup | signin | verify-email | forgot-password | reset-password | verify-token",
    )
    name: str | None = None
    email: str | None = None
    password: str | None = None
    code: str | None = Field(default=None, description="6-digit email verification code")
    token: str | None = Field(default=None, description="Password reset token")

    @field_validator("action", "name", "email", "password", "code", "token")
    @classmethod
    def must_encode_as_utf8(cls, value: str | None) -> str | None:
        """Reject strings with lone surrogates, which cannot be hashed or compared."""
        if value is not None:
            try:
                value.encode("utf-8")
            except UnicodeEncodeError as e:
                raise ValueError("must be valid UTF-8 text") from e
        return value


class CustomerOut(BaseModel):
    """Public customer representation. Never includes the password hash or tokens."""

    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    id: str
    name: str
    email: str
    is_email_verified: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None


class AuthResponse(BaseModel):
    """Response model for successful customer auth operations."""

    success: bool = True
    customer: CustomerOut | None = None
    token: str | None = None
    message: str | None = None


class ErrorResponse(BaseModel):
    """Standard error response model."""

    success: bool = False
    message: str
