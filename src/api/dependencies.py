"""
FastAPI dependencies - Dependency injection factories.

This module provides Depends() factories for injecting
domain services and infrastructure adapters into routes.
"""

from datetime import timedelta
from functools import lru_cache

from fastapi import BackgroundTasks, Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from psycopg_pool import ConnectionPool

from src.adapters.smtp.console import ConsoleEmailSender
from src.adapters.smtp.smtp import SmtpEmailSender
from src.config.settings import get_settings
from src.domain.credentials import AuthPolicy, CustomerAuthService
from src.domain.hashing import PasswordHasher
from src.domain.ports import CustomerRepository, EmailSender
from src.domain.sessions import SessionSigner


def get_pool(request: Request) -> ConnectionPool | None:
    """
    Get connection pool from app state.

    The pool is created during app lifespan startup and stored in app.state.
    It is None when the in-memory storage backend is configured.
    """
    return getattr(request.app.state, "pool", None)


def get_repository(request: Request) -> CustomerRepository:
    """Get the customer repository created during app lifespan startup."""
    return request.app.state.repository


@lru_cache
def get_email_sender() -> EmailSender:
    """Get the configured email sender (singleton)."""
    settings = get_settings()
    if settings.email_backend == "smtp":
        return SmtpEmailSender(
            host=settings.smtp_host,
            port=settings.smtp_port,
            user=settings.smtp_user,
            password=settings.smtp_password,
            sender=settings.smtp_from,
            app_base_url=settings.app_base_url,
        )
    return ConsoleEmailSender(app_base_url=settings.app_base_url)


@lru_cache
def get_password_hasher() -> PasswordHasher:
    """Get bcrypt hasher (singleton, so the timing-safety dummy hash is computed once)."""
    return PasswordHasher(cost=get_settings().bcrypt_cost)


@lru_cache
def get_session_signer() -> SessionSigner:
    """Get session token signer (singleton)."""
    settings = get_settings()
    return SessionSigner(
        secret=settings.jwt_secret,
        ttl=timedelta(seconds=settings.session_ttl_seconds),
        algorithm=settings.jwt_algorithm,
    )


def get_auth_policy() -> AuthPolicy:
    """Get lifecycle time windows and password rules from settings."""
    settings = get_settings()
    return AuthPolicy(
        verification_ttl=timedelta(seconds=settings.verification_ttl_seconds),
        reset_ttl=timedelta(seconds=settings.reset_ttl_seconds),
        min_password_length=settings.min_password_length,
    )


def get_customer_auth_service(
    background_tasks: BackgroundTasks,
    repository: CustomerRepository = Depends(get_repository),
    email_sender: EmailSender = Depends(get_email_sender),
    hasher: PasswordHasher = Depends(get_password_hasher),
    signer: SessionSigner = Depends(get_session_signer),
    policy: AuthPolicy = Depends(get_auth_policy),
) -> CustomerAuthService:
    """
    Create customer auth service with injected dependencies.

    Wires together the repository, email sender, hasher and session
    signer for the domain service. Emails are queued as background tasks
    and sent after the response, so delivery time does not depend on
    whether the account exists.
    """
    return CustomerAuthService(
        repository=repository,
        email_sender=email_sender,
        hasher=hasher,
        signer=signer,
        clock=signer.clock,
        policy=policy,
        defer_email=background_tasks.add_task,
    )


# Bearer token security scheme for OpenAPI documentation.
# auto_error=False so a missing header reaches the service as an AuthError.
bearer_scheme = HTTPBearer(auto_error=False)


def get_bearer_token(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> str | None:
    """Extract the raw session token from an ``Authorization: Bearer`` header."""
    if credentials is None:
        return None
    return credentials.credentials
