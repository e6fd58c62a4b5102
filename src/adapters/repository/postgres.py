"""
PostgreSQL repository adapter - Implements CustomerRepository protocol.

This module provides the PostgreSQL implementation of the domain's
repository port using psycopg3 with raw SQL.

Concurrency Design - Conditional Writes:
----------------------------------------
Every state transition is a single statement whose WHERE clause encodes
the precondition, so the database, not the application, arbitrates races:

1. **create()**: INSERT ... ON CONFLICT (email) DO NOTHING. The UNIQUE
   constraint on email guarantees one row per address; the losing insert
   returns no row instead of raising.

2. **refresh_pending_signup() / mark_email_verified()**: guarded by
   ``is_email_verified = FALSE`` so a verified row is never rewritten and
   the verified flag never reverts.

3. **complete_password_reset()**: guarded by the reset token itself, so
   one reset token can change the password at most once.

Expiry comparisons use the timestamp passed in by the service (its clock),
not the database's NOW(), so the whole lifecycle shares one notion of time.
"""

import logging
from datetime import datetime
from pathlib import Path
from uuid import UUID

from psycopg_pool import ConnectionPool

from src.domain.ports import Customer

logger = logging.getLogger(__name__)

_COLUMNS = """
    id, email, name, password_hash, is_email_verified,
    email_verification_token, email_verification_expires,
    password_reset_token, password_reset_expires,
    created_at, updated_at
"""


def _to_customer(row: tuple | None) -> Customer | None:
    if row is None:
        return None
    return Customer(
        id=str(row[0]),
        email=row[1],
        name=row[2],
        password_hash=row[3],
        is_email_verified=row[4],
        email_verification_token=row[5],
        email_verification_expires=row[6],
        password_reset_token=row[7],
        password_reset_expires=row[8],
        created_at=row[9],
        updated_at=row[10],
    )


class PostgresCustomerRepository:
    """
    Implements CustomerRepository protocol via psycopg3.

    Uses structural subtyping - no explicit inheritance from Protocol.
    All SQL uses parameterized queries for security.
    """

    def __init__(self, pool: ConnectionPool) -> None:
        """
        Initialize repository with connection pool.

        Args:
            pool: psycopg3 ConnectionPool for database connections
        """
        self._pool = pool

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

        Returns None (not an exception) when the email already exists,
        including when a concurrent request inserted it first.
        """
        sql = f"""
            INSERT INTO customers (
                email, name, password_hash,
                email_verification_token, email_verification_expires
            )
            VALUES (%s, %s, %s, %s, %s)
            ON CONFLICT (email) DO NOTHING
            RETURNING {_COLUMNS}
        """
        params = (email, name, password_hash, verification_token, verification_expires)
        return self._fetch_one(sql, params)

    def find_by_email(self, email: str) -> Customer | None:
        sql = f"SELECT {_COLUMNS} FROM customers WHERE email = %s"
        return self._fetch_one(sql, (email,))

    def find_by_id(self, customer_id: str) -> Customer | None:
        try:
            key = UUID(customer_id)
        except ValueError:
            return None
        sql = f"SELECT {_COLUMNS} FROM customers WHERE id = %s"
        return self._fetch_one(sql, (key,))

    def find_by_reset_token(self, token: str, now: datetime) -> Customer | None:
        sql = f"""
            SELECT {_COLUMNS} FROM customers
            WHERE password_reset_token = %s
              AND password_reset_expires > %s
        """
        return self._fetch_one(sql, (token, now))

    def refresh_pending_signup(
        self,
        email: str,
        name: str,
        password_hash: str,
        verification_token: str,
        verification_expires: datetime,
    ) -> Customer | None:
        """Rewrite a pending signup; verified rows are left untouched."""
        sql = f"""
            UPDATE customers
            SET name = %s,
                password_hash = %s,
                email_verification_token = %s,
                email_verification_expires = %s,
                updated_at = NOW()
            WHERE email = %s AND is_email_verified = FALSE
            RETURNING {_COLUMNS}
        """
        params = (name, password_hash, verification_token, verification_expires, email)
        return self._fetch_one(sql, params)

    def mark_email_verified(self, customer_id: str) -> Customer | None:
        sql = f"""
            UPDATE customers
            SET is_email_verified = TRUE,
                email_verification_token = NULL,
                email_verification_expires = NULL,
                updated_at = NOW()
            WHERE id = %s AND is_email_verified = FALSE
            RETURNING {_COLUMNS}
        """
        return self._fetch_one(sql, (UUID(customer_id),))

    def set_password_reset(self, customer_id: str, token: str, expires: datetime) -> None:
        sql = """
            UPDATE customers
            SET password_reset_token = %s,
                password_reset_expires = %s,
                updated_at = NOW()
            WHERE id = %s
        """
        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, (token, expires, UUID(customer_id)))
            conn.commit()

    def complete_password_reset(
        self, customer_id: str, token: str, password_hash: str
    ) -> Customer | None:
        sql = f"""
            UPDATE customers
            SET password_hash = %s,
                password_reset_token = NULL,
                password_reset_expires = NULL,
                updated_at = NOW()
            WHERE id = %s AND password_reset_token = %s
            RETURNING {_COLUMNS}
        """
        return self._fetch_one(sql, (password_hash, UUID(customer_id), token))

    def _fetch_one(self, sql: str, params: tuple) -> Customer | None:
        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, params)
            row = cursor.fetchone()
            conn.commit()
        return _to_customer(row)


def run_migrations(pool: ConnectionPool) -> None:
    """
    Execute all SQL migration files from the migrations directory.

    Migrations are executed in sorted order (alphabetically by filename).
    Each migration should be idempotent (use IF NOT EXISTS, etc.).

    Args:
        pool: psycopg3 ConnectionPool instance
    """
    # Structure: src/adapters/repository/postgres.py -> migrations/
    migrations_dir = Path(__file__).parent.parent.parent.parent / "migrations"

    if not migrations_dir.exists():
        logger.warning("Migrations directory not found: %s", migrations_dir)
        return

    sql_files = sorted(migrations_dir.glob("*.sql"))

    if not sql_files:
        logger.info("No migration files found")
        return

    logger.info("Running %d migration(s)", len(sql_files))

    for sql_file in sql_files:
        logger.info("Executing migration: %s", sql_file.name)
        try:
            sql_content = sql_file.read_text()

            with pool.connection() as conn:
                conn.execute(sql_content)

            logger.info("Migration complete: %s", sql_file.name)
        except Exception as e:
            logger.error("Migration failed: %s - %s", sql_file.name, e)
            raise RuntimeError(f"Database migration failed: {sql_file.name}") from e
