"""Repository adapters - Database implementations."""

from .memory import InMemoryCustomerRepository
from .postgres import PostgresCustomerRepository, run_migrations

__all__ = ["InMemoryCustomerRepository", "PostgresCustomerRepository", "run_migrations"]
