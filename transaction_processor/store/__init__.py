"""
Snapshot stores holding the current transaction set.
"""

from transaction_processor.config import Settings
from transaction_processor.core.errors import ConfigurationError

from .base import SnapshotStore
from .connection import DatabaseConnectionPool
from .memory import InMemorySnapshotStore
from .postgres import PostgresSnapshotStore


def create_store(settings: Settings) -> SnapshotStore:
    """
    Build the snapshot store selected by settings.

    Raises:
        ConfigurationError: If the PostgreSQL backend has no password
        StoreUnavailable: If the database cannot be reached to create the table
    """
    if settings.store_backend == "memory":
        return InMemorySnapshotStore()

    if not settings.db_password:
        raise ConfigurationError("DB_PASSWORD is required for the postgres store backend")

    pool = DatabaseConnectionPool(
        host=settings.db_host,
        port=settings.db_port,
        database=settings.db_name,
        user=settings.db_user,
        password=settings.db_password,
        min_size=settings.db_pool_min_size,
        max_size=settings.db_pool_max_size,
    )
    store = PostgresSnapshotStore(pool, snapshot_key=settings.snapshot_key)
    store.ensure_schema()
    return store


__all__ = [
    "SnapshotStore",
    "InMemorySnapshotStore",
    "PostgresSnapshotStore",
    "DatabaseConnectionPool",
    "create_store",
]
