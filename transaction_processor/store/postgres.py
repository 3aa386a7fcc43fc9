"""
PostgreSQL-backed snapshot store.

The snapshot lives in a single row keyed by the snapshot key; the rows are
stored as a JSON array of field mappings. JSON (not JSONB) is used so each
mapping keeps the column order of the uploaded file.
"""

import json
import threading
from collections.abc import Iterable
from contextlib import contextmanager

from psycopg import InterfaceError, OperationalError

from transaction_processor.core.errors import StoreUnavailable
from transaction_processor.core.models import RawRecord
from transaction_processor.observability.logger import get_logger
from transaction_processor.observability.metrics import record_store_error
from transaction_processor.utils.validation import sanitize_sql_identifier, validate_snapshot_key

from .base import SnapshotStore
from .connection import DatabaseConnectionPool

logger = get_logger(__name__)


class PostgresSnapshotStore(SnapshotStore):
    """
    Snapshot store shared by every process pointing at the same database.

    replace() is one INSERT ... ON CONFLICT DO UPDATE statement, so other
    sessions see either the previous row or the new one. Writes from this
    process are additionally serialized by a lock.
    """

    def __init__(
        self,
        pool: DatabaseConnectionPool,
        snapshot_key: str = "transactions",
        table_name: str = "ledger_snapshot",
    ):
        """
        Initialize the store.

        Args:
            pool: Database connection pool (opened by the caller or lazily here)
            snapshot_key: Key of the row holding the snapshot
            table_name: Table holding snapshot rows
        """
        self.pool = pool
        self.snapshot_key = validate_snapshot_key(snapshot_key)
        self.table_name = sanitize_sql_identifier(table_name, "table_name")
        self._write_lock = threading.Lock()

    def ensure_schema(self) -> None:
        """Create the snapshot table if it does not exist."""
        with self._guard("ensure_schema"):
            self.pool.execute_command(
                f"""
                CREATE TABLE IF NOT EXISTS {self.table_name} (
                    snapshot_key TEXT PRIMARY KEY,
                    records JSON NOT NULL,
                    record_count INTEGER NOT NULL,
                    updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
                )
                """
            )

    def replace(self, records: Iterable[RawRecord]) -> None:
        rows = [dict(record) for record in records]
        payload = json.dumps(rows)

        query = f"""
            INSERT INTO {self.table_name} (snapshot_key, records, record_count, updated_at)
            VALUES (%s, %s::json, %s, NOW())
            ON CONFLICT (snapshot_key) DO UPDATE SET
                records = EXCLUDED.records,
                record_count = EXCLUDED.record_count,
                updated_at = EXCLUDED.updated_at
        """

        with self._write_lock, self._guard("replace"):
            self.pool.execute_command(query, (self.snapshot_key, payload, len(rows)))

        logger.debug(
            "Snapshot replaced",
            extra={"snapshot_key": self.snapshot_key, "record_count": len(rows)},
        )

    def current(self) -> list[RawRecord]:
        with self._guard("current"):
            rows = self.pool.execute_query(
                f"SELECT records FROM {self.table_name} WHERE snapshot_key = %s",
                (self.snapshot_key,),
            )

        if not rows:
            return []

        records = rows[0]["records"]
        if isinstance(records, str):
            records = json.loads(records)
        return [dict(record) for record in records]

    def clear(self) -> None:
        with self._write_lock, self._guard("clear"):
            self.pool.execute_command(
                f"DELETE FROM {self.table_name} WHERE snapshot_key = %s",
                (self.snapshot_key,),
            )

    def close(self) -> None:
        self.pool.close()

    @contextmanager
    def _guard(self, operation: str):
        """Translate connectivity failures into StoreUnavailable."""
        if not self.pool.is_open:
            try:
                self.pool.open(max_retries=1)
            except OperationalError as e:
                record_store_error(operation)
                raise StoreUnavailable(operation, str(e)) from e

        try:
            yield
        except (OperationalError, InterfaceError) as e:
            record_store_error(operation)
            logger.error(
                f"Snapshot store {operation} failed: {e}",
                extra={"snapshot_key": self.snapshot_key, "store_operation": operation},
            )
            raise StoreUnavailable(operation, str(e)) from e
