"""
PostgreSQL connection pool management using psycopg3

Backs the shared snapshot store; every connection comes from one pool.
"""
import time
from contextlib import contextmanager

from psycopg import OperationalError
from psycopg.rows import dict_row
from psycopg_pool import ConnectionPool

from transaction_processor.observability.logger import get_logger

logger = get_logger(__name__)


class DatabaseConnectionPool:
    """
    PostgreSQL connection pool manager using psycopg3

    Provides pooled connections with retry on open and automatic
    connection lifecycle management.
    """

    def __init__(
        self,
        host: str = "localhost",
        port: int = 5432,
        database: str = "transactions",
        user: str = "ledger",
        password: str | None = None,
        min_size: int = 1,
        max_size: int = 5,
        timeout: float = 10.0,
    ) -> None:
        """
        Initialize database connection pool

        Args:
            host: Database host
            port: Database port
            database: Database name
            user: Database user
            password: Database password (required)
            min_size: Minimum pool size
            max_size: Maximum pool size
            timeout: Connection and checkout timeout in seconds
        """
        if not password:
            raise ValueError(
                "Database password must be provided. "
                "Set DB_PASSWORD environment variable or pass to constructor."
            )

        self.host = host
        self.port = port
        self.database = database
        self.user = user
        self.min_size = min_size
        self.max_size = max_size
        self.timeout = timeout

        self.conninfo = (
            f"host={host} "
            f"port={port} "
            f"dbname={database} "
            f"user={user} "
            f"password={password} "
            f"connect_timeout={int(timeout)}"
        )

        self._pool: ConnectionPool | None = None

    @property
    def is_open(self) -> bool:
        return self._pool is not None

    def open(self, max_retries: int = 3, retry_delay: float = 2.0) -> None:
        """
        Open the connection pool with retry logic.

        Args:
            max_retries: Maximum number of connection attempts
            retry_delay: Delay between retries in seconds

        Raises:
            OperationalError: If connection fails after all retries
        """
        if self._pool is not None:
            return

        for attempt in range(1, max_retries + 1):
            pool = self._build_pool()
            try:
                pool.open(wait=True, timeout=self.timeout)
                self._pool = pool
                return
            except OperationalError as e:
                logger.warning(
                    f"Database connection attempt {attempt}/{max_retries} failed: {e}",
                    extra={"db_host": self.host, "db_port": self.port},
                )
                pool.close()
                if attempt < max_retries:
                    time.sleep(retry_delay)
                else:
                    raise OperationalError(
                        f"Failed to connect to database after {max_retries} attempts: {e}"
                    ) from e

    def _build_pool(self) -> ConnectionPool:
        return ConnectionPool(
            conninfo=self.conninfo,
            min_size=self.min_size,
            max_size=self.max_size,
            timeout=self.timeout,
            kwargs={"row_factory": dict_row},
            open=False,
        )

    def close(self) -> None:
        """Close the connection pool"""
        if self._pool is not None:
            self._pool.close()
            self._pool = None

    @contextmanager
    def get_connection(self):
        """
        Get a connection from the pool

        Yields:
            psycopg.Connection: Database connection (committed on clean exit)

        Raises:
            RuntimeError: If pool is not open
        """
        if self._pool is None:
            raise RuntimeError("Connection pool is not open. Call open() first.")

        with self._pool.connection() as conn:
            yield conn

    @contextmanager
    def get_cursor(self):
        """
        Get a cursor from a pooled connection

        Yields:
            psycopg.Cursor: Database cursor
        """
        with self.get_connection() as conn:
            with conn.cursor() as cur:
                yield cur

    def execute_query(self, query: str, params: tuple | None = None) -> list[dict]:
        """
        Execute a SELECT query and return results

        Returns:
            List of dictionaries (one per row)
        """
        with self.get_cursor() as cur:
            cur.execute(query, params)
            return cur.fetchall()

    def execute_command(self, command: str, params: tuple | None = None) -> int:
        """
        Execute an INSERT/UPDATE/DELETE/DDL command in its own transaction

        Returns:
            Number of rows affected
        """
        with self.get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(command, params)
                rowcount = cur.rowcount
            conn.commit()
            return rowcount

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
