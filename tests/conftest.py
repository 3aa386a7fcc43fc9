"""
Pytest configuration and fixtures for transaction-processor tests

This module provides shared fixtures for unit, integration, and E2E tests.
"""
import io
import logging
import os
from collections.abc import Generator

import pytest

from transaction_processor.engine import TransactionEngine
from transaction_processor.store import InMemorySnapshotStore

HEADER = ["Account Name", "Card Number", "Transaction Amount"]


# =======================
# PYTEST CONFIGURATION
# =======================

def pytest_configure(config):
    """Configure pytest with custom markers"""
    config.addinivalue_line(
        "markers", "unit: Unit tests that don't require external services"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests that require Docker containers"
    )
    config.addinivalue_line(
        "markers", "e2e: End-to-end tests that drive the transport shells"
    )


# =======================
# CSV HELPERS
# =======================

def make_csv(rows: list[list[str]], header: list[str] | None = None) -> bytes:
    """
    Build CSV bytes from rows (no quoting of delimiters needed in tests)

    Args:
        rows: Data rows, each a list of field values
        header: Header row (defaults to the standard export header)

    Returns:
        UTF-8 encoded CSV
    """
    header = HEADER if header is None else header
    lines = [",".join(header)] + [",".join(row) for row in rows]
    return ("\n".join(lines) + "\n").encode("utf-8")


@pytest.fixture
def csv_stream():
    """Factory fixture returning a binary stream for the given rows"""
    def _factory(rows: list[list[str]], header: list[str] | None = None) -> io.BytesIO:
        return io.BytesIO(make_csv(rows, header))
    return _factory


@pytest.fixture(scope="session")
def test_data_dir() -> str:
    """Path to tests/fixtures"""
    return os.path.join(os.path.dirname(__file__), "fixtures")


# =======================
# ENGINE FIXTURES
# =======================

@pytest.fixture
def memory_store() -> InMemorySnapshotStore:
    """Fresh in-memory snapshot store"""
    return InMemorySnapshotStore()


@pytest.fixture
def engine(memory_store) -> TransactionEngine:
    """Engine backed by a fresh in-memory store"""
    return TransactionEngine(memory_store)


# =======================
# DATABASE FIXTURES (Testcontainers)
# =======================

@pytest.fixture(scope="session")
def postgres_container() -> Generator:
    """
    Start PostgreSQL container for integration tests

    Skips dependent tests when testcontainers or Docker is not available.

    Yields:
        PostgresContainer instance
    """
    postgres_module = pytest.importorskip("testcontainers.postgres")

    container = postgres_module.PostgresContainer(
        image="postgres:16.2-alpine",
        username="test_ledger",
        password="test_password",
        dbname="test_transactions",
    )
    try:
        container.start()
    except Exception as e:
        pytest.skip(f"Docker is not available for PostgreSQL container: {e}")

    try:
        yield container
    finally:
        container.stop()


@pytest.fixture
def db_settings(postgres_container) -> dict:
    """Connection arguments for the running PostgreSQL container"""
    return {
        "host": postgres_container.get_container_host_ip(),
        "port": int(postgres_container.get_exposed_port(5432)),
        "database": "test_transactions",
        "user": "test_ledger",
        "password": "test_password",
    }


@pytest.fixture
def db_pool(db_settings) -> Generator:
    """Open connection pool with an empty snapshot table"""
    from transaction_processor.store import DatabaseConnectionPool

    pool = DatabaseConnectionPool(**db_settings)
    pool.open()
    pool.execute_command("DROP TABLE IF EXISTS ledger_snapshot")

    yield pool

    pool.close()


# =======================
# LOGGING FIXTURES
# =======================

@pytest.fixture(autouse=True)
def restore_log_levels(monkeypatch):
    """Undo log level changes made by set_log_level (e.g. via from_settings)"""
    from transaction_processor.observability import logger as logger_module

    monkeypatch.setattr(logger_module, "_level_override", None)
    saved = {
        name: (logger.level, [handler.level for handler in logger.handlers])
        for name, logger in logging.root.manager.loggerDict.items()
        if isinstance(logger, logging.Logger)
    }

    yield

    for name, (level, handler_levels) in saved.items():
        logger = logging.getLogger(name)
        logger.setLevel(level)
        for handler, handler_level in zip(logger.handlers, handler_levels):
            handler.setLevel(handler_level)
