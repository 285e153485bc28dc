"""Shared pytest fixtures."""

import sqlite3
import pytest
from contextlib import contextmanager
from pathlib import Path

from config import Config, get_migrations_dir
from services.base import Services
from tests.helpers import run_migrations


class InMemoryDatabaseManager:
    """Stands in for DatabaseManager over one shared in-memory connection.

    ``connect()`` hands out the same connection every time and never closes
    it, so data survives between service calls within a test.
    """

    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    @contextmanager
    def connect(self):
        yield self.conn

    def get_db_path(self) -> Path:
        return Path(":memory:")

    def get_migrations_dir(self) -> Path:
        return get_migrations_dir()


@pytest.fixture
def test_db():
    """Empty in-memory SQLite database, closed after the test."""
    conn = sqlite3.connect(":memory:")
    yield conn
    conn.close()


@pytest.fixture
def test_config(tmp_path):
    """Config with every directory under tmp_path and archiving off."""
    base_dir = tmp_path / "painel"
    return Config(
        base_dir=base_dir,
        db_data_dir=base_dir / "db",
        db_filename="test.db",
        log_level="DEBUG",
        log_dir=base_dir / "logs",
        archive_enabled=False,
        archive_dir=base_dir / "archives",
    )


@pytest.fixture
def db_manager_with_schema(test_db):
    """InMemoryDatabaseManager over test_db with all migrations applied."""
    run_migrations(test_db, get_migrations_dir())
    return InMemoryDatabaseManager(test_db)


@pytest.fixture
def services(test_config, db_manager_with_schema):
    """Services container backed by the migrated in-memory database."""
    return Services(test_config, db_manager=db_manager_with_schema)
