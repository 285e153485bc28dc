"""SQLite connections for the painel database file."""

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from config import Config, get_migrations_dir
from errors import StoreError

# Seconds to wait for another process holding the write lock
BUSY_TIMEOUT = 5.0


class DatabaseManager:
    """Opens connections to the database file named by the config."""

    def __init__(self, config: Config):
        self.config = config

    @contextmanager
    def connect(self):
        """Yield a connection that is closed on exit.

        The data directory is created on first use.

        Raises:
            StoreError: If the database file cannot be opened.
        """
        db_path = self.get_db_path()
        try:
            db_path.parent.mkdir(parents=True, exist_ok=True)
            conn = sqlite3.connect(db_path, timeout=BUSY_TIMEOUT)
        except (OSError, sqlite3.Error) as e:
            raise StoreError(f"Could not open database {db_path}: {e}") from e

        try:
            yield conn
        finally:
            conn.close()

    def get_db_path(self) -> Path:
        return self.config.db_path

    def get_migrations_dir(self) -> Path:
        return get_migrations_dir()
