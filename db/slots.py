"""Named JSON slots stored in the ``slots`` table.

The store keeps three independently addressable slots: the committed
transaction ledger, the committed investment ledger and the pending batch.
Each slot holds one JSON document. Writes always replace the whole document,
so callers read, modify and write a slot inside ``store_transaction`` to keep
the read-modify-write atomic.
"""

import json
import sqlite3
from contextlib import contextmanager

from errors import StoreError, StoreWriteError

TRANSACTIONS_SLOT = "transactions"
INVESTMENTS_SLOT = "investments"
PENDING_SLOT = "pending"


def read_slot(conn: sqlite3.Connection, name: str):
    """Read and decode a slot.

    Returns:
        The decoded JSON document, or None if the slot is empty or missing.

    Raises:
        StoreError: If the slot cannot be read or holds invalid JSON.
    """
    try:
        row = conn.execute(
            "SELECT payload FROM slots WHERE name = ?", (name,)
        ).fetchone()
    except sqlite3.Error as e:
        raise StoreError(f"Could not read slot '{name}': {e}") from e

    if row is None or row[0] is None:
        return None

    try:
        return json.loads(row[0])
    except json.JSONDecodeError as e:
        raise StoreError(f"Slot '{name}' holds invalid JSON: {e}") from e


def write_slot(conn: sqlite3.Connection, name: str, payload) -> None:
    """Replace a slot's document. None empties the slot."""
    encoded = json.dumps(payload, ensure_ascii=False) if payload is not None else None
    conn.execute(
        """
        INSERT INTO slots (name, payload, updated_at)
        VALUES (?, ?, CURRENT_TIMESTAMP)
        ON CONFLICT(name) DO UPDATE SET
            payload = excluded.payload,
            updated_at = CURRENT_TIMESTAMP
        """,
        (name, encoded),
    )


@contextmanager
def store_transaction(conn: sqlite3.Connection):
    """Run slot reads and writes as one all-or-nothing unit.

    Takes the database write lock up front, commits on success and rolls
    back on any error.

    Raises:
        StoreWriteError: If SQLite fails; nothing is written.
    """
    try:
        conn.execute("BEGIN IMMEDIATE")
    except sqlite3.Error as e:
        raise StoreWriteError(f"Could not start store transaction: {e}") from e

    try:
        yield conn
        conn.commit()
    except sqlite3.Error as e:
        conn.rollback()
        raise StoreWriteError(f"Store write failed, nothing was saved: {e}") from e
    except Exception:
        conn.rollback()
        raise
