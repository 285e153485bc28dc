"""Helper utilities for tests."""

from decimal import Decimal
from pathlib import Path
import sqlite3

from db.schema import apply_pending_migrations
from models.transaction import Transaction, new_transaction_id


def run_migrations(conn: sqlite3.Connection, migrations_dir: Path) -> None:
    """Run all SQL migrations in order.

    Args:
        conn: SQLite connection to run migrations against.
        migrations_dir: Path to directory containing .sql migration files.
    """
    apply_pending_migrations(conn, migrations_dir)


def make_transaction(
    description="Padaria",
    amount="-10.00",
    posted_date="2024-03-15",
    owner="Daniela",
    category="Alimentação",
    balance="1000.00",
    historic="Compra",
    transaction_id=None,
) -> Transaction:
    """Build a valid Transaction; pass amount/balance=None for an invalid value."""
    return Transaction(
        id=transaction_id or new_transaction_id(),
        posted_date=posted_date,
        historic=historic,
        description=description,
        amount=Decimal(amount) if amount is not None else None,
        balance=Decimal(balance) if balance is not None else None,
        owner=owner,
        category=category,
    )
