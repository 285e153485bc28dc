"""Transaction ledger service."""

import calendar
import sqlite3
from typing import Dict, List, Optional
from db.slots import TRANSACTIONS_SLOT, read_slot, store_transaction, write_slot
from models.transaction import Transaction, parse_number
from logger import get_logger

logger = get_logger()

UPDATABLE_FIELDS = {
    "posted_date",
    "historic",
    "description",
    "amount",
    "balance",
    "category",
}
NUMERIC_FIELDS = {"amount", "balance"}


def load_ledger(conn: sqlite3.Connection) -> List[Transaction]:
    """Read the committed ledger in insertion order."""
    return [Transaction.from_dict(d) for d in read_slot(conn, TRANSACTIONS_SLOT) or []]


def save_ledger(conn: sqlite3.Connection, transactions: List[Transaction]) -> None:
    write_slot(conn, TRANSACTIONS_SLOT, [t.to_dict() for t in transactions])


def extend_ledger(conn: sqlite3.Connection, transactions: List[Transaction]) -> int:
    """Append transactions to the ledger on an open store transaction.

    Every record is checked before anything is written.

    Returns:
        Number of transactions appended.

    Raises:
        ValueError: If a record is invalid or its ID is already in the ledger.
    """
    ledger = load_ledger(conn)
    existing_ids = {t.id for t in ledger}

    for t in transactions:
        errors = t.validation_errors()
        if errors:
            raise ValueError(f"Transaction {t.id} is invalid: {errors}")
        if t.id in existing_ids:
            raise ValueError(f"Duplicate transaction ID: {t.id}")
        existing_ids.add(t.id)

    save_ledger(conn, ledger + [t.copy() for t in transactions])
    return len(transactions)


class TransactionService:
    """Service for managing committed transactions."""

    def __init__(self, db_manager):
        """Initialize the transaction service.

        Args:
            db_manager: Database manager instance for database operations.
        """
        self.db_manager = db_manager

    def append(self, transactions: List[Transaction]) -> int:
        """Append transactions to the end of the ledger.

        Args:
            transactions: Transactions to add, in order.

        Returns:
            Number of transactions appended.

        Raises:
            ValueError: If any transaction is invalid. Nothing is written.
            StoreWriteError: If the store cannot be written. Nothing is written.
        """
        if not transactions:
            return 0

        with self.db_manager.connect() as conn:
            with store_transaction(conn):
                count = extend_ledger(conn, transactions)

        logger.info(f"Appended {count} transaction(s) to the ledger")
        return count

    def update(self, transaction_id: str, fields: Dict[str, object]) -> bool:
        """Merge fields into a single committed transaction.

        Args:
            transaction_id: ID of the transaction to update.
            fields: Field values to merge. Supported fields:
                    'posted_date', 'historic', 'description', 'amount',
                    'balance', 'category'

        Returns:
            True if the transaction was updated, False if it doesn't exist.

        Raises:
            ValueError: If unsupported fields are given, amount or balance is
                        not a number, or the merged record is invalid.
                        Nothing is written.
        """
        invalid_fields = set(fields) - UPDATABLE_FIELDS
        if invalid_fields:
            raise ValueError(f"Unsupported field names: {invalid_fields}")

        fields = dict(fields)
        for name in NUMERIC_FIELDS & set(fields):
            number = parse_number(fields[name])
            if number is None:
                raise ValueError(f"{name} must be numeric, got {fields[name]!r}")
            fields[name] = number

        with self.db_manager.connect() as conn:
            with store_transaction(conn):
                ledger = load_ledger(conn)
                for index, t in enumerate(ledger):
                    if t.id == transaction_id:
                        break
                else:
                    return False

                updated = t.copy(**fields)
                errors = updated.validation_errors()
                if errors:
                    raise ValueError(f"Transaction {transaction_id} is invalid: {errors}")

                ledger[index] = updated
                save_ledger(conn, ledger)

        logger.info(f"Updated transaction {transaction_id[:8]}... ({', '.join(fields)})")
        return True

    def delete(self, transaction_id: str) -> bool:
        """Delete a transaction by ID.

        Returns:
            True if the transaction was deleted, False if not found.
        """
        with self.db_manager.connect() as conn:
            with store_transaction(conn):
                ledger = load_ledger(conn)
                remaining = [t for t in ledger if t.id != transaction_id]
                if len(remaining) == len(ledger):
                    return False
                save_ledger(conn, remaining)

        logger.info(f"Deleted transaction {transaction_id[:8]}...")
        return True

    def find_all(self) -> List[Transaction]:
        """Get every committed transaction in insertion order."""
        with self.db_manager.connect() as conn:
            return load_ledger(conn)

    def find(self, transaction_id: str) -> Optional[Transaction]:
        """Get a single transaction by ID.

        Returns:
            Transaction object if found, None otherwise.
        """
        for t in self.find_all():
            if t.id == transaction_id:
                return t
        return None

    def find_by_owner(self, owner: str) -> List[Transaction]:
        """Get all transactions of one owner, in insertion order."""
        return [t for t in self.find_all() if t.owner == owner]

    def get_transactions_by_date_range(
        self,
        start_date: str,
        end_date: str,
        *,
        owner: Optional[str] = None,
    ) -> List[Transaction]:
        """Get transactions within a date range.

        Args:
            start_date: Start date in ISO format (YYYY-MM-DD), inclusive.
            end_date: End date in ISO format (YYYY-MM-DD), inclusive.
            owner: Optional owner to filter by.

        Returns:
            List of Transaction objects in insertion order.
        """
        return [
            t
            for t in self.find_all()
            if start_date <= t.posted_date <= end_date
            and (owner is None or t.owner == owner)
        ]

    def get_transactions_by_month(
        self, year: int, month: int, *, owner: Optional[str] = None
    ) -> List[Transaction]:
        """Get transactions for a specific calendar month.

        Args:
            year: Year (e.g., 2025).
            month: Month (1-12).
            owner: Optional owner to filter by.
        """
        last_day = calendar.monthrange(year, month)[1]
        return self.get_transactions_by_date_range(
            f"{year:04d}-{month:02d}-01",
            f"{year:04d}-{month:02d}-{last_day:02d}",
            owner=owner,
        )
