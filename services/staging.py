"""Verification staging for imported transactions.

Parsed transactions are not written to the ledger directly. They wait in a
single pending batch where the user can review them, fix fields and drop
rows. The batch is committed to the ledger only when every row passes
validation, and then all at once.

State machine::

    empty --stage--> staged --commit/cancel--> empty

Edits and removals keep the batch in ``staged``; a staged batch may even be
left with zero rows, which blocks the commit until it is cancelled or
replaced. Staging a new batch always discards the previous one.
"""

import sqlite3
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, List, Optional
from db.slots import PENDING_SLOT, read_slot, store_transaction, write_slot
from models.transaction import Transaction, parse_number
from services.transactions import NUMERIC_FIELDS, extend_ledger
from logger import get_logger

logger = get_logger()

STATE_EMPTY = "empty"
STATE_STAGED = "staged"

EDITABLE_FIELDS = (
    "posted_date",
    "historic",
    "description",
    "amount",
    "balance",
    "category",
)


@dataclass
class RowValidationError:
    """Failing fields of one pending row (field name -> message)."""

    transaction_id: str
    fields: Dict[str, str]


@dataclass
class BatchValidation:
    """Result of validating the pending batch."""

    row_count: int
    errors: Dict[str, RowValidationError] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return self.row_count == 0

    @property
    def is_valid(self) -> bool:
        return self.row_count > 0 and not self.errors


@dataclass
class CommitResult:
    committed: int
    validation: BatchValidation

    @property
    def blocked(self) -> bool:
        return not self.validation.is_valid


@dataclass
class BatchSummary:
    income: Decimal
    expenses: Decimal
    final_balance: Optional[Decimal]
    total: int


def validate_batch(transactions: List[Transaction]) -> BatchValidation:
    """Validate every row independently and collect the failures."""
    validation = BatchValidation(row_count=len(transactions))
    for t in transactions:
        errors = t.validation_errors()
        if errors:
            validation.errors[t.id] = RowValidationError(t.id, errors)
    return validation


def summarize_batch(transactions: List[Transaction]) -> BatchSummary:
    """Income and expense totals plus the balance of the last row."""
    amounts = [t.amount for t in transactions if t.amount is not None]
    return BatchSummary(
        income=sum((a for a in amounts if a > 0), Decimal("0")),
        expenses=sum((-a for a in amounts if a < 0), Decimal("0")),
        final_balance=transactions[-1].balance if transactions else None,
        total=len(transactions),
    )


class StagingService:
    """Service holding the single pending batch."""

    def __init__(self, db_manager):
        """Initialize the staging service.

        Args:
            db_manager: Database manager instance for database operations.
        """
        self.db_manager = db_manager

    def _load(self, conn: sqlite3.Connection) -> Optional[List[Transaction]]:
        records = read_slot(conn, PENDING_SLOT)
        if records is None:
            return None
        return [Transaction.from_dict(r) for r in records]

    def _save(
        self, conn: sqlite3.Connection, batch: Optional[List[Transaction]]
    ) -> None:
        payload = [t.to_dict() for t in batch] if batch is not None else None
        write_slot(conn, PENDING_SLOT, payload)

    @property
    def state(self) -> str:
        with self.db_manager.connect() as conn:
            batch = self._load(conn)
        return STATE_EMPTY if batch is None else STATE_STAGED

    def pending(self) -> List[Transaction]:
        """Get a copy of the pending batch (empty list when nothing is staged)."""
        with self.db_manager.connect() as conn:
            return self._load(conn) or []

    def stage(self, transactions: List[Transaction]) -> int:
        """Replace the pending batch with new transactions.

        Any previous batch is discarded, reviewed or not.

        Returns:
            Number of staged transactions.
        """
        with self.db_manager.connect() as conn:
            with store_transaction(conn):
                previous = self._load(conn)
                self._save(conn, [t.copy() for t in transactions])

        if previous:
            logger.info(f"Discarded previous pending batch of {len(previous)} row(s)")
        logger.info(f"Staged {len(transactions)} transaction(s) for review")
        return len(transactions)

    def edit(self, transaction_id: str, field_name: str, value) -> bool:
        """Change one field of one pending row.

        Numeric fields that fail to parse are stored as None so validation
        flags them; they are never coerced to zero.

        Returns:
            True if the row was edited, False if no such pending row exists.

        Raises:
            ValueError: If the field is not editable.
        """
        if field_name not in EDITABLE_FIELDS:
            raise ValueError(f"Unsupported field name: {field_name}")

        if field_name in NUMERIC_FIELDS:
            new_value = parse_number(value)
        else:
            new_value = "" if value is None else str(value)

        with self.db_manager.connect() as conn:
            with store_transaction(conn):
                batch = self._load(conn)
                if batch is None:
                    return False

                for index, t in enumerate(batch):
                    if t.id == transaction_id:
                        break
                else:
                    return False

                batch[index] = t.copy(**{field_name: new_value})
                self._save(conn, batch)

        logger.debug(f"Edited pending row {transaction_id[:8]}... ({field_name})")
        return True

    def remove(self, transaction_id: str) -> bool:
        """Drop one row from the pending batch. The ledger is not touched.

        Returns:
            True if the row was removed, False if not found.
        """
        with self.db_manager.connect() as conn:
            with store_transaction(conn):
                batch = self._load(conn)
                if batch is None:
                    return False

                remaining = [t for t in batch if t.id != transaction_id]
                if len(remaining) == len(batch):
                    return False
                self._save(conn, remaining)

        logger.debug(f"Removed pending row {transaction_id[:8]}...")
        return True

    def validate(self) -> BatchValidation:
        """Validate the pending batch.

        An empty batch, or any row failing any check, makes it invalid.
        """
        return validate_batch(self.pending())

    def commit(self) -> CommitResult:
        """Move the whole pending batch into the ledger.

        Blocked (nothing changes) unless every row is valid. Otherwise the
        ledger append and the clearing of the batch happen in one store
        transaction.

        Raises:
            StoreWriteError: If the store cannot be written. Nothing changes.
        """
        with self.db_manager.connect() as conn:
            with store_transaction(conn):
                batch = self._load(conn) or []
                validation = validate_batch(batch)
                if not validation.is_valid:
                    result = CommitResult(committed=0, validation=validation)
                else:
                    count = extend_ledger(conn, batch)
                    self._save(conn, None)
                    result = CommitResult(committed=count, validation=validation)

        if result.blocked:
            logger.warning(
                f"Commit blocked: {len(validation.errors)} invalid row(s) "
                f"in a batch of {validation.row_count}"
            )
        else:
            logger.info(f"Committed {result.committed} transaction(s) to the ledger")
        return result

    def cancel(self) -> None:
        """Discard the pending batch without touching the ledger."""
        with self.db_manager.connect() as conn:
            with store_transaction(conn):
                self._save(conn, None)

        logger.info("Pending batch cancelled")

    def summary(self) -> BatchSummary:
        return summarize_batch(self.pending())
