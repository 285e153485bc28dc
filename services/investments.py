"""Investment ledger service."""

from datetime import date
from decimal import Decimal
from typing import List, Optional
from db.slots import INVESTMENTS_SLOT, read_slot, store_transaction, write_slot
from models.investment import Investment, new_investment_id
from models.transaction import OWNERS, is_valid_iso_date
from logger import get_logger

logger = get_logger()


class InvestmentService:
    """Service for the append-only investment ledger."""

    def __init__(self, db_manager):
        """Initialize the investment service.

        Args:
            db_manager: Database manager instance for database operations.
        """
        self.db_manager = db_manager

    def create(
        self,
        owner: str,
        kind: str,
        amount: Decimal,
        annual_rate: Decimal,
        title: Optional[str] = None,
        investment_date: Optional[str] = None,
    ) -> Investment:
        """Create and store a new investment.

        Args:
            owner: Owner the investment belongs to.
            kind: Investment type (free-form, e.g. "CDB").
            amount: Invested amount (must not be negative).
            annual_rate: Expected yearly return in percent.
            title: Optional title.
            investment_date: ISO date; defaults to today.

        Returns:
            The stored Investment.
        """
        investment = Investment(
            id=new_investment_id(),
            owner=owner,
            kind=kind,
            title=title or None,
            amount=amount,
            date=investment_date or date.today().isoformat(),
            annual_rate=annual_rate,
        )
        return self.add(investment)

    def add(self, investment: Investment) -> Investment:
        """Append an investment to the ledger.

        Raises:
            ValueError: If the investment is invalid. Nothing is written.
            StoreWriteError: If the store cannot be written.
        """
        if investment.owner not in OWNERS:
            raise ValueError(f"Unknown owner: {investment.owner}")
        if not investment.amount.is_finite() or investment.amount < 0:
            raise ValueError(f"Investment amount must be >= 0, got {investment.amount}")
        if not investment.annual_rate.is_finite():
            raise ValueError("Annual rate must be numeric")
        if not is_valid_iso_date(investment.date):
            raise ValueError(f"Invalid investment date: {investment.date}")

        with self.db_manager.connect() as conn:
            with store_transaction(conn):
                records = read_slot(conn, INVESTMENTS_SLOT) or []
                records.append(investment.to_dict())
                write_slot(conn, INVESTMENTS_SLOT, records)

        logger.info(f"Added investment {investment.id} for {investment.owner}")
        return investment

    def find_all(self) -> List[Investment]:
        """Get every investment in insertion order."""
        with self.db_manager.connect() as conn:
            records = read_slot(conn, INVESTMENTS_SLOT) or []
        return [Investment.from_dict(r) for r in records]

    def find_by_owner(self, owner: str) -> List[Investment]:
        return [inv for inv in self.find_all() if inv.owner == owner]
