from dataclasses import dataclass, replace
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Dict, Optional, Union
import re
import uuid

from models.category import is_valid_category

OWNERS = ("Daniela", "Giovani")

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def new_transaction_id() -> str:
    return uuid.uuid4().hex


def is_valid_iso_date(value: Optional[str]) -> bool:
    """True when value is YYYY-MM-DD and names a real calendar date."""
    if not value or not _ISO_DATE.match(value):
        return False
    try:
        date.fromisoformat(value)
    except ValueError:
        return False
    return True


def parse_number(value: Union[str, int, float, Decimal, None]) -> Optional[Decimal]:
    """Parse a number typed by a person or passed in by code.

    Accepts "1234.56" as well as Brazilian "1.234,56", and plain ints and
    floats (12.5 becomes Decimal("12.5"), not its binary expansion).

    Returns:
        The number, or None when the value is blank or not a finite number.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        return value if value.is_finite() else None
    if isinstance(value, (int, float)):
        value = str(value)

    text = str(value if value is not None else "").strip()
    if not text:
        return None
    if "," in text:
        text = text.replace(".", "").replace(",", ".")

    try:
        number = Decimal(text)
    except InvalidOperation:
        return None
    return number if number.is_finite() else None


def _is_number(value) -> bool:
    return isinstance(value, Decimal) and value.is_finite()


@dataclass
class Transaction:
    id: str
    posted_date: str  # YYYY-MM-DD
    historic: str
    description: str
    amount: Optional[Decimal]  # negative = expense; None = failed to parse
    balance: Optional[Decimal]  # as reported on the statement row
    owner: str
    category: Optional[str] = None

    def copy(self, **changes) -> "Transaction":
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)

    def validation_errors(self) -> Dict[str, str]:
        """Check every field independently.

        Returns:
            Mapping of field name to message; empty when the row is valid.
        """
        errors = {}
        if not is_valid_iso_date(self.posted_date):
            errors["posted_date"] = "Invalid date (use YYYY-MM-DD)"
        if not (self.historic or "").strip():
            errors["historic"] = "Historic is required"
        if not (self.description or "").strip():
            errors["description"] = "Description is required"
        if not (self.category or "").strip():
            errors["category"] = "Category is required"
        elif not is_valid_category(self.category):
            errors["category"] = f"Unknown category '{self.category}'"
        if not _is_number(self.amount):
            errors["amount"] = "Amount must be numeric"
        if not _is_number(self.balance):
            errors["balance"] = "Balance must be numeric"
        return errors

    def to_dict(self) -> dict:
        """Convert transaction to a JSON-compatible dictionary."""
        return {
            "id": self.id,
            "posted_date": self.posted_date,
            "historic": self.historic,
            "description": self.description,
            "amount": str(self.amount) if self.amount is not None else None,
            "balance": str(self.balance) if self.balance is not None else None,
            "owner": self.owner,
            "category": self.category,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Transaction":
        """Build a transaction from its stored dictionary form."""
        amount = data.get("amount")
        balance = data.get("balance")
        return cls(
            id=data["id"],
            posted_date=data.get("posted_date", ""),
            historic=data.get("historic", ""),
            description=data.get("description", ""),
            amount=Decimal(str(amount)) if amount is not None else None,
            balance=Decimal(str(balance)) if balance is not None else None,
            owner=data["owner"],
            category=data.get("category"),
        )
