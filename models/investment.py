"""Investment model for manually entered holdings."""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional
import uuid

# Suggested kinds; the kind field itself is free-form
INVESTMENT_KINDS = (
    "Renda Fixa",
    "Ações",
    "Fundos",
    "Cripto",
    "Tesouro Direto",
    "CDB",
    "LCI/LCA",
    "Outros",
)


def new_investment_id() -> str:
    return f"inv-{uuid.uuid4().hex}"


@dataclass(frozen=True)
class Investment:
    """Represents an investment entered by one of the owners.

    Attributes:
        id: Unique identifier (``inv-`` prefix).
        owner: Owner the investment belongs to.
        kind: Investment type, e.g. "CDB".
        title: Optional human readable title.
        amount: Invested amount, never negative.
        date: Date of the investment (YYYY-MM-DD).
        annual_rate: Expected yearly return in percent.
    """

    id: str
    owner: str
    kind: str
    title: Optional[str]
    amount: Decimal
    date: str
    annual_rate: Decimal

    def projected_value(self, years: int) -> Decimal:
        """Compound interest: amount * (1 + rate/100) ** years."""
        return self.amount * (1 + self.annual_rate / Decimal(100)) ** years

    def projected_gain(self, years: int) -> Decimal:
        return self.projected_value(years) - self.amount

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "owner": self.owner,
            "kind": self.kind,
            "title": self.title,
            "amount": str(self.amount),
            "date": self.date,
            "annual_rate": str(self.annual_rate),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Investment":
        return cls(
            id=data["id"],
            owner=data["owner"],
            kind=data.get("kind", ""),
            title=data.get("title"),
            amount=Decimal(str(data.get("amount", 0))),
            date=data.get("date", ""),
            annual_rate=Decimal(str(data.get("annual_rate", 0))),
        )
