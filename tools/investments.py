"""Investment projection tools."""

from decimal import Decimal
from typing import Dict, List
from models.investment import Investment
from models.transaction import OWNERS

PROJECTION_YEARS = (1, 5, 10)


def project_investment(investment: Investment) -> Dict[int, Dict[str, Decimal]]:
    """Projected value and gain for each horizon in PROJECTION_YEARS.

    Example:
        {1: {"value": Decimal("1100.00"), "gain": Decimal("100.00")}, 5: {...}, 10: {...}}
    """
    return {
        years: {
            "value": investment.projected_value(years),
            "gain": investment.projected_gain(years),
        }
        for years in PROJECTION_YEARS
    }


def total_by_owner(investments: List[Investment]) -> Dict[str, Decimal]:
    """Invested amount per owner (zero for owners without investments)."""
    totals = {owner: Decimal("0") for owner in OWNERS}
    for inv in investments:
        totals[inv.owner] = totals.get(inv.owner, Decimal("0")) + inv.amount
    return totals


def investment_summary(investments: List[Investment]) -> Dict:
    """Totals per owner, overall total and per-investment projections."""
    by_owner = total_by_owner(investments)
    return {
        "by_owner": by_owner,
        "total": sum(by_owner.values(), Decimal("0")),
        "projections": {inv.id: project_investment(inv) for inv in investments},
    }
