"""Transaction analysis tools.

These functions turn committed transactions into the table views and chart
series of the dashboard. Expenses are transactions with a negative amount and
are always reported as positive totals.
"""

from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional, Tuple
from dateutil.relativedelta import relativedelta
from models.category import DEFAULT_CATEGORY
from models.transaction import OWNERS, Transaction
from logger import get_logger

logger = get_logger()

UNKNOWN_PLACE = "Desconhecido"

TREND_INCREASE = "increase"
TREND_DECREASE = "decrease"
TREND_STABLE = "stable"


def _expenses(transactions: List[Transaction]) -> List[Transaction]:
    return [t for t in transactions if t.amount is not None and t.amount < 0]


def _month_of(transaction: Transaction) -> Optional[Tuple[int, int]]:
    """(year, month) of the posted date, or None if it isn't a valid date."""
    try:
        posted = date.fromisoformat(transaction.posted_date)
    except (TypeError, ValueError):
        logger.debug(
            f"Ignoring transaction {transaction.id[:8]}... with invalid date "
            f"'{transaction.posted_date}'"
        )
        return None
    return posted.year, posted.month


def filter_transactions(
    transactions: List[Transaction],
    historic: Optional[str] = None,
    description: Optional[str] = None,
) -> List[Transaction]:
    """Keep transactions whose historic/description contain the given text.

    Matching is case-insensitive; an empty filter matches everything.
    """
    result = list(transactions)
    if historic:
        needle = historic.lower()
        result = [t for t in result if needle in t.historic.lower()]
    if description:
        needle = description.lower()
        result = [t for t in result if needle in t.description.lower()]
    return result


def _absolute_amount(t: Transaction) -> Decimal:
    return abs(t.amount) if t.amount is not None else Decimal("0")


_SORT_KEYS = {
    "date": lambda t: t.posted_date,
    "amount": _absolute_amount,
}


def sort_transactions(
    transactions: List[Transaction], field: str = "date", descending: bool = True
) -> List[Transaction]:
    """Sort by posted date or by absolute amount.

    Raises:
        ValueError: If field is not "date" or "amount".
    """
    if field not in _SORT_KEYS:
        raise ValueError(f"Unknown sort field: {field}")

    return sorted(transactions, key=_SORT_KEYS[field], reverse=descending)


def split_by_owner(transactions: List[Transaction]) -> Dict[str, List[Transaction]]:
    """Separate view: one list per owner, every owner present."""
    return {owner: [t for t in transactions if t.owner == owner] for owner in OWNERS}


def spending_by_category(transactions: List[Transaction]) -> List[Tuple[str, Decimal]]:
    """Expense totals per category, largest first."""
    totals: Dict[str, Decimal] = {}
    for t in _expenses(transactions):
        category = t.category or DEFAULT_CATEGORY
        totals[category] = totals.get(category, Decimal("0")) + abs(t.amount)

    return sorted(totals.items(), key=lambda item: item[1], reverse=True)


def top_places(transactions: List[Transaction], limit: int = 10) -> List[Dict]:
    """Places (descriptions) with the highest expense totals.

    Returns:
        Up to ``limit`` dicts with "name", "count" and "total", largest
        total first.
    """
    places: Dict[str, Dict] = {}
    for t in _expenses(transactions):
        name = t.description or UNKNOWN_PLACE
        place = places.setdefault(name, {"name": name, "count": 0, "total": Decimal("0")})
        place["count"] += 1
        place["total"] += abs(t.amount)

    ranked = sorted(places.values(), key=lambda p: p["total"], reverse=True)
    return ranked[:limit]


def spending_by_owner(transactions: List[Transaction]) -> Dict[str, Decimal]:
    """Expense totals per owner (zero for owners without expenses)."""
    totals = {owner: Decimal("0") for owner in OWNERS}
    for t in _expenses(transactions):
        totals[t.owner] = totals.get(t.owner, Decimal("0")) + abs(t.amount)
    return totals


def monthly_spending(transactions: List[Transaction]) -> Dict[str, Dict[str, Decimal]]:
    """Expense totals per month and owner.

    Returns:
        Dictionary keyed by "YYYY-MM" (ascending) mapping each owner to the
        month's expense total. Rows with invalid dates are ignored.
    """
    months: Dict[str, Dict[str, Decimal]] = {}
    for t in _expenses(transactions):
        month = _month_of(t)
        if month is None:
            continue
        key = f"{month[0]:04d}-{month[1]:02d}"
        totals = months.setdefault(key, {owner: Decimal("0") for owner in OWNERS})
        totals[t.owner] = totals.get(t.owner, Decimal("0")) + abs(t.amount)

    return dict(sorted(months.items()))


def category_spending_in_month(
    transactions: List[Transaction], year: int, month: int
) -> Dict[str, Decimal]:
    """Expense totals per category for one calendar month."""
    totals: Dict[str, Decimal] = {}
    for t in _expenses(transactions):
        if _month_of(t) != (year, month):
            continue
        category = t.category or DEFAULT_CATEGORY
        totals[category] = totals.get(category, Decimal("0")) + abs(t.amount)
    return totals


def percent_change(current: Decimal, previous: Decimal) -> Decimal:
    """Relative change in percent; 100 when there was nothing before."""
    if previous > 0:
        return (current - previous) / previous * 100
    return Decimal("100") if current > 0 else Decimal("0")


def _trend(current: Decimal, previous: Decimal) -> str:
    if current > previous:
        return TREND_INCREASE
    if current < previous:
        return TREND_DECREASE
    return TREND_STABLE


def category_comparisons(
    transactions: List[Transaction], today: Optional[date] = None
) -> List[Dict]:
    """Compare each category's spending this month with earlier months.

    The reference month is the calendar month of ``today``; it is compared
    with the previous calendar month and with the month six months earlier.
    Whole calendar months are compared, even when the current month is
    still in progress.

    Returns:
        One dict per category with any spending in the three months, sorted
        by current total (largest first), with keys:
        - "category"
        - "current", "previous", "six_months_ago": expense totals (Decimal)
        - "change_previous", "change_six_months": percent changes (Decimal)
        - "trend_previous", "trend_six_months": "increase", "decrease" or "stable"
    """
    reference = (today or date.today()).replace(day=1)
    previous_month = reference - relativedelta(months=1)
    six_months_ago = reference - relativedelta(months=6)

    current = category_spending_in_month(transactions, reference.year, reference.month)
    previous = category_spending_in_month(
        transactions, previous_month.year, previous_month.month
    )
    older = category_spending_in_month(
        transactions, six_months_ago.year, six_months_ago.month
    )

    comparisons = []
    for category in set(current) | set(previous) | set(older):
        now = current.get(category, Decimal("0"))
        before = previous.get(category, Decimal("0"))
        then = older.get(category, Decimal("0"))
        if now <= 0 and before <= 0 and then <= 0:
            continue

        comparisons.append(
            {
                "category": category,
                "current": now,
                "previous": before,
                "six_months_ago": then,
                "change_previous": percent_change(now, before),
                "change_six_months": percent_change(now, then),
                "trend_previous": _trend(now, before),
                "trend_six_months": _trend(now, then),
            }
        )

    comparisons.sort(key=lambda c: (-c["current"], c["category"]))
    return comparisons


def latest_balance(transactions: List[Transaction]) -> Optional[Decimal]:
    """Balance reported by the most recently appended transaction."""
    if not transactions:
        return None
    return transactions[-1].balance
