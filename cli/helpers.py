"""Formatting and lookup helpers shared by CLI commands."""

from decimal import Decimal
from typing import Iterable, Optional


def format_brl(value: Optional[Decimal], decimals: int = 2) -> str:
    """Format a value as Brazilian currency, e.g. R$ -1.234,56."""
    if value is None:
        return "(invalid)"
    formatted = f"{value:,.{decimals}f}"
    # 1,234.56 -> 1.234,56
    formatted = formatted.replace(",", "_").replace(".", ",").replace("_", ".")
    return f"R$ {formatted}"


def format_percent(value: Decimal) -> str:
    return f"{'+' if value >= 0 else ''}{value:.1f}%"


def truncate(text: str, width: int) -> str:
    return text if len(text) <= width else text[: width - 3] + "..."


def resolve_id(prefix: str, ids: Iterable[str]) -> Optional[str]:
    """Expand a unique ID prefix (as printed in listings) to the full ID.

    Returns:
        The matching ID, or None if no ID or more than one ID matches.
    """
    matches = [i for i in ids if i.startswith(prefix)]
    if len(matches) == 1:
        return matches[0]
    return None
