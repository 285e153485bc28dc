import csv
import io
import logging
import re
from datetime import date
from decimal import Decimal
from typing import List, Optional, TextIO

from errors import EmptyInputError, MalformedStatementError, MissingColumnsError
from ingestion.normalizer import (
    REQUIRED_COLUMNS,
    detect_delimiter,
    normalize_key,
    remove_descriptive_header,
)
from models.transaction import OWNERS, Transaction, new_transaction_id

logger = logging.getLogger(__name__)

# Numeric prefix of a cell, "12abc" reads as 12
_LEADING_NUMBER = re.compile(r"-?(?:\d+(?:\.\d*)?|\.\d+)")
_NON_NUMERIC = re.compile(r"[^\d.-]")

# Pieces of an unquoted Brazilian decimal split by a comma delimiter
_INTEGER_PART = re.compile(r"^-?[\d.]*\d$")
_FRACTION_PART = re.compile(r"^\d{2}$")


def parse_amount(raw: Optional[str]) -> Decimal:
    """Parse a Brazilian formatted number ("1.234,56").

    Dots are thousands separators, the comma is the decimal separator.
    Anything that does not yield a number parses as zero.
    """
    text = str(raw or "0")
    text = text.replace(".", "").replace(",", ".", 1)
    text = _NON_NUMERIC.sub("", text)

    match = _LEADING_NUMBER.match(text)
    if not match:
        return Decimal("0")
    return Decimal(match.group())


def parse_date(raw: Optional[str], today: Optional[date] = None) -> str:
    """Convert DD/MM/YYYY to YYYY-MM-DD; other values pass through.

    A missing date becomes today's date.
    """
    value = (raw or "").strip()

    if "/" in value:
        parts = value.split("/")
        if len(parts) >= 3 and all(parts[:3]):
            day, month, year = parts[:3]
            value = f"{year}-{month.zfill(2)}-{day.zfill(2)}"

    return value or (today or date.today()).isoformat()


def _merge_split_decimals(row: List[str], width: int) -> List[str]:
    """Rejoin "-45" + "90" into "-45,90" until the row fits the header.

    Pairs are joined from the last cell backwards. Money columns trail the
    text columns, so a numeric description ("2024") is left alone.
    """
    cells = list(row)
    i = len(cells) - 2
    while len(cells) > width and i >= 0:
        left, right = cells[i].strip(), cells[i + 1].strip()
        if _INTEGER_PART.match(left) and _FRACTION_PART.match(right):
            cells[i : i + 2] = [f"{left},{right}"]
        i -= 1
    return cells


def _cell(row: List[str], index: int) -> str:
    return row[index] if index < len(row) else ""


def _read_rows(text: str, delimiter: str) -> List[List[str]]:
    try:
        return list(csv.reader(io.StringIO(text), delimiter=delimiter))
    except csv.Error as e:
        raise MalformedStatementError(f"Could not read CSV: {e}") from e


def parse_statement(
    text: str, owner: str, today: Optional[date] = None
) -> List[Transaction]:
    """Parse statement text into uncategorized transactions.

    Either every data row becomes a transaction or an error is raised;
    individual rows never abort the parse.

    Args:
        text: Full statement text, banner lines included.
        owner: Owner tag assigned to every transaction.
        today: Date used for rows without a date (defaults to today).

    Returns:
        Transactions in file order, with category unset.

    Raises:
        ValueError: If owner is unknown.
        EmptyInputError: If there is no text or no data rows.
        MissingColumnsError: If a required column is absent.
        MalformedStatementError: If the CSV cannot be read.
    """
    if owner not in OWNERS:
        raise ValueError(f"Unknown owner: {owner}")

    cleaned = remove_descriptive_header(text)
    if not cleaned.strip():
        raise EmptyInputError("CSV is empty after cleanup")

    delimiter = detect_delimiter(cleaned)
    rows = _read_rows(cleaned, delimiter)

    header = rows[0] if rows else []
    data_rows = [row for row in rows[1:] if any(cell.strip() for cell in row)]
    if not data_rows:
        raise EmptyInputError("No data found in CSV")

    key_map = {normalize_key(name): index for index, name in enumerate(header)}
    if not all(column in key_map for column in REQUIRED_COLUMNS):
        raise MissingColumnsError(header)

    date_idx = key_map["data lancamento"]
    historic_idx = key_map["historico"]
    description_idx = key_map["descricao"]
    amount_idx = key_map["valor"]
    balance_idx = key_map["saldo"]

    transactions = []
    for line_num, row in enumerate(data_rows, start=2):
        if delimiter == "," and len(row) > len(header):
            row = _merge_split_decimals(row, len(header))
            if len(row) > len(header):
                logger.warning(f"Row {line_num} has more cells than the header: {row}")

        transactions.append(
            Transaction(
                id=new_transaction_id(),
                posted_date=parse_date(_cell(row, date_idx), today),
                historic=_cell(row, historic_idx).strip(),
                description=_cell(row, description_idx).strip(),
                amount=parse_amount(_cell(row, amount_idx)),
                balance=parse_amount(_cell(row, balance_idx)),
                owner=owner,
            )
        )

    logger.info(f"Successfully parsed {len(transactions)} transactions for {owner}")
    return transactions


def ingest(source: TextIO, owner: str) -> List[Transaction]:
    """
    Ingest a Brazilian bank statement CSV export.

    Expected format:
    - Optional banner lines (account holder, period, ...): ignored
    - Header row with Data Lançamento, Histórico, Descrição, Valor, Saldo
      (any order, any case, accents optional), comma or semicolon separated
    - Transaction rows: DD/MM/YYYY dates, 1.234,56 numbers

    The whole source is read before parsing starts.
    """
    return parse_statement(source.read(), owner)
