"""Locate the real header row of a bank statement export.

Brazilian bank exports often start with a few banner lines (account holder,
period, agency) before the actual column header. These helpers strip that
preamble so the CSV reader sees the header on the first line.
"""

import logging
import re
import unicodedata
from typing import List

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = (
    "data lancamento",
    "historico",
    "descricao",
    "valor",
    "saldo",
)

_BOM = "\ufeff"
_LINE_SPLIT = re.compile(r"\r?\n")


def normalize_key(key: str) -> str:
    """Normalize a column name: drop BOM and diacritics, trim, lowercase."""
    key = key.replace(_BOM, "")
    decomposed = unicodedata.normalize("NFD", key)
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return stripped.strip().lower()


def find_header_line(lines: List[str]) -> int:
    """Find the index of the first line carrying every required column.

    Each non-blank line is split by comma, then by semicolon.

    Returns:
        Index of the header line, or -1 if none qualifies.
    """
    for index, line in enumerate(lines):
        if not line.strip():
            continue

        for delimiter in (",", ";"):
            columns = {
                normalize_key(col.strip().strip('"')) for col in line.split(delimiter)
            }
            if all(col in columns for col in REQUIRED_COLUMNS):
                return index

    return -1


def remove_descriptive_header(text: str) -> str:
    """Drop banner lines that precede the column header.

    Returns:
        Text starting at the header line, or the original text unchanged
        when no header line is found.
    """
    lines = _LINE_SPLIT.split(text.replace(_BOM, ""))
    header_index = find_header_line(lines)

    if header_index == -1:
        logger.warning("No header line with the required columns was found")
        return text

    if header_index > 0:
        logger.info(f"Skipped {header_index} banner line(s) before the header")

    return "\n".join(lines[header_index:])


def detect_delimiter(text: str) -> str:
    """Semicolon if the first line has one, comma otherwise."""
    first_line = _LINE_SPLIT.split(text, maxsplit=1)[0]
    return ";" if ";" in first_line else ","
