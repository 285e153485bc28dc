from ingestion.normalizer import (
    REQUIRED_COLUMNS,
    detect_delimiter,
    find_header_line,
    normalize_key,
    remove_descriptive_header,
)
from ingestion.statement import ingest, parse_amount, parse_date, parse_statement

__all__ = [
    "REQUIRED_COLUMNS",
    "detect_delimiter",
    "find_header_line",
    "ingest",
    "normalize_key",
    "parse_amount",
    "parse_date",
    "parse_statement",
    "remove_descriptive_header",
]
