"""Exceptions raised by Painel."""

from typing import List


class PainelError(Exception):
    """Base exception for Painel errors"""

    pass


class StatementError(PainelError, ValueError):
    """A bank statement could not be turned into transactions"""

    pass


class EmptyInputError(StatementError):
    """The statement has no usable text or no data rows"""

    pass


class MissingColumnsError(StatementError):
    """One or more required statement columns could not be resolved.

    Attributes:
        found_columns: Raw column names present in the statement header.
    """

    def __init__(self, found_columns: List[str]):
        self.found_columns = list(found_columns)
        super().__init__(
            "Required columns not found in CSV. "
            f"Columns found: {', '.join(self.found_columns)}"
        )


class MalformedStatementError(StatementError):
    """The CSV reader rejected the statement text"""

    pass


class StoreError(PainelError):
    """Persisted store could not be read"""

    pass


class StoreWriteError(StoreError):
    """Persisted store could not be written; nothing was saved"""

    pass
