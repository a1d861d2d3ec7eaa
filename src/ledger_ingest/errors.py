"""Ledger import exception hierarchy and per-row error values.

Exceptions are raised for cell-level parse failures and for configuration or
source problems. Row-level and write-level failures are routine outcomes of an
import, so they are plain values collected into the run report.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class LedgerIngestError(Exception):
    """Base exception for all ledger import failures."""


class ConfigError(LedgerIngestError):
    """Raised for invalid runtime configuration."""


class ParseError(LedgerIngestError, ValueError):
    """Raised when a single cell cannot be parsed."""

    def __init__(self, raw: str, reason: str):
        self.raw = raw
        self.reason = reason
        super().__init__(f"Could not parse {raw!r}: {reason}")


class CurrencyParseError(ParseError):
    """Raised when a cell is not a valid currency amount."""


class DateParseError(ParseError):
    """Raised when a cell is not a valid MM/DD/YYYY date."""


class SourceError(LedgerIngestError):
    """Raised when the CSV source cannot be located."""


class SourceFileNotFound(SourceError):
    def __init__(self, path):
        super().__init__(f"File not found: {path}")


class SourceDirectoryNotFound(SourceError):
    def __init__(self, path):
        super().__init__(f"Directory not found: {path}")


class SourceDirectoryEmpty(SourceError):
    def __init__(self, path):
        super().__init__(f"Directory {path} does not contain any CSV files.")


class RowErrorKind(str, Enum):
    MISSING_REQUIRED_FIELD = "missing_required_field"
    INVALID_TX_ID = "invalid_tx_id"
    FIELD_PARSE = "field_parse"
    UNEXPECTED_COLUMNS = "unexpected_columns"


@dataclass(frozen=True)
class RowError:
    """Why a CSV row could not become a TransactionRecord."""

    kind: RowErrorKind
    field: str | None = None
    message: str = ""
    cause: ParseError | None = None

    def __str__(self) -> str:
        if self.field:
            return f"{self.kind.value} [{self.field}]: {self.message}"
        return f"{self.kind.value}: {self.message}"


@dataclass(frozen=True)
class WriteError:
    """A record whose insert failed for a reason other than a key conflict."""

    account: str
    tx_id: int
    cause: str
    path: Path | None = None
    line_number: int | None = None
    raw: str | None = None

    def __str__(self) -> str:
        text = f"{self.account}/{self.tx_id}: {self.cause}"
        if self.path is None:
            return text
        return f"{self.path}:{self.line_number}: {text} -- {self.raw}"
