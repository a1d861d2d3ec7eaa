"""Typed ledger records and the row parser that builds them."""

import re
from dataclasses import dataclass
from datetime import date
from typing import Callable, Iterable

from ledger_ingest.currency import CurrencyAmount, parse_currency
from ledger_ingest.dates import parse_date
from ledger_ingest.errors import ParseError, RowError, RowErrorKind
from ledger_ingest.schema import CSV_HEADER
from ledger_ingest.source import SourceRow

# Upper bound of the INTEGER tx_id column.
MAX_TX_ID = 2**31 - 1

_DIGITS = re.compile(r"^\d+$", re.ASCII)


@dataclass(frozen=True)
class TransactionRecord:
    account: str
    tx_id: int
    tx_date: date
    amount: CurrencyAmount
    balance: CurrencyAmount
    vendor: str
    digits: str | None
    transaction_type: str
    category: str | None
    subcategory: str | None
    notes: str | None

    @property
    def key(self) -> tuple[str, int]:
        return (self.account, self.tx_id)

    def as_row(self) -> tuple:
        """Bind parameters in LEDGER_COLUMNS order.

        Amounts go out as their canonical text and the date as ISO text; the
        NUMERIC and DATE columns coerce them without loss.
        """
        return (
            self.account,
            self.tx_id,
            self.tx_date.isoformat(),
            self.amount.canonical(),
            self.balance.canonical(),
            self.vendor,
            self.digits,
            self.transaction_type,
            self.category,
            self.subcategory,
            self.notes,
        )


@dataclass(frozen=True)
class ParsedRow:
    source: SourceRow
    outcome: TransactionRecord | RowError

    @property
    def ok(self) -> bool:
        return isinstance(self.outcome, TransactionRecord)


def _cell(cells: list[str], index: int) -> str | None:
    if index >= len(cells):
        return None
    value = cells[index].strip()
    return value or None


def _parse_tx_id(text: str) -> int | RowError:
    if not _DIGITS.match(text):
        return RowError(
            RowErrorKind.INVALID_TX_ID, "tx_id", f"{text!r} is not a non-negative integer"
        )
    tx_id = int(text)
    if tx_id > MAX_TX_ID:
        return RowError(RowErrorKind.INVALID_TX_ID, "tx_id", f"{tx_id} exceeds {MAX_TX_ID}")
    return tx_id


def _parse_field(field: str, text: str, parser: Callable):
    try:
        return parser(text)
    except ParseError as e:
        return RowError(RowErrorKind.FIELD_PARSE, field, e.reason, cause=e)


def parse_row(cells: list[str]) -> TransactionRecord | RowError:
    """Map one headerless CSV row onto a TransactionRecord.

    Cells are positional (see CSV_HEADER). Required cells must be non-empty
    after trimming; empty optional cells become None, as do optional cells
    missing from the end of a short row. Malformed input is returned as a
    RowError rather than raised.
    """
    width = len(CSV_HEADER)
    extra = [c for c in cells[width:] if c.strip()]
    if extra:
        return RowError(
            RowErrorKind.UNEXPECTED_COLUMNS,
            message=f"expected {width} columns, got {len(cells)}",
        )

    (
        account,
        tx_id,
        tx_date,
        amount,
        balance,
        vendor,
        digits,
        transaction_type,
        category,
        subcategory,
        notes,
    ) = (_cell(cells, i) for i in range(width))

    required = {
        "account": account,
        "tx_id": tx_id,
        "tx_date": tx_date,
        "amount": amount,
        "balance": balance,
        "vendor": vendor,
        "transaction_type": transaction_type,
    }
    for field, value in required.items():
        if value is None:
            return RowError(RowErrorKind.MISSING_REQUIRED_FIELD, field, "required value is empty")

    parsed = {
        "tx_id": _parse_tx_id(tx_id),
        "tx_date": _parse_field("tx_date", tx_date, parse_date),
        "amount": _parse_field("amount", amount, parse_currency),
        "balance": _parse_field("balance", balance, parse_currency),
    }
    for value in parsed.values():
        if isinstance(value, RowError):
            return value

    return TransactionRecord(
        account=account,
        vendor=vendor,
        digits=digits,
        transaction_type=transaction_type,
        category=category,
        subcategory=subcategory,
        notes=notes,
        **parsed,
    )


def parse_rows(rows: Iterable[SourceRow]) -> list[ParsedRow]:
    """Parse every row, keeping failures alongside successes in input order."""
    return [ParsedRow(source=row, outcome=parse_row(row.cells)) for row in rows]
