"""Ledger CSV import: parsing, validation and idempotent chunked writes."""

from ledger_ingest.currency import CurrencyAmount, parse_currency
from ledger_ingest.dates import parse_date
from ledger_ingest.pipeline import ImportReport, ensure_schema, run_import
from ledger_ingest.records import TransactionRecord, parse_row, parse_rows
from ledger_ingest.writer import BatchedWriter, WriteReport

__all__ = [
    "BatchedWriter",
    "CurrencyAmount",
    "ImportReport",
    "TransactionRecord",
    "WriteReport",
    "ensure_schema",
    "parse_currency",
    "parse_date",
    "parse_row",
    "parse_rows",
    "run_import",
]
