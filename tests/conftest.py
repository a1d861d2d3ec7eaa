"""Shared test fixtures."""

import csv
from pathlib import Path

import pytest

from ledgerdb import create_service
from ledger_ingest.pipeline import ensure_schema
from ledger_ingest.schema import CSV_HEADER

EXAMPLE_LEDGER = Path(__file__).parent.parent / "data" / "example_ledger.csv"

REJECT_TRIGGER = """
CREATE TRIGGER reject_vendor BEFORE INSERT ON transactions
WHEN NEW.vendor = 'REJECT'
BEGIN
    SELECT RAISE(ABORT, 'vendor rejected');
END;
"""


def ledger_row(tx_id, account="Checking", date="9/1/2021", amount="$ (10.00)", **overrides):
    """A valid CSV row in export column order; keyword overrides replace cells."""
    cells = {
        "account": account,
        "tx_id": str(tx_id),
        "date": date,
        "amount": amount,
        "balance": "$ 1,000.00",
        "vendor": f"Vendor {tx_id}",
        "digits": "",
        "type": "Debit Card",
        "category": "Food",
        "subcategory": "",
        "notes": "",
    }
    cells.update(overrides)
    return list(cells.values())


@pytest.fixture
def db_service(tmp_path):
    """Provide a fresh SQLite DatabaseService for each test."""
    db_path = tmp_path / "test.db"
    service = create_service(f"sqlite:///{db_path}")
    service.connect()
    yield service
    service.close()


@pytest.fixture
def ledger_db(db_service):
    """db_service with an empty `transactions` table."""
    ensure_schema(db_service, "transactions")
    return db_service


@pytest.fixture
def write_csv(tmp_path):
    """Write rows (plus the standard header) to a CSV file and return its path."""

    def _write(rows, name="ledger.csv", header=CSV_HEADER, directory=None):
        csv_file = (directory or tmp_path) / name
        with open(csv_file, "w", newline="") as f:
            writer = csv.writer(f)
            if header is not None:
                writer.writerow(header)
            writer.writerows(rows)
        return csv_file

    return _write


def count_rows(service, table="transactions"):
    with service.transaction():
        rows = service.execute(f"SELECT COUNT(*) AS cnt FROM {table}")
    return rows[0]["cnt"]
