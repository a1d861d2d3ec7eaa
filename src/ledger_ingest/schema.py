"""Ledger table schema and CSV layout."""

from ledgerdb import validate_identifier

DEFAULT_TABLE = "transactions"

# Column order of the exported CSV; the header row itself is informational.
CSV_HEADER = (
    "ACCOUNT",
    "ID",
    "Date",
    "Amount",
    "Balance",
    "Vendor",
    "Digits",
    "Type",
    "Category",
    "Subcategory",
    "Notes",
)

LEDGER_COLUMNS = [
    "account",
    "tx_id",
    "tx_date",
    "amount",
    "balance",
    "vendor",
    "digits",
    "transaction_type",
    "category",
    "subcategory",
    "notes",
]
LEDGER_CONFLICT_COLUMNS = ["account", "tx_id"]

_LEDGER_TABLE_DDL = """
CREATE TABLE IF NOT EXISTS {table} (
    account          TEXT          NOT NULL,
    tx_id            INTEGER       NOT NULL,
    tx_date          DATE          NOT NULL,
    amount           NUMERIC(13,4) NOT NULL,
    balance          NUMERIC(13,4) NOT NULL,
    vendor           TEXT          NOT NULL,
    digits           TEXT          NULL,
    transaction_type TEXT          NOT NULL,
    category         TEXT          NULL,
    subcategory      TEXT          NULL,
    notes            TEXT          NULL,
    PRIMARY KEY (account, tx_id)
);
CREATE INDEX IF NOT EXISTS idx_{index_prefix}_tx_date ON {table}(tx_date);
CREATE INDEX IF NOT EXISTS idx_{index_prefix}_vendor ON {table}(vendor);
CREATE INDEX IF NOT EXISTS idx_{index_prefix}_category ON {table}(category);
CREATE INDEX IF NOT EXISTS idx_{index_prefix}_tx_type ON {table}(transaction_type);
"""


def ledger_table_ddl(table: str = DEFAULT_TABLE) -> str:
    """Render the CREATE TABLE / CREATE INDEX script for ``table``."""
    validate_identifier(table)
    return _LEDGER_TABLE_DDL.format(table=table, index_prefix=table.replace(".", "_"))
