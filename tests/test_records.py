"""Tests for the row parser."""

from datetime import date
from pathlib import Path

import pytest

from conftest import ledger_row
from ledger_ingest.errors import CurrencyParseError, DateParseError, RowError, RowErrorKind
from ledger_ingest.records import TransactionRecord, parse_row, parse_rows
from ledger_ingest.source import SourceRow


class TestParseRow:
    def test_full_row(self):
        row = [
            "Checking", "3", "9/10/2021", "$ (12.33)", "$ 2,412.67", "Corner Cafe",
            "4411", "Debit Card", "Food", "Coffee", "oat milk",
        ]
        record = parse_row(row)
        assert isinstance(record, TransactionRecord)
        assert record.key == ("Checking", 3)
        assert record.tx_date == date(2021, 9, 10)
        assert record.amount.canonical() == "-12.3300"
        assert record.balance.canonical() == "2412.6700"
        assert record.vendor == "Corner Cafe"
        assert record.digits == "4411"
        assert record.transaction_type == "Debit Card"
        assert (record.category, record.subcategory, record.notes) == ("Food", "Coffee", "oat milk")

    def test_cells_are_trimmed(self):
        record = parse_row(ledger_row(" 7 ", account="  Savings ", vendor="  Bank  "))
        assert record.account == "Savings"
        assert record.tx_id == 7
        assert record.vendor == "Bank"

    def test_empty_optionals_are_none(self):
        record = parse_row(ledger_row(1, digits=" ", category="", subcategory="", notes=""))
        assert record.digits is None
        assert record.category is None
        assert record.subcategory is None
        assert record.notes is None

    def test_short_row_missing_optional_tail(self):
        record = parse_row(ledger_row(1)[:8])
        assert isinstance(record, TransactionRecord)
        assert record.category is None
        assert record.notes is None

    def test_trailing_empty_cells_tolerated(self):
        assert isinstance(parse_row(ledger_row(1) + ["", " "]), TransactionRecord)

    def test_extra_columns_rejected(self):
        error = parse_row(ledger_row(1) + ["surprise"])
        assert isinstance(error, RowError)
        assert error.kind is RowErrorKind.UNEXPECTED_COLUMNS

    @pytest.mark.parametrize(
        "overrides, field",
        [
            ({"account": " "}, "account"),
            ({"date": ""}, "tx_date"),
            ({"amount": ""}, "amount"),
            ({"balance": ""}, "balance"),
            ({"vendor": ""}, "vendor"),
            ({"type": ""}, "transaction_type"),
        ],
    )
    def test_missing_required_field(self, overrides, field):
        error = parse_row(ledger_row(1, **overrides))
        assert isinstance(error, RowError)
        assert error.kind is RowErrorKind.MISSING_REQUIRED_FIELD
        assert error.field == field

    def test_missing_tx_id(self):
        error = parse_row(ledger_row(""))
        assert error.kind is RowErrorKind.MISSING_REQUIRED_FIELD
        assert error.field == "tx_id"

    def test_short_row_missing_required(self):
        error = parse_row(["Checking", "1", "9/1/2021"])
        assert error.kind is RowErrorKind.MISSING_REQUIRED_FIELD
        assert error.field == "amount"

    @pytest.mark.parametrize("tx_id", ["-1", "abc", "1.5", "2147483648", "１"])
    def test_invalid_tx_id(self, tx_id):
        error = parse_row(ledger_row(tx_id))
        assert isinstance(error, RowError)
        assert error.kind is RowErrorKind.INVALID_TX_ID

    def test_max_tx_id(self):
        assert parse_row(ledger_row("2147483647")).tx_id == 2147483647

    def test_bad_amount_is_field_parse(self):
        error = parse_row(ledger_row(1, amount="$ 12..3"))
        assert error.kind is RowErrorKind.FIELD_PARSE
        assert error.field == "amount"
        assert isinstance(error.cause, CurrencyParseError)
        assert "amount" in str(error)

    def test_bad_balance_is_field_parse(self):
        error = parse_row(ledger_row(1, balance="lots"))
        assert error.kind is RowErrorKind.FIELD_PARSE
        assert error.field == "balance"

    def test_bad_date_is_field_parse(self):
        error = parse_row(ledger_row(1, date="2021-09-23"))
        assert error.kind is RowErrorKind.FIELD_PARSE
        assert error.field == "tx_date"
        assert isinstance(error.cause, DateParseError)

    def test_as_row_binds_canonical_text(self):
        record = parse_row(ledger_row(9, date="9/23/2021", amount="$ (75.00)"))
        assert record.as_row() == (
            "Checking", 9, "2021-09-23", "-75.0000", "1000.0000", "Vendor 9",
            None, "Debit Card", "Food", None, None,
        )


class TestParseRows:
    def test_keeps_order_and_failures(self):
        path = Path("ledger.csv")
        rows = [
            SourceRow(path, 2, ledger_row(1)),
            SourceRow(path, 3, ledger_row("x")),
            SourceRow(path, 4, ledger_row(2)),
        ]
        parsed = parse_rows(rows)
        assert [p.ok for p in parsed] == [True, False, True]
        assert parsed[1].source.line_number == 3
        assert parsed[2].outcome.tx_id == 2

    def test_empty_input(self):
        assert parse_rows([]) == []
