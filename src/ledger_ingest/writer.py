"""Chunked, idempotent writes of ledger records."""

import logging
from dataclasses import dataclass, field
from itertools import islice
from typing import Iterable, Iterator

from ledgerdb import DatabaseService, StatementError, validate_identifier
from ledger_ingest.errors import WriteError
from ledger_ingest.records import ParsedRow, TransactionRecord
from ledger_ingest.schema import DEFAULT_TABLE, LEDGER_COLUMNS, LEDGER_CONFLICT_COLUMNS

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 50


@dataclass
class WriteReport:
    attempted: int = 0
    inserted: int = 0
    conflicts: int = 0
    failures: list[WriteError] = field(default_factory=list)
    chunks: int = 0

    @property
    def failed(self) -> int:
        return len(self.failures)


def chunked(items: Iterable, chunk_size: int) -> Iterator[list]:
    """Yield lists of at most chunk_size items; the last one may be shorter."""
    it = iter(items)
    while chunk := list(islice(it, chunk_size)):
        yield chunk


class BatchedWriter:
    """Writes records chunk by chunk, one ``ON CONFLICT DO NOTHING`` insert each.

    Every insert is committed on its own. A chunk is only a unit of progress
    reporting, not a transaction: if the run dies mid-chunk the rows already
    written stay, and re-running the import skips them as conflicts.
    """

    def __init__(
        self,
        service: DatabaseService,
        table: str = DEFAULT_TABLE,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ):
        if chunk_size < 1:
            raise ValueError(f"chunk_size must be >= 1, got {chunk_size}")
        self._service = service
        self._table = validate_identifier(table)
        self._chunk_size = chunk_size

    def write(
        self,
        records: Iterable[TransactionRecord | ParsedRow],
        report: WriteReport | None = None,
    ) -> WriteReport:
        """Insert records in order and report what happened to each.

        Records may be passed as the ParsedRows they came from, so a failed
        insert can be traced back to its file and line.

        Per-record StatementErrors are collected in the report. A
        DatabaseConnectionError is not caught; counts up to that point are
        already in ``report`` when one is passed in.
        """
        report = report if report is not None else WriteReport()
        for i, chunk in enumerate(chunked(records, self._chunk_size)):
            logger.debug("Attempting to insert chunk %d of %d records.", i + 1, len(chunk))
            for item in chunk:
                self._write_one(item, report)
            report.chunks += 1
            logger.debug(
                "Chunk %d done (inserted: %d, conflicts: %d, failed: %d)",
                i + 1,
                report.inserted,
                report.conflicts,
                report.failed,
            )
        return report

    def _write_one(self, item: TransactionRecord | ParsedRow, report: WriteReport) -> None:
        source = None
        if isinstance(item, ParsedRow):
            record, source = item.outcome, item.source
        else:
            record = item
        report.attempted += 1
        try:
            with self._service.transaction():
                inserted = self._service.insert_ignore(
                    self._table, LEDGER_COLUMNS, record.as_row(), LEDGER_CONFLICT_COLUMNS
                )
        except StatementError as e:
            failure = WriteError(
                record.account,
                record.tx_id,
                str(e),
                path=source.path if source else None,
                line_number=source.line_number if source else None,
                raw=source.raw if source else None,
            )
            logger.error("Could not insert row %s", failure)
            report.failures.append(failure)
            return

        if inserted:
            report.inserted += 1
        else:
            logger.debug("Row %s/%s already present, skipped.", record.account, record.tx_id)
            report.conflicts += 1
