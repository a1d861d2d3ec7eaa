"""End-to-end import: read CSV rows, parse them, write the valid ones."""

import csv
import logging
from dataclasses import dataclass, field
from pathlib import Path

from ledgerdb import DatabaseService
from ledger_ingest.errors import RowError
from ledger_ingest.records import ParsedRow, parse_rows
from ledger_ingest.schema import DEFAULT_TABLE, ledger_table_ddl
from ledger_ingest.source import discover_files, read_rows
from ledger_ingest.writer import DEFAULT_CHUNK_SIZE, BatchedWriter, WriteReport

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SkippedRow:
    path: Path
    line_number: int
    raw: str
    error: RowError

    def __str__(self) -> str:
        return f"{self.path}:{self.line_number}: {self.error} -- {self.raw}"


@dataclass
class ImportReport:
    files_read: int = 0
    files_failed: list[Path] = field(default_factory=list)
    rows_read: int = 0
    skipped: list[SkippedRow] = field(default_factory=list)
    writes: WriteReport = field(default_factory=WriteReport)

    @property
    def rows_skipped(self) -> int:
        return len(self.skipped)

    @property
    def inserted(self) -> int:
        return self.writes.inserted

    @property
    def conflicts(self) -> int:
        return self.writes.conflicts

    @property
    def failed(self) -> int:
        return self.writes.failed

    def summary(self) -> str:
        return (
            f"files read: {self.files_read}, files failed: {len(self.files_failed)}, "
            f"rows read: {self.rows_read}, rows skipped: {self.rows_skipped}, "
            f"inserted: {self.inserted}, already present: {self.conflicts}, "
            f"failed: {self.failed}"
        )


def ensure_schema(service: DatabaseService, table: str = DEFAULT_TABLE) -> None:
    """Create the ledger table and its indexes if they don't exist."""
    logger.info("Initializing table %s.", table)
    service.execute_ddl(ledger_table_ddl(table))


def import_file(
    file_path: str | Path,
    writer: BatchedWriter,
    report: ImportReport,
) -> None:
    """Import one CSV file, adding its outcome to ``report``.

    The whole file is parsed before anything is written, so a file that cannot
    be read (I/O, encoding or CSV errors) writes nothing.
    """
    path = Path(file_path)
    logger.info("Reading csv records from file %s", path.resolve())
    try:
        parsed = parse_rows(read_rows(path))
    except (OSError, UnicodeDecodeError, csv.Error) as e:
        logger.error("Could not read csv file %s: %s", path, e)
        report.files_failed.append(path)
        return

    records: list[ParsedRow] = []
    for row in parsed:
        if row.ok:
            records.append(row)
            continue
        skipped = SkippedRow(row.source.path, row.source.line_number, row.source.raw, row.outcome)
        logger.warning("Skipping row %s", skipped)
        report.skipped.append(skipped)

    report.files_read += 1
    report.rows_read += len(parsed)
    logger.info(
        "Read %d records from %s. %d rows ignored because they could not be parsed.",
        len(records),
        path.name,
        len(parsed) - len(records),
    )
    writer.write(records, report.writes)


def run_import(
    service: DatabaseService,
    source: str | Path,
    table: str = DEFAULT_TABLE,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    report: ImportReport | None = None,
) -> ImportReport:
    """Import a CSV file, or every CSV file in a directory, into ``table``.

    Files are processed one after another in discover_files() order. Pass a
    ``report`` to keep the counts gathered so far if the run is aborted by a
    DatabaseConnectionError.
    """
    writer = BatchedWriter(service, table, chunk_size)
    report = report if report is not None else ImportReport()
    for path in discover_files(source):
        import_file(path, writer, report)
    logger.info("Import complete: %s", report.summary())
    return report
