"""CSV sources: locating ledger files and reading their data rows."""

import csv
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator

from ledger_ingest.errors import SourceDirectoryEmpty, SourceDirectoryNotFound, SourceFileNotFound
from ledger_ingest.schema import CSV_HEADER

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SourceRow:
    """One data row of a CSV file. ``line_number`` counts CSV records, header = 1."""

    path: Path
    line_number: int
    cells: list[str]

    @property
    def raw(self) -> str:
        return ",".join(self.cells)


def _csv_files(directory: Path) -> list[Path]:
    return sorted(p for p in directory.iterdir() if p.is_file() and p.suffix.lower() == ".csv")


def resolve_source(path: str | Path, is_directory: bool = False) -> Path:
    """Check that a --file / --directory argument points at something importable."""
    p = Path(path)
    if is_directory:
        if not p.is_dir():
            raise SourceDirectoryNotFound(p)
        if not _csv_files(p):
            raise SourceDirectoryEmpty(p)
    elif not p.is_file():
        raise SourceFileNotFound(p)
    return p


def discover_files(path: str | Path) -> list[Path]:
    """Return the CSV files to import, in the order they will be processed.

    A file is returned as-is. For a directory, the ``*.csv`` files directly
    inside it are returned sorted by name so runs are reproducible.
    """
    p = Path(path)
    if p.is_dir():
        files = _csv_files(p)
        if not files:
            raise SourceDirectoryEmpty(p)
        return files
    if not p.is_file():
        raise SourceFileNotFound(p)
    return [p]


def header_matches(cells: list[str]) -> bool:
    names = tuple(cell.strip().lower() for cell in cells)
    return names == tuple(name.lower() for name in CSV_HEADER)


def read_rows(file_path: str | Path) -> Iterator[SourceRow]:
    """Yield the data rows of a CSV file.

    Exactly one leading row is treated as the header and discarded. Blank rows
    are skipped. A file holding only a header yields nothing.
    """
    path = Path(file_path)
    with open(path, newline="", encoding="utf-8-sig") as f:
        reader = csv.reader(f)
        header = next(reader, None)
        if header is None:
            return
        if not header_matches(header):
            logger.warning("Unexpected header in %s: %s", path, header)

        for row_num, row in enumerate(reader, start=2):
            if not row or all(cell.strip() == "" for cell in row):
                continue
            yield SourceRow(path=path, line_number=row_num, cells=row)
