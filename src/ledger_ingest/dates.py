"""US-format (month/day/year) date cells."""

import re
from datetime import date, datetime

from ledger_ingest.errors import DateParseError

DATE_FORMAT = "%m/%d/%Y"

_SHAPE = re.compile(r"^\d{1,2}/\d{1,2}/\d{4}$", re.ASCII)


def parse_date(raw: str) -> date:
    """Convert M/D/YYYY (zero padding optional) to a date.

    Raises:
        DateParseError: wrong shape or delimiter, or the triple is not a real
            calendar date (month 13, February 30th, ...).
    """
    text = (raw or "").strip()
    if not _SHAPE.match(text):
        raise DateParseError(raw or "", "expected MM/DD/YYYY")
    try:
        return datetime.strptime(text, DATE_FORMAT).date()
    except ValueError as e:
        raise DateParseError(raw, str(e)) from None
