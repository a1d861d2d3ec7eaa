"""Fixed-precision currency amounts parsed from ledger export cells.

Amounts are kept as an unsigned count of minor units (ten-thousandths) plus a
sign, matching the NUMERIC(13,4) columns they are stored in. Nothing here
rounds: a cell with more fractional digits than PRECISION is rejected.
"""

import re
from dataclasses import dataclass
from decimal import Decimal

from ledger_ingest.errors import CurrencyParseError

PRECISION = 4
SCALE = 10**PRECISION
# NUMERIC(13,4) leaves 9 integer digits.
MAX_MINOR_UNITS = 10**13 - 1

_BODY = re.compile(r"^(?P<whole>\d[\d,]*)?(?:\.(?P<frac>\d*))?$", re.ASCII)


@dataclass(frozen=True)
class CurrencyAmount:
    negative: bool
    minor_units: int

    def __post_init__(self):
        if self.minor_units < 0:
            raise ValueError("minor_units must be non-negative; use negative=True for the sign")
        if self.minor_units > MAX_MINOR_UNITS:
            raise ValueError(f"{self.minor_units} minor units exceeds NUMERIC(13,{PRECISION})")
        if self.minor_units == 0 and self.negative:
            object.__setattr__(self, "negative", False)

    @classmethod
    def zero(cls) -> "CurrencyAmount":
        return cls(negative=False, minor_units=0)

    def canonical(self) -> str:
        """Render as ``[-]<whole>.<4 digits>``, e.g. ``-75.0000``."""
        whole, frac = divmod(self.minor_units, SCALE)
        sign = "-" if self.negative else ""
        return f"{sign}{whole}.{frac:0{PRECISION}d}"

    def to_decimal(self) -> Decimal:
        value = Decimal(self.minor_units).scaleb(-PRECISION)
        return -value if self.negative else value

    def __str__(self) -> str:
        return self.canonical()


def _strip_dollar(body: str, seen: bool) -> tuple[str, bool]:
    if body.startswith("$"):
        if seen:
            raise ValueError("more than one currency symbol")
        return body[1:].strip(), True
    return body, seen


def parse_currency(raw: str) -> CurrencyAmount:
    """Parse a ledger currency cell such as ``$ 12.33`` or ``$ (75.00)``.

    Accepted forms: optional leading ``-``, optional ``$``, optional
    surrounding parentheses (negative), comma thousands separators and up to
    PRECISION fractional digits. The accounting dash (``-`` or ``$ -``) reads
    as zero.

    Raises:
        CurrencyParseError: the cell is empty, malformed, carries too many
            fractional digits or more than one sign, or does not fit the
            column.
    """
    text = (raw or "").strip()
    if not text:
        raise CurrencyParseError(raw or "", "empty amount")
    if text.replace(" ", "") in ("-", "$-"):
        return CurrencyAmount.zero()

    try:
        negative = False
        body, dollar = _strip_dollar(text, False)
        if body.startswith("-"):
            negative = True
            body, dollar = _strip_dollar(body[1:].strip(), dollar)
        if body.startswith("("):
            if negative:
                raise ValueError("more than one sign")
            if not body.endswith(")"):
                raise ValueError("unbalanced parentheses")
            negative = True
            body, dollar = _strip_dollar(body[1:-1].strip(), dollar)
        if body.startswith("-"):
            raise ValueError("more than one sign")
    except ValueError as e:
        raise CurrencyParseError(raw, str(e)) from None

    match = _BODY.match(body)
    if match is None or not (match.group("whole") or match.group("frac")):
        raise CurrencyParseError(raw, "malformed amount")

    whole = (match.group("whole") or "0").replace(",", "")
    frac = match.group("frac") or ""
    if len(frac) > PRECISION:
        raise CurrencyParseError(raw, f"more than {PRECISION} fractional digits")

    minor_units = int(whole) * SCALE + int(frac.ljust(PRECISION, "0"))
    if minor_units > MAX_MINOR_UNITS:
        raise CurrencyParseError(raw, f"amount exceeds NUMERIC(13,{PRECISION})")
    return CurrencyAmount(negative=negative, minor_units=minor_units)
