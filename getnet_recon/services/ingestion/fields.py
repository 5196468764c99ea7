"""Field decoders for positional settlement data.

These functions turn raw fixed-width substrings into dates and amounts.
None of them raise: a malformed field decodes to ``None`` (dates) or zero
(amounts and counters), because acquirer files routinely contain short or
damaged lines and one bad field must not cost the rest of the record.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Optional

from getnet_recon.services.ingestion.layout import Span

CENTS = Decimal("0.01")
ZERO = Decimal("0.00")

# How far ahead a zero may look for a non-zero digit to count as embedded
_EMBEDDED_ZERO_LOOKAHEAD = 4


def _is_ascii_digits(value: str) -> bool:
    return value.isascii() and value.isdigit()


def read_field(line: str, span: Span) -> str:
    """Return the trimmed slice of ``line`` at ``span``.

    A line shorter than the span's end offset yields an empty string rather
    than a partial field.
    """
    start, end = span
    if len(line) < end:
        return ""
    return line[start:end].strip()


def read_raw(line: str, span: Span) -> str:
    """Like :func:`read_field` but without trimming."""
    start, end = span
    if len(line) < end:
        return ""
    return line[start:end]


def parse_fixed_date(value: str) -> Optional[str]:
    """Convert a ``DDMMAAAA`` date to ``YYYY-MM-DD``.

    Args:
        value: Raw date field from the settlement file.

    Returns:
        The ISO date string, or None when the field is not eight digits or
        the day/month are out of range.
    """
    stripped = value.strip()
    if len(stripped) != 8 or not _is_ascii_digits(stripped):
        return None
    day, month, year = stripped[0:2], stripped[2:4], stripped[4:8]
    if not (1 <= int(day) <= 31 and 1 <= int(month) <= 12):
        return None
    return f"{year}-{month}-{day}"


def parse_amount_right_aligned(value: str) -> Decimal:
    """Parse a zero-padded amount whose last two digits are the cents.

    ``"000000001234"`` -> ``Decimal("12.34")``.  Empty or non-numeric input
    yields ``0.00``.
    """
    stripped = value.strip()
    unsigned = stripped[1:] if stripped[:1] in ("+", "-") else stripped
    if not _is_ascii_digits(unsigned):
        return ZERO
    return (Decimal(int(stripped)) / 100).quantize(CENTS)


def parse_amount_left_aligned(value: str) -> Decimal:
    """Parse an amount whose significant digits come first, zero padded after.

    ``"4521000000000"`` -> ``Decimal("45.21")``.

    Leading zeros are skipped.  After the first significant digit a ``0``
    ends the value unless a non-zero digit follows within the next four
    characters, in which case it is an embedded zero (``"4501000"`` ->
    ``45.01``).  Any non-digit character ends the scan.
    """
    stripped = value.strip()
    digits: list[str] = []

    for idx, char in enumerate(stripped):
        if not _is_ascii_digits(char):
            break
        if char != "0":
            digits.append(char)
            continue
        if not digits:
            continue
        lookahead = stripped[idx + 1 : idx + 1 + _EMBEDDED_ZERO_LOOKAHEAD]
        if any(_is_ascii_digits(c) and c != "0" for c in lookahead):
            digits.append(char)
        else:
            break

    if not digits:
        return ZERO
    return (Decimal(int("".join(digits))) / 100).quantize(CENTS)


def parse_count(value: str) -> int:
    """Parse an integer counter, returning 0 for empty or non-numeric input."""
    stripped = value.strip()
    if not _is_ascii_digits(stripped):
        return 0
    return int(stripped)
