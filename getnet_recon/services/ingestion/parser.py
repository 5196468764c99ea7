"""Getnet positional settlement file parser."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from getnet_recon.core.logging import get_logger
from getnet_recon.schemas.records import Header, Record
from getnet_recon.services.ingestion.decoder import SkippedLine, decode_line

logger = get_logger(__name__)

DEFAULT_ENCODING = "latin-1"


@dataclass(frozen=True)
class ParseDiagnostic:
    """A problem found on one line.  Collected, never raised."""

    line_number: int
    severity: str
    message: str


@dataclass
class ParseResult:
    """Everything extracted from one settlement file.

    Attributes:
        records: Decoded records in file order.
        diagnostics: One entry per line that could not be decoded.
        skipped_lines: Number of non-blank lines that produced no record.
        total_lines: Number of non-blank lines seen.
    """

    records: List[Record] = field(default_factory=list)
    diagnostics: List[ParseDiagnostic] = field(default_factory=list)
    skipped_lines: int = 0
    total_lines: int = 0

    @property
    def header(self) -> Optional[Header]:
        return next((r for r in self.records if isinstance(r, Header)), None)


def _to_text(content: bytes | str, encoding: str) -> str:
    if isinstance(content, str):
        return content
    return content.decode(encoding, errors="replace")


def parse_file(content: bytes | str, encoding: str = DEFAULT_ENCODING) -> ParseResult:
    """Decode every line of a settlement file.

    Blank lines are ignored.  A line that cannot be decoded is recorded as a
    diagnostic and the parse moves on: one damaged line never costs the
    rest of the file.

    Args:
        content: Raw file bytes (decoded with ``encoding``) or text.
        encoding: Character set of the file when ``content`` is bytes.

    Returns:
        A ``ParseResult`` with the records and the per-line diagnostics.
    """
    result = ParseResult()
    text = _to_text(content, encoding)

    for line_number, raw_line in enumerate(text.split("\n"), start=1):
        line = raw_line.rstrip("\r")
        if not line.strip():
            continue
        result.total_lines += 1

        try:
            outcome = decode_line(line)
        except Exception as exc:
            result.skipped_lines += 1
            result.diagnostics.append(
                ParseDiagnostic(line_number, "error", f"failed to decode line: {exc}")
            )
            logger.error("Failed to decode line %d: %s", line_number, exc)
            continue

        if isinstance(outcome, SkippedLine):
            result.skipped_lines += 1
            result.diagnostics.append(
                ParseDiagnostic(line_number, "warning", outcome.reason)
            )
            logger.warning("Skipping line %d: %s", line_number, outcome.reason)
            continue

        result.records.append(outcome)
        logger.debug("Decoded line %d as record type %d", line_number, outcome.record_type)

    return result


class SettlementFileParser:
    """Parser for Getnet settlement files (layout V10.1, one record per line).

    Record types:
        0 header, 1 sales summary, 2 sales voucher, 3 financial adjustment,
        4 anticipation, 5 receivables negotiation, 6 receivable unit,
        9 trailer
    """

    acquirer_name: str = "Getnet"

    def __init__(self, encoding: str = DEFAULT_ENCODING) -> None:
        self.encoding = encoding

    def parse(self, file_content: bytes | str, filename: str) -> ParseResult:
        """Parse a settlement file and log a one-line summary for it."""
        result = parse_file(file_content, self.encoding)
        logger.info(
            "Settlement parse complete for %s: %d records decoded, "
            "%d lines skipped out of %d",
            filename,
            len(result.records),
            result.skipped_lines,
            result.total_lines,
        )
        return result
