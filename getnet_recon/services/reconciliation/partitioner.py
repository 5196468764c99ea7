"""Groups decoded records by establishment.

A settlement file mixes records from every establishment of the merchant.
The header and trailer describe the whole file, so they are copied into
every bundle; everything else lands only in the bundle of its own
establishment code.
"""

from __future__ import annotations

from typing import Iterable, List

from getnet_recon.core.logging import get_logger
from getnet_recon.schemas.records import (
    Anticipation,
    FinancialAdjustment,
    Header,
    ReceivablesNegotiation,
    ReceivableUnit,
    Record,
    SalesSummary,
    SalesVoucher,
    Trailer,
)
from getnet_recon.schemas.settlement import EstablishmentBundle

logger = get_logger(__name__)

# Record class -> bundle attribute that collects it
_BUCKETS: dict[type, str] = {
    SalesSummary: "sales_summaries",
    SalesVoucher: "sales_vouchers",
    FinancialAdjustment: "financial_adjustments",
    Anticipation: "anticipations",
    ReceivablesNegotiation: "receivables_negotiations",
    ReceivableUnit: "receivable_units",
}


def partition_by_establishment(
    records: Iterable[Record], establishment_code: str
) -> EstablishmentBundle:
    """Collect the records of one establishment.

    Args:
        records: Decoded records of a single settlement file.
        establishment_code: Code to keep; compared against each record's
            trimmed ``establishment_code``.

    Returns:
        An ``EstablishmentBundle`` holding the file header/trailer and the
        establishment's own records, in file order.
    """
    bundle = EstablishmentBundle(establishment_code=establishment_code)

    for record in records:
        if isinstance(record, Header):
            bundle.header = record
        elif isinstance(record, Trailer):
            bundle.trailer = record
        elif record.establishment_code.strip() == establishment_code:
            getattr(bundle, _BUCKETS[type(record)]).append(record)

    return bundle


def list_establishments(records: Iterable[Record]) -> List[str]:
    """Return the distinct establishment codes in order of first appearance."""
    codes: dict[str, None] = {}
    for record in records:
        if isinstance(record, (Header, Trailer)):
            continue
        code = record.establishment_code.strip()
        if code:
            codes.setdefault(code, None)
    return list(codes)


def group_by_establishment(records: Iterable[Record]) -> List[EstablishmentBundle]:
    """Build one bundle per establishment found in the file."""
    records = list(records)
    codes = list_establishments(records)
    logger.info("Establishments found: %d", len(codes))
    return [partition_by_establishment(records, code) for code in codes]
