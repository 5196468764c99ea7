"""Per-establishment financial summary.

Adds up what an establishment bundle reports: sales (gross, acquirer fee,
net), signed adjustments, anticipations and requested negotiations.  This
is a plain reduction over the decoded records; it never recomputes values
the file does not report.
"""

from __future__ import annotations

from decimal import Decimal

from getnet_recon.core.logging import get_logger
from getnet_recon.schemas.records import ZERO
from getnet_recon.schemas.settlement import (
    EstablishmentBundle,
    FinancialSummary,
    FinancialTotals,
    RecordCounts,
)

logger = get_logger(__name__)

# Summaries of installments settled earlier in the cycle
LIQUIDATED_PAYMENT_TYPE = "LQ"
REQUESTED_NEGOTIATION = "CS"


def _installment_value_by_batch(bundle: EstablishmentBundle) -> dict[str, Decimal]:
    """Map settlement batch id -> installment value reported by its vouchers."""
    values: dict[str, Decimal] = {}
    for voucher in bundle.sales_vouchers:
        if voucher.settlement_batch_id and voucher.installment_value > 0:
            values[voucher.settlement_batch_id] = voucher.installment_value
    return values


def compute_financial_summary(bundle: EstablishmentBundle) -> FinancialSummary:
    """Compute the record counts and monetary totals of one bundle.

    Args:
        bundle: Records of one establishment, ideally already reconciled so
            MAN summaries carry their true gross value.

    Returns:
        A ``FinancialSummary`` for the bundle's establishment.
    """
    counts = RecordCounts(
        sales_summaries=len(bundle.sales_summaries),
        sales_vouchers=len(bundle.sales_vouchers),
        financial_adjustments=len(bundle.financial_adjustments),
        anticipations=len(bundle.anticipations),
        receivables_negotiations=len(bundle.receivables_negotiations),
        receivable_units=len(bundle.receivable_units),
    )
    totals = FinancialTotals()

    installment_values = _installment_value_by_batch(bundle)

    gross = fee = net = ZERO
    for sale in bundle.sales_summaries:
        if sale.payment_type == LIQUIDATED_PAYMENT_TYPE:
            continue
        gross += installment_values.get(sale.settlement_batch_id, sale.gross_value)
        fee += sale.fee_value
        net += sale.net_value
    totals.gross_value = gross
    totals.acquirer_fee = fee
    totals.net_value = net

    totals.adjustments_total = sum(
        (adjustment.signed_value for adjustment in bundle.financial_adjustments), ZERO
    )

    totals.anticipations_gross = sum(
        (a.gross_value for a in bundle.anticipations), ZERO
    )
    totals.anticipations_net = sum((a.net_value for a in bundle.anticipations), ZERO)

    for negotiation in bundle.receivables_negotiations:
        if negotiation.indicator != REQUESTED_NEGOTIATION:
            continue
        totals.negotiation_fee += negotiation.fee_value
        totals.negotiation_deposited += negotiation.net_value

    logger.info(
        "Financial summary for %s: gross=%s fee=%s net=%s adjustments=%s",
        bundle.establishment_code,
        totals.gross_value,
        totals.acquirer_fee,
        totals.net_value,
        totals.adjustments_total,
    )

    return FinancialSummary(
        establishment_code=bundle.establishment_code,
        record_counts=counts,
        totals=totals,
    )
