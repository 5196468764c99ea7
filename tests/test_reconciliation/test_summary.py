"""Tests for the per-establishment financial summary."""

from __future__ import annotations

from decimal import Decimal

import pytest

from getnet_recon.schemas.records import (
    Anticipation,
    FinancialAdjustment,
    ReceivablesNegotiation,
    ReceivableUnit,
    SalesSummary,
    SalesVoucher,
)
from getnet_recon.schemas.settlement import EstablishmentBundle
from getnet_recon.services.reconciliation.summary import compute_financial_summary

EST = "000000012345678"


def _sale(batch_id: str, gross: str, net: str, fee: str, payment_type: str = "PF"):
    return SalesSummary(
        establishment_code=EST,
        settlement_batch_id=batch_id,
        capture_channel="POS",
        gross_value=Decimal(gross),
        net_value=Decimal(net),
        fee_value=Decimal(fee),
        payment_type=payment_type,
    )


@pytest.fixture
def bundle() -> EstablishmentBundle:
    return EstablishmentBundle(
        establishment_code=EST,
        sales_summaries=[
            _sale("1", "105.00", "100.00", "5.00"),
            _sale("2", "210.00", "200.00", "10.00"),
            _sale("3", "999.00", "990.00", "9.00", payment_type="LQ"),
        ],
        financial_adjustments=[
            FinancialAdjustment(establishment_code=EST, sign="-", adjustment_value=Decimal("25.00")),
            FinancialAdjustment(establishment_code=EST, sign="+", adjustment_value=Decimal("10.00")),
        ],
        anticipations=[
            Anticipation(
                establishment_code=EST,
                gross_value=Decimal("500.00"),
                fee_value=Decimal("15.00"),
                net_value=Decimal("485.00"),
            ),
        ],
        receivables_negotiations=[
            ReceivablesNegotiation(
                establishment_code=EST,
                indicator="CS",
                gross_value=Decimal("1000.00"),
                fee_value=Decimal("20.00"),
                net_value=Decimal("980.00"),
            ),
            ReceivablesNegotiation(
                establishment_code=EST,
                indicator="CL",
                gross_value=Decimal("700.00"),
                net_value=Decimal("700.00"),
            ),
        ],
        receivable_units=[ReceivableUnit(establishment_code=EST, indicator="LQ")],
    )


# ------------------------------------------------------------------
# Totals
# ------------------------------------------------------------------


class TestComputeFinancialSummary:
    def test_sales_totals_exclude_liquidated(self, bundle):
        totals = compute_financial_summary(bundle).totals

        assert totals.gross_value == Decimal("315.00")
        assert totals.acquirer_fee == Decimal("15.00")
        assert totals.net_value == Decimal("300.00")

    def test_adjustments_are_signed(self, bundle):
        totals = compute_financial_summary(bundle).totals
        assert totals.adjustments_total == Decimal("-15.00")

    def test_anticipation_totals(self, bundle):
        totals = compute_financial_summary(bundle).totals
        assert totals.anticipations_gross == Decimal("500.00")
        assert totals.anticipations_net == Decimal("485.00")

    def test_only_requested_negotiations_count(self, bundle):
        totals = compute_financial_summary(bundle).totals
        assert totals.negotiation_fee == Decimal("20.00")
        assert totals.negotiation_deposited == Decimal("980.00")

    def test_record_counts(self, bundle):
        summary = compute_financial_summary(bundle)

        assert summary.establishment_code == EST
        assert summary.record_counts.sales_summaries == 3
        assert summary.record_counts.financial_adjustments == 2
        assert summary.record_counts.anticipations == 1
        assert summary.record_counts.receivables_negotiations == 2
        assert summary.record_counts.receivable_units == 1
        assert summary.record_counts.sales_vouchers == 0

    def test_empty_bundle(self):
        summary = compute_financial_summary(EstablishmentBundle(establishment_code=EST))
        assert summary.totals.gross_value == Decimal("0.00")
        assert summary.totals.adjustments_total == Decimal("0.00")


class TestInstallmentGross:
    def test_voucher_installment_value_replaces_batch_gross(self, bundle):
        bundle.sales_vouchers.append(
            SalesVoucher(
                establishment_code=EST,
                settlement_batch_id="2",
                transaction_value=Decimal("630.00"),
                installment_value=Decimal("70.00"),
            )
        )

        totals = compute_financial_summary(bundle).totals

        assert totals.gross_value == Decimal("175.00")
        # fee and net always come from the summary
        assert totals.net_value == Decimal("300.00")

    def test_last_voucher_of_a_batch_wins(self, bundle):
        for value in ("60.00", "80.00"):
            bundle.sales_vouchers.append(
                SalesVoucher(
                    establishment_code=EST,
                    settlement_batch_id="1",
                    installment_value=Decimal(value),
                )
            )

        totals = compute_financial_summary(bundle).totals

        assert totals.gross_value == Decimal("290.00")

    def test_zero_installment_value_is_ignored(self, bundle):
        bundle.sales_vouchers.append(
            SalesVoucher(establishment_code=EST, settlement_batch_id="1")
        )
        assert compute_financial_summary(bundle).totals.gross_value == Decimal("315.00")
