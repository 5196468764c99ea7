"""Pydantic models for the eight record shapes of a Getnet settlement file.

Every line of the file decodes into exactly one of these models, selected by
the line's leading digit.  The models are frozen: a record is created once by
the decoder and never modified afterwards.  The gross-value reconciler builds
corrected copies with ``model_copy`` instead of mutating.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, computed_field

ZERO = Decimal("0.00")

# Capture channel reported by the card network rather than the terminal.
# Its gross value is unreliable when no fee is reported.
MAN_CHANNEL = "MAN"


class _FrozenRecord(BaseModel):
    model_config = ConfigDict(frozen=True)


class Header(_FrozenRecord):
    """File-level header (type 0)."""

    record_type: Literal[0] = 0
    movement_date: Optional[str] = Field(
        None, description="Movement date as YYYY-MM-DD"
    )
    generation_time: str = ""
    generation_date: Optional[str] = None
    file_identifier: str = ""
    establishment_code: str = ""
    document_number: str = Field("", description="CNPJ of the merchant")
    acquirer_name: str = ""
    layout_version: str = "10.1"
    raw_line: str = ""


class SalesSummary(_FrozenRecord):
    """Sales summary ("resumo de vendas", type 1), one per settlement batch."""

    record_type: Literal[1] = 1
    establishment_code: str = ""
    product_code: str = Field("", description="EC / SM / SE")
    capture_channel: str = Field("", description="MAN, POS, VIS, ...")
    settlement_batch_id: str = Field("", description="RV number")
    batch_date: Optional[str] = None
    payment_date: Optional[str] = None
    bank: str = ""
    branch: str = ""
    account: str = ""
    accepted_vouchers: int = 0
    rejected_vouchers: int = 0
    gross_value: Decimal = ZERO
    net_value: Decimal = ZERO
    service_fee_value: Decimal = ZERO
    fee_value: Decimal = Field(ZERO, description="Discount fee charged")
    rejected_value: Decimal = ZERO
    credit_value: Decimal = ZERO
    charges_value: Decimal = ZERO
    payment_type: str = Field("", description="PF / PV / LQ")
    installment_number: int = 0
    installment_count: int = 0
    centralizer_establishment_code: str = ""
    gross_corrected: bool = Field(
        False, description="Gross and fee were taken from a paired record"
    )

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_gross_pre_netted(self) -> bool:
        """True when a MAN record reports its net value as the gross value."""
        return (
            self.capture_channel == MAN_CHANNEL
            and not self.gross_corrected
            and self.fee_value == 0
            and self.gross_value == self.net_value
        )


class SalesVoucher(_FrozenRecord):
    """Sales voucher ("comprovante de vendas", type 2): a single card sale."""

    record_type: Literal[2] = 2
    establishment_code: str = ""
    settlement_batch_id: str = ""
    nsu: str = Field("", description="Transaction authorization id")
    transaction_date: Optional[str] = None
    transaction_time: str = ""
    card_number: str = Field("", description="Masked card number")
    transaction_value: Decimal = ZERO
    installment_number: str = ""
    installment_count: str = ""
    installment_value: Decimal = ZERO
    payment_date: Optional[str] = None
    authorization_code: str = ""
    brand: str = ""


class FinancialAdjustment(_FrozenRecord):
    """Financial adjustment (type 3), e.g. chargebacks and reversals."""

    record_type: Literal[3] = 3
    establishment_code: str = ""
    settlement_batch_id: str = ""
    adjustment_date: Optional[str] = None
    payment_date: Optional[str] = None
    sign: str = "+"
    adjustment_value: Decimal = ZERO
    reason: str = ""

    @property
    def signed_value(self) -> Decimal:
        return -self.adjustment_value if self.sign == "-" else self.adjustment_value


class Anticipation(_FrozenRecord):
    """Receivables anticipation (type 4)."""

    record_type: Literal[4] = 4
    establishment_code: str = ""
    product_code: str = ""
    brand: str = ""
    operation_number: str = ""
    anticipation_date: Optional[str] = None
    original_payment_date: Optional[str] = None
    gross_value: Decimal = ZERO
    fee_value: Decimal = ZERO
    net_value: Decimal = ZERO


class ReceivablesNegotiation(_FrozenRecord):
    """Receivables negotiation / assignment ("cessão", type 5)."""

    record_type: Literal[5] = 5
    establishment_code: str = ""
    negotiation_date: Optional[str] = None
    payment_date: Optional[str] = None
    operation_number: str = ""
    indicator: str = Field("", description="CL (liquidated) or CS (requested)")
    gross_value: Decimal = ZERO
    fee_value: Decimal = ZERO
    net_value: Decimal = ZERO
    raw_line: str = ""


class ReceivableUnit(_FrozenRecord):
    """Receivable unit (type 6), informational schedule entry."""

    record_type: Literal[6] = 6
    establishment_code: str = ""
    payment_date: Optional[str] = None
    operation_number: str = ""
    indicator: str = Field("", description="CL / CS / LQ")
    product_code: str = ""
    settlement_date: Optional[str] = None
    gross_value: Decimal = ZERO
    discount_value: Decimal = ZERO
    net_value: Decimal = ZERO
    raw_line: str = ""


class Trailer(_FrozenRecord):
    """File-level trailer with the totals reported by the acquirer (type 9)."""

    record_type: Literal[9] = 9
    total_records: int = 0
    total_gross_value: Decimal = ZERO
    total_net_value: Decimal = ZERO
    batch_count: int = 0
    raw_line: str = ""


Record = Union[
    Header,
    SalesSummary,
    SalesVoucher,
    FinancialAdjustment,
    Anticipation,
    ReceivablesNegotiation,
    ReceivableUnit,
    Trailer,
]

EstablishmentRecord = Union[
    SalesSummary,
    SalesVoucher,
    FinancialAdjustment,
    Anticipation,
    ReceivablesNegotiation,
    ReceivableUnit,
]

FILE_LEVEL_TYPES = (Header, Trailer)
