"""Pydantic schemas for establishment bundles, summaries and API responses."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from getnet_recon.schemas.records import (
    ZERO,
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


class EstablishmentBundle(BaseModel):
    """All records of one establishment plus the file-level header/trailer."""

    establishment_code: str
    header: Optional[Header] = None
    sales_summaries: List[SalesSummary] = Field(default_factory=list)
    sales_vouchers: List[SalesVoucher] = Field(default_factory=list)
    financial_adjustments: List[FinancialAdjustment] = Field(default_factory=list)
    anticipations: List[Anticipation] = Field(default_factory=list)
    receivables_negotiations: List[ReceivablesNegotiation] = Field(
        default_factory=list
    )
    receivable_units: List[ReceivableUnit] = Field(default_factory=list)
    trailer: Optional[Trailer] = None


class RecordCounts(BaseModel):
    sales_summaries: int = 0
    sales_vouchers: int = 0
    financial_adjustments: int = 0
    anticipations: int = 0
    receivables_negotiations: int = 0
    receivable_units: int = 0


class FinancialTotals(BaseModel):
    """Monetary totals of one establishment bundle."""

    gross_value: Decimal = Field(
        ZERO, description="Gross sales, excluding liquidated (LQ) summaries"
    )
    acquirer_fee: Decimal = Field(ZERO, description="Discount fee on those sales")
    net_value: Decimal = Field(ZERO, description="Net sales after the acquirer fee")
    negotiation_fee: Decimal = Field(ZERO, description="Fee of CS negotiations")
    negotiation_deposited: Decimal = Field(
        ZERO, description="Net deposited by CS negotiations"
    )
    adjustments_total: Decimal = Field(ZERO, description="Signed adjustment sum")
    anticipations_gross: Decimal = ZERO
    anticipations_net: Decimal = ZERO


class FinancialSummary(BaseModel):
    """Per-establishment aggregate handed to the accounting pipeline."""

    establishment_code: str
    record_counts: RecordCounts = Field(default_factory=RecordCounts)
    totals: FinancialTotals = Field(default_factory=FinancialTotals)


class ReconciliationStats(BaseModel):
    corrected: int = Field(
        0, description="MAN summaries whose gross/fee came from a paired record"
    )
    provisional: int = Field(
        0, description="MAN summaries left pre-netted (gross is unreliable)"
    )
    consumed: int = Field(0, description="Paired records absorbed into a MAN summary")


class EstablishmentResult(BaseModel):
    bundle: EstablishmentBundle
    summary: FinancialSummary
    reconciliation: Optional[ReconciliationStats] = None


class DiagnosticResponse(BaseModel):
    line_number: int
    severity: str
    message: str


class ParseResponse(BaseModel):
    """Schema returned after parsing an uploaded settlement file."""

    run_id: Optional[UUID] = None
    filename: str
    movement_date: Optional[str] = None
    total_lines: int = Field(..., description="Non-blank lines in the file")
    records_decoded: int
    skipped_lines: int = Field(..., description="Lines that produced no record")
    diagnostics: List[DiagnosticResponse] = Field(default_factory=list)
    establishments: List[EstablishmentResult] = Field(default_factory=list)


class DecodeLineRequest(BaseModel):
    line: str


class DecodeLineResponse(BaseModel):
    decoded: bool
    record: Optional[Record] = None
    reason: Optional[str] = None


class IngestionRunResponse(BaseModel):
    """Schema returned when reading an ingestion-run audit row."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    filename: str
    movement_date: Optional[str] = None
    establishment_filter: Optional[str] = None
    total_lines: int = 0
    records_decoded: int = 0
    skipped_lines: int = 0
    establishments: Optional[list[str]] = None
    corrected_count: int = 0
    provisional_count: int = 0
    diagnostics: Optional[list[dict[str, Any]]] = None
    created_at: datetime
