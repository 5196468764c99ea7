"""Record type dispatcher for Getnet settlement lines.

``decode_line`` looks at the first character of a line and hands the line
to the decoder registered for that record type.  Each decoder reads its
fields through the layout tables in :mod:`layout` and is total: a truncated
line still produces a record, with the missing fields left at their
defaults.  Unknown record types come back as a :class:`SkippedLine` instead
of an exception.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Union

from getnet_recon.core.logging import get_logger
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
from getnet_recon.services.ingestion import layout
from getnet_recon.services.ingestion.fields import (
    parse_amount_left_aligned,
    parse_amount_right_aligned,
    parse_count,
    parse_fixed_date,
    read_field,
    read_raw,
)

logger = get_logger(__name__)


@dataclass(frozen=True)
class SkippedLine:
    """Outcome of a line that could not be mapped to a record type."""

    record_type: str
    reason: str


DecodeOutcome = Union[Record, SkippedLine]


# ------------------------------------------------------------------
# Per-type decoders
# ------------------------------------------------------------------


def decode_header(line: str) -> Header:
    """Decode a type 0 line, falling back to the EADM100 marker for the code."""
    spans = layout.HEADER
    establishment_code = read_field(line, spans["establishment_code"])
    marker = layout.HEADER_ESTABLISHMENT_MARKER
    if not establishment_code and marker in line:
        # Some files shift the header; the code follows the marker directly.
        start = line.index(marker) + len(marker)
        establishment_code = line[start : start + 15].strip()

    return Header(
        movement_date=parse_fixed_date(read_field(line, spans["movement_date"])),
        generation_time=read_field(line, spans["generation_time"]),
        generation_date=parse_fixed_date(read_field(line, spans["generation_date"])),
        file_identifier=read_field(line, spans["file_identifier"]),
        establishment_code=establishment_code,
        document_number=read_field(line, spans["document_number"]),
        acquirer_name=read_field(line, spans["acquirer_name"]),
        layout_version=layout.LAYOUT_VERSION,
        raw_line=line[: layout.HEADER_RAW_PREVIEW],
    )


def decode_sales_summary(line: str) -> SalesSummary:
    """Decode a type 1 sales summary (RV)."""
    spans = layout.SALES_SUMMARY

    def text(name: str) -> str:
        return read_field(line, spans[name])

    def amount(name: str):
        return parse_amount_right_aligned(read_raw(line, spans[name]))

    return SalesSummary(
        establishment_code=text("establishment_code"),
        product_code=text("product_code"),
        capture_channel=text("capture_channel"),
        settlement_batch_id=text("settlement_batch_id"),
        batch_date=parse_fixed_date(text("batch_date")),
        payment_date=parse_fixed_date(text("payment_date")),
        bank=text("bank"),
        branch=text("branch"),
        account=text("account"),
        accepted_vouchers=parse_count(text("accepted_vouchers")),
        rejected_vouchers=parse_count(text("rejected_vouchers")),
        gross_value=amount("gross_value"),
        net_value=amount("net_value"),
        service_fee_value=amount("service_fee_value"),
        fee_value=amount("fee_value"),
        rejected_value=amount("rejected_value"),
        credit_value=amount("credit_value"),
        charges_value=amount("charges_value"),
        payment_type=text("payment_type"),
        installment_number=parse_count(text("installment_number")),
        installment_count=parse_count(text("installment_count")),
        centralizer_establishment_code=text("centralizer_establishment_code"),
    )


def decode_sales_voucher(line: str) -> SalesVoucher:
    """Decode a type 2 sales voucher."""
    spans = layout.SALES_VOUCHER
    return SalesVoucher(
        establishment_code=read_field(line, spans["establishment_code"]),
        settlement_batch_id=read_field(line, spans["settlement_batch_id"]),
        nsu=read_field(line, spans["nsu"]),
        transaction_date=parse_fixed_date(read_field(line, spans["transaction_date"])),
        transaction_time=read_field(line, spans["transaction_time"]),
        card_number=read_field(line, spans["card_number"]),
        transaction_value=parse_amount_right_aligned(
            read_raw(line, spans["transaction_value"])
        ),
        installment_number=read_field(line, spans["installment_number"]),
        installment_count=read_field(line, spans["installment_count"]),
        installment_value=parse_amount_right_aligned(
            read_raw(line, spans["installment_value"])
        ),
        payment_date=parse_fixed_date(read_field(line, spans["payment_date"])),
        authorization_code=read_field(line, spans["authorization_code"]),
        brand=read_field(line, spans["brand"]),
    )


def decode_financial_adjustment(line: str) -> FinancialAdjustment:
    """Decode a type 3 adjustment; a blank sign reads as ``+``."""
    spans = layout.FINANCIAL_ADJUSTMENT
    return FinancialAdjustment(
        establishment_code=read_field(line, spans["establishment_code"]),
        settlement_batch_id=read_field(line, spans["settlement_batch_id"]),
        adjustment_date=parse_fixed_date(read_field(line, spans["adjustment_date"])),
        payment_date=parse_fixed_date(read_field(line, spans["payment_date"])),
        sign=read_field(line, spans["sign"]) or "+",
        adjustment_value=parse_amount_right_aligned(
            read_raw(line, spans["adjustment_value"])
        ),
        reason=read_field(line, spans["reason"]),
    )


def decode_anticipation(line: str) -> Anticipation:
    """Decode a type 4 anticipation."""
    spans = layout.ANTICIPATION
    return Anticipation(
        establishment_code=read_field(line, spans["establishment_code"]),
        product_code=read_field(line, spans["product_code"]),
        brand=read_field(line, spans["brand"]),
        operation_number=read_field(line, spans["operation_number"]),
        anticipation_date=parse_fixed_date(read_field(line, spans["anticipation_date"])),
        original_payment_date=parse_fixed_date(
            read_field(line, spans["original_payment_date"])
        ),
        gross_value=parse_amount_right_aligned(read_raw(line, spans["gross_value"])),
        fee_value=parse_amount_right_aligned(read_raw(line, spans["fee_value"])),
        net_value=parse_amount_right_aligned(read_raw(line, spans["net_value"])),
    )


def decode_receivables_negotiation(line: str) -> ReceivablesNegotiation:
    """Decode a type 5 negotiation using the CL or CS amount layout."""
    spans = layout.RECEIVABLES_NEGOTIATION
    indicator = read_field(line, spans["indicator"])

    fee_value = ZERO
    if indicator == "CL":
        amounts = layout.RECEIVABLES_NEGOTIATION_CL
        gross_value = parse_amount_right_aligned(read_raw(line, amounts["gross_value"]))
        net_value = parse_amount_right_aligned(read_raw(line, amounts["net_value"]))
    else:
        amounts = layout.RECEIVABLES_NEGOTIATION_CS
        gross_value = parse_amount_right_aligned(read_raw(line, amounts["gross_value"]))
        fee_value = parse_amount_right_aligned(read_raw(line, amounts["fee_value"]))
        net_value = parse_amount_right_aligned(read_raw(line, amounts["net_value"]))

    return ReceivablesNegotiation(
        establishment_code=read_field(line, spans["establishment_code"]),
        negotiation_date=parse_fixed_date(read_field(line, spans["negotiation_date"])),
        payment_date=parse_fixed_date(read_field(line, spans["payment_date"])),
        operation_number=read_field(line, spans["operation_number"]),
        indicator=indicator,
        gross_value=gross_value,
        fee_value=fee_value,
        net_value=net_value,
        raw_line=line[: layout.RECEIVABLES_NEGOTIATION_RAW_PREVIEW],
    )


def decode_receivable_unit(line: str) -> ReceivableUnit:
    """Decode a type 6 receivable unit; amounts depend on the CS/CL/LQ indicator."""
    spans = layout.RECEIVABLE_UNIT
    indicator = read_field(line, spans["indicator"])

    gross_value = discount_value = net_value = ZERO
    if indicator == "CS":
        amounts = layout.RECEIVABLE_UNIT_CS
        gross_value = parse_amount_left_aligned(read_raw(line, amounts["gross_value"]))
        discount_value = parse_amount_left_aligned(
            read_raw(line, amounts["discount_value"])
        )
        net_value = parse_amount_left_aligned(read_raw(line, amounts["net_value"]))
    elif indicator == "CL":
        amounts = layout.RECEIVABLE_UNIT_CL
        net_value = parse_amount_right_aligned(read_raw(line, amounts["net_value"]))
        if net_value == 0:
            net_value = parse_amount_right_aligned(
                read_raw(line, amounts["net_value_shifted"])
            )
    elif indicator == "LQ":
        amounts = layout.RECEIVABLE_UNIT_LQ
        net_value = parse_amount_right_aligned(read_raw(line, amounts["net_value"]))

    return ReceivableUnit(
        establishment_code=read_field(line, spans["establishment_code"]),
        payment_date=parse_fixed_date(read_field(line, spans["payment_date"])),
        operation_number=read_field(line, spans["operation_number"]),
        indicator=indicator,
        product_code=read_field(line, spans["product_code"]),
        settlement_date=parse_fixed_date(read_field(line, spans["settlement_date"])),
        gross_value=gross_value,
        discount_value=discount_value,
        net_value=net_value,
        raw_line=line[: layout.RECEIVABLE_UNIT_RAW_PREVIEW],
    )


def decode_trailer(line: str) -> Trailer:
    """Decode a type 9 trailer, retrying zero totals at the alternate offsets."""
    spans = layout.TRAILER
    fallback = layout.TRAILER_FALLBACK

    gross = parse_amount_right_aligned(read_raw(line, spans["total_gross_value"]))
    if gross == 0:
        gross = parse_amount_right_aligned(read_raw(line, fallback["total_gross_value"]))

    net = parse_amount_right_aligned(read_raw(line, spans["total_net_value"]))
    if net == 0:
        net = parse_amount_right_aligned(read_raw(line, fallback["total_net_value"]))

    return Trailer(
        total_records=parse_count(read_field(line, spans["total_records"])),
        total_gross_value=gross,
        total_net_value=net,
        batch_count=parse_count(read_field(line, spans["batch_count"])),
        raw_line=line[: layout.TRAILER_RAW_PREVIEW],
    )


# Registry of decoders keyed by the record type tag (first character)
_DECODERS: dict[str, Callable[[str], Record]] = {
    "0": decode_header,
    "1": decode_sales_summary,
    "2": decode_sales_voucher,
    "3": decode_financial_adjustment,
    "4": decode_anticipation,
    "5": decode_receivables_negotiation,
    "6": decode_receivable_unit,
    "9": decode_trailer,
}

SUPPORTED_RECORD_TYPES = tuple(_DECODERS)


def decode_line(line: str) -> DecodeOutcome:
    """Decode one settlement line into its record model.

    Args:
        line: A single line of the file, without the line terminator.

    Returns:
        The decoded record, or a ``SkippedLine`` when the record type tag is
        missing or unsupported.
    """
    record_type = line[:1]
    decoder = _DECODERS.get(record_type)
    if decoder is None:
        if not record_type:
            return SkippedLine(record_type="", reason="empty line")
        return SkippedLine(
            record_type=record_type,
            reason=f"unknown record type {record_type!r}",
        )
    return decoder(line)
