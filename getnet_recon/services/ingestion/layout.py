"""Fixed-width layout of the Getnet settlement file (layout V10.1).

Spans are 0-based, half-open ``(start, end)`` tuples ready for slicing.
Each record type has its own table; offsets are never shared between
record types even where they coincide.
"""

from __future__ import annotations

Span = tuple[int, int]

LAYOUT_VERSION = "10.1"

# Marker preceding the establishment code in headers whose positional
# establishment field is blank.
HEADER_ESTABLISHMENT_MARKER = "EADM100"

# 0 - Header
HEADER: dict[str, Span] = {
    "record_type": (0, 1),
    "movement_date": (1, 9),          # DDMMAAAA
    "generation_time": (9, 16),       # HHMMSSC
    "generation_date": (16, 24),      # DDMMAAAA (repeated)
    "file_identifier": (24, 31),      # CEADM100
    "establishment_code": (31, 46),
    "document_number": (46, 60),      # CNPJ
    "acquirer_name": (60, 80),
}
HEADER_RAW_PREVIEW = 100

# 1 - Resumo de vendas
SALES_SUMMARY: dict[str, Span] = {
    "record_type": (0, 1),
    "establishment_code": (1, 16),
    "product_code": (16, 18),         # EC / SM / SE
    "capture_channel": (18, 21),      # MAN / POS / VIS / ELO
    "settlement_batch_id": (21, 30),  # RV
    "batch_date": (30, 38),
    "payment_date": (38, 46),
    "bank": (46, 49),
    "branch": (49, 55),
    "account": (55, 66),
    "accepted_vouchers": (66, 75),
    "rejected_vouchers": (75, 84),
    "gross_value": (84, 96),
    "net_value": (96, 108),
    "service_fee_value": (108, 120),
    "fee_value": (120, 132),          # taxa de desconto
    "rejected_value": (132, 144),
    "credit_value": (144, 156),
    "charges_value": (156, 168),
    "payment_type": (168, 170),       # PF / PV / LQ
    "installment_number": (170, 172),
    "installment_count": (172, 174),
    "centralizer_establishment_code": (174, 189),
}

# 2 - Comprovante de vendas
SALES_VOUCHER: dict[str, Span] = {
    "record_type": (0, 1),
    "establishment_code": (1, 16),
    "settlement_batch_id": (16, 25),
    "nsu": (25, 37),
    "transaction_date": (37, 45),
    "transaction_time": (45, 51),     # HHMMSS
    "card_number": (51, 70),
    "transaction_value": (70, 82),
    "installment_number": (106, 108),
    "installment_count": (108, 110),
    "installment_value": (110, 122),
    "payment_date": (122, 130),
    "authorization_code": (130, 140),
    "brand": (140, 144),
}

# 3 - Ajuste financeiro
FINANCIAL_ADJUSTMENT: dict[str, Span] = {
    "record_type": (0, 1),
    "establishment_code": (1, 16),
    "settlement_batch_id": (16, 25),
    "adjustment_date": (25, 33),
    "payment_date": (33, 41),
    "sign": (62, 63),                 # + / -
    "adjustment_value": (63, 75),
    "reason": (87, 117),
}

# 4 - Antecipação
ANTICIPATION: dict[str, Span] = {
    "record_type": (0, 1),
    "establishment_code": (1, 16),
    "product_code": (16, 18),
    "brand": (18, 21),
    "operation_number": (21, 35),
    "anticipation_date": (35, 43),
    "original_payment_date": (43, 51),
    "gross_value": (51, 66),
    "fee_value": (66, 81),
    "net_value": (81, 96),
}

# 5 - Negociação / cessão
RECEIVABLES_NEGOTIATION: dict[str, Span] = {
    "record_type": (0, 1),
    "establishment_code": (1, 16),
    "negotiation_date": (16, 24),
    "payment_date": (24, 32),
    "operation_number": (32, 52),
    "indicator": (52, 54),            # CL / CS
}
# CL (cessão liquidada): wide right-aligned amounts, no fee
RECEIVABLES_NEGOTIATION_CL: dict[str, Span] = {
    "gross_value": (54, 78),
    "net_value": (78, 102),
}
# CS (cessão solicitada): [54:66] reserved
RECEIVABLES_NEGOTIATION_CS: dict[str, Span] = {
    "gross_value": (66, 78),
    "fee_value": (78, 90),
    "net_value": (90, 102),
}
RECEIVABLES_NEGOTIATION_RAW_PREVIEW = 120

# 6 - Unidade de recebível
RECEIVABLE_UNIT: dict[str, Span] = {
    "record_type": (0, 1),
    "establishment_code": (1, 16),
    "payment_date": (16, 24),
    "operation_number": (24, 44),
    "indicator": (44, 46),            # CL / CS / LQ
    "product_code": (64, 66),         # [46:64] reserved
    "settlement_date": (66, 74),
}
# CS: left-aligned amounts (significant digits first, zero padded)
RECEIVABLE_UNIT_CS: dict[str, Span] = {
    "gross_value": (94, 107),
    "discount_value": (107, 120),
    "net_value": (120, 133),
}
# CL: right-aligned net, shifted by two positions in some files
RECEIVABLE_UNIT_CL: dict[str, Span] = {
    "net_value": (108, 122),
    "net_value_shifted": (110, 124),
}
RECEIVABLE_UNIT_LQ: dict[str, Span] = {
    "net_value": (108, 122),
}
RECEIVABLE_UNIT_RAW_PREVIEW = 140

# 9 - Trailer
TRAILER: dict[str, Span] = {
    "record_type": (0, 1),
    "total_records": (1, 7),
    "total_gross_value": (7, 25),
    "total_net_value": (25, 43),
    "batch_count": (43, 49),
}
# Alternative positions used when the primary amount reads as zero
TRAILER_FALLBACK: dict[str, Span] = {
    "total_gross_value": (12, 27),
    "total_net_value": (27, 45),
}
TRAILER_RAW_PREVIEW = 60
