"""MAN/POS gross-value reconciliation for sales summaries.

Getnet reports each card sale twice: once under its real capture channel
(terminal / POS) with the true gross value and fee, and once under the
network channel ``MAN``.  For some installment buckets the MAN record has
its gross already netted (gross == net, fee == 0).  Counting both would
double the revenue and book the net value as a second, cheaper sale.

The reconciler pairs each pre-netted MAN summary with the other-channel
summary that settles the same net value on the same payment date, and
emits one corrected record carrying the paired record's gross and fee.
The paired record is then dropped: its information now lives in the
corrected MAN record.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Iterable, List, Optional

from getnet_recon.core.logging import get_logger
from getnet_recon.schemas.records import MAN_CHANNEL, SalesSummary
from getnet_recon.schemas.settlement import EstablishmentBundle, ReconciliationStats

logger = get_logger(__name__)

CENTS = Decimal("0.01")

PairingKey = tuple[Decimal, Optional[str]]


@dataclass
class ReconciliationOutcome:
    """Reconciled summaries plus counters describing what happened.

    Attributes:
        records: MAN summaries (corrected or unchanged) followed by the
            other-channel summaries that were not absorbed.
        corrected: MAN summaries that received a paired gross/fee.
        provisional: Pre-netted MAN summaries with no pair; their gross is
            still the net value.
        consumed: Other-channel summaries absorbed into a MAN summary.
    """

    records: List[SalesSummary] = field(default_factory=list)
    corrected: int = 0
    provisional: int = 0
    consumed: int = 0

    def stats(self) -> ReconciliationStats:
        return ReconciliationStats(
            corrected=self.corrected,
            provisional=self.provisional,
            consumed=self.consumed,
        )


def _pairing_key(summary: SalesSummary) -> PairingKey:
    return (summary.net_value.quantize(CENTS), summary.payment_date)


def reconcile_with_stats(summaries: Iterable[SalesSummary]) -> ReconciliationOutcome:
    """Pair pre-netted MAN summaries with their other-channel counterpart.

    The algorithm:
    1. Split the input into MAN summaries and other-channel summaries.
    2. Index the other-channel summaries by (net value, payment date).  When
       two share a key the later one replaces the earlier in the index, so
       only the last is ever available as a pair.
    3. For every MAN summary flagged as pre-netted, look its key up.  An
       indexed summary whose settlement batch was not consumed yet donates
       its gross and fee to a corrected copy of the MAN summary, and its
       batch id is marked consumed.  Without a donor the MAN summary is
       kept as is, still flagged.
    4. Other-channel summaries whose batch id was consumed are left out.

    The index and the consumed set live only for this call; pairing never
    crosses settlement files.

    Args:
        summaries: Sales summaries of one settlement file (or one
            establishment of it).

    Returns:
        A ``ReconciliationOutcome``; ``len(outcome.records)`` never exceeds
        the number of input summaries.
    """
    summaries = list(summaries)
    outcome = ReconciliationOutcome()

    # --- Step 1: split by capture channel --------------------------
    channel_man = [s for s in summaries if s.capture_channel == MAN_CHANNEL]
    channel_other = [s for s in summaries if s.capture_channel != MAN_CHANNEL]

    # --- Step 2: index other-channel summaries (last one wins) -----
    donors: dict[PairingKey, SalesSummary] = {}
    for summary in channel_other:
        donors[_pairing_key(summary)] = summary

    consumed_batch_ids: set[str] = set()

    # --- Step 3: correct pre-netted MAN summaries ------------------
    for summary in channel_man:
        if not summary.is_gross_pre_netted:
            outcome.records.append(summary)
            continue

        donor = donors.get(_pairing_key(summary))
        if donor is None or donor.settlement_batch_id in consumed_batch_ids:
            outcome.records.append(summary)
            outcome.provisional += 1
            logger.debug(
                "MAN summary RV=%s has no pair; gross %s is provisional",
                summary.settlement_batch_id,
                summary.gross_value,
            )
            continue

        consumed_batch_ids.add(donor.settlement_batch_id)
        outcome.records.append(
            summary.model_copy(
                update={
                    "gross_value": donor.gross_value,
                    "fee_value": donor.fee_value,
                    "gross_corrected": True,
                }
            )
        )
        outcome.corrected += 1
        logger.debug(
            "MAN summary RV=%s paired with %s RV=%s: gross %s -> %s",
            summary.settlement_batch_id,
            donor.capture_channel,
            donor.settlement_batch_id,
            summary.gross_value,
            donor.gross_value,
        )

    # --- Step 4: keep other-channel summaries not absorbed ---------
    for summary in channel_other:
        if summary.settlement_batch_id in consumed_batch_ids:
            outcome.consumed += 1
        else:
            outcome.records.append(summary)

    logger.info(
        "MAN/POS pairing complete: corrected=%d provisional=%d consumed=%d "
        "in=%d out=%d",
        outcome.corrected,
        outcome.provisional,
        outcome.consumed,
        len(summaries),
        len(outcome.records),
    )
    return outcome


def reconcile(summaries: Iterable[SalesSummary]) -> List[SalesSummary]:
    """Return the sales summaries with pre-netted MAN gross values corrected."""
    return reconcile_with_stats(summaries).records


def reconcile_bundle(
    bundle: EstablishmentBundle,
) -> tuple[EstablishmentBundle, ReconciliationOutcome]:
    """Return a copy of ``bundle`` whose sales summaries were reconciled."""
    outcome = reconcile_with_stats(bundle.sales_summaries)
    return bundle.model_copy(update={"sales_summaries": outcome.records}), outcome
