"""Smart Route settlement: turn net balances into a short list of transfers."""

import hashlib
import logging
from collections.abc import Mapping

from .models import EntryKind, LedgerEntry, Transfer
from .money import MINOR_UNIT_PLACES, Money

logger = logging.getLogger(__name__)

DEFAULT_EPSILON = Money.of("0.01")


def optimize_transfers(
    net_balances: Mapping[str, Money],
    epsilon: Money = DEFAULT_EPSILON,
    places: int = MINOR_UNIT_PLACES,
) -> list[Transfer]:
    """
    Propose transfers that zero every member's net balance.

    Greedy matching:
    1. Members below -epsilon are debtors, above +epsilon creditors
    2. Debtors sorted most negative first, creditors most positive first
       (ties broken by member id)
    3. The current debtor pays the current creditor min(|debt|, credit)
    4. Whoever is left within epsilon of zero is done

    Emits at most |debtors| + |creditors| - 1 transfers. The plan is not
    guaranteed globally minimal for every balance distribution.

    Args:
        net_balances: Member id -> net balance (positive = owed money)
        epsilon: Threshold below which a balance counts as settled
        places: Decimal places transfer amounts are rounded to

    Returns:
        Ordered list of transfers

    Raises:
        ValueError: If epsilon is negative
    """
    if epsilon < Money.zero():
        raise ValueError(f"epsilon must not be negative, got {epsilon!r}")

    debtors = sorted(
        ([member_id, balance] for member_id, balance in net_balances.items()
         if balance < -epsilon),
        key=lambda item: (item[1], item[0]),
    )
    creditors = sorted(
        ([member_id, balance] for member_id, balance in net_balances.items()
         if balance > epsilon),
        key=lambda item: (-item[1], item[0]),
    )

    transfers: list[Transfer] = []
    i = j = 0

    while i < len(debtors) and j < len(creditors):
        debtor, creditor = debtors[i], creditors[j]

        settle_amount = min(abs(debtor[1]), creditor[1])
        rounded = settle_amount.round(places)

        if rounded > Money.zero():
            transfers.append(
                Transfer(from_id=debtor[0], to_id=creditor[0], amount=rounded)
            )
        else:
            logger.debug(
                f"Dropping sub-unit transfer {debtor[0]} -> {creditor[0]}: "
                f"{settle_amount!r}"
            )

        debtor[1] += settle_amount
        creditor[1] -= settle_amount

        # Exact arithmetic: at least one side is now exactly zero
        if abs(debtor[1]) <= epsilon:
            i += 1
        if abs(creditor[1]) <= epsilon:
            j += 1

    logger.debug(
        f"Smart Route: {len(debtors)} debtors, {len(creditors)} creditors, "
        f"{len(transfers)} transfers"
    )
    return transfers


def settlement_entry_id(trip_id: str, transfer: Transfer, sequence: int) -> str:
    """
    Deterministic id for the settlement entry that records a transfer.

    The same trip, transfer and position always give the same id, so
    re-running a settlement cannot silently create a different record.
    """
    combined = "|".join(
        [trip_id, transfer.from_id, transfer.to_id, str(transfer.amount), str(sequence)]
    )
    return hashlib.sha256(combined.encode()).hexdigest()


def transfer_to_entry(
    transfer: Transfer, entry_id: str, created_by: str, title: str = "Debt Settlement"
) -> LedgerEntry:
    """Build the SETTLEMENT entry a caller records when a transfer is executed."""
    return LedgerEntry(
        id=entry_id,
        kind=EntryKind.SETTLEMENT,
        cost=transfer.amount,
        payer_id=transfer.from_id,
        participant_ids=(transfer.to_id,),
        created_by=created_by,
        is_private=False,
        title=title,
    )
