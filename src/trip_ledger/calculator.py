"""Core balance computation over a trip's ledger entries."""

import logging
from collections.abc import Iterable, Sequence

from .exceptions import InvalidEntryError, UnknownViewerError
from .models import (
    BalanceResult,
    EntryKind,
    ExpenseCategory,
    LedgerEntry,
    LedgerIssue,
    Member,
)
from .money import MINOR_UNIT_PLACES, Money
from .visibility import filter_visible

logger = logging.getLogger(__name__)


def validate_entry(entry: LedgerEntry) -> None:
    """
    Check that an entry honours the ledger entry contract.

    Args:
        entry: The entry to check

    Raises:
        InvalidEntryError: If the cost or any override is negative, or a
                           settlement does not have exactly one receiver
    """
    if entry.cost < Money.zero():
        raise InvalidEntryError(entry.id, f"negative cost {entry.cost}")

    if entry.kind is EntryKind.SETTLEMENT:
        if len(entry.participant_ids) != 1:
            raise InvalidEntryError(
                entry.id,
                f"settlement needs exactly one receiver, "
                f"got {len(entry.participant_ids)}",
            )
        return

    for member_id, share in entry.split_overrides.items():
        if share < Money.zero():
            raise InvalidEntryError(
                entry.id, f"negative split override {share} for {member_id}"
            )


def split_residual(entry: LedgerEntry) -> Money:
    """Part of the cost not covered by split overrides (zero without overrides)."""
    if not entry.split_overrides or entry.kind is EntryKind.SETTLEMENT:
        return Money.zero()
    covered = sum(entry.split_overrides.values(), Money.zero())
    return entry.cost - covered


def compute_shares(
    entry: LedgerEntry, places: int = MINOR_UNIT_PLACES
) -> dict[str, Money]:
    """
    Compute every member's share of an entry's cost.

    Remainder policy:
    - Equal split: the cost is allocated in minor units; leftover units go to
      the earliest participants so the shares sum exactly to the cost.
    - Split overrides: override keys form the participant set. Whatever the
      overrides leave uncovered (cost - sum(overrides), possibly negative) is
      the payer's implicit share.
    - Settlement: the receiver's share is the full amount.

    An expense without participants yields no shares at all.

    Args:
        entry: A validated ledger entry
        places: Minor-unit decimal places used for equal allocation

    Returns:
        Ordered mapping of member id to share
    """
    if entry.kind is EntryKind.SETTLEMENT:
        return {entry.participant_ids[0]: entry.cost}

    if entry.split_overrides:
        shares = dict(entry.split_overrides)
        residual = split_residual(entry)
        if not residual.is_zero():
            shares[entry.payer_id] = shares.get(entry.payer_id, Money.zero()) + residual
        return shares

    participants = list(dict.fromkeys(entry.participant_ids))
    if not participants:
        return {}

    return dict(zip(participants, entry.cost.allocate(len(participants), places)))


def member_share(
    entry: LedgerEntry, member_id: str, places: int = MINOR_UNIT_PLACES
) -> Money:
    """One member's share of an entry, zero if they are not part of it."""
    return compute_shares(entry, places).get(member_id, Money.zero())


def aggregate_entries(
    entries: Iterable[LedgerEntry],
    members: Sequence[Member],
    viewer_id: str,
    places: int = MINOR_UNIT_PLACES,
) -> BalanceResult:
    """
    Aggregate entries into balances for one viewer without any visibility rule.

    Each entry contributes independently, so the result does not depend on
    the order of `entries`. Bad entries and unknown member references are
    skipped and reported in `BalanceResult.issues`.

    Args:
        entries: Ledger entries to aggregate
        members: Trip roster; must contain viewer_id
        viewer_id: Member whose perspective the pairwise debts and totals use
        places: Minor-unit decimal places used for equal allocation

    Returns:
        Balance result for the viewer

    Raises:
        UnknownViewerError: If viewer_id is not on the roster
    """
    roster = [member.id for member in members]
    if viewer_id not in roster:
        raise UnknownViewerError(viewer_id)

    zero = Money.zero()
    net = {member_id: zero for member_id in roster}
    pairwise = {member_id: zero for member_id in roster if member_id != viewer_id}
    category_spend = {category: zero for category in ExpenseCategory}
    spent = paid = received = group_total = zero
    issues: set[LedgerIssue] = set()

    for entry in entries:
        try:
            validate_entry(entry)
        except InvalidEntryError as e:
            logger.warning(f"Skipping entry {entry.id}: {e.reason}")
            issues.add(
                LedgerIssue(entry_id=entry.id, kind="INVALID_ENTRY", detail=e.reason)
            )
            continue

        shares = compute_shares(entry, places)
        payer_id = entry.payer_id

        if entry.kind is EntryKind.EXPENSE:
            if not shares:
                issues.add(
                    LedgerIssue(
                        entry_id=entry.id,
                        kind="EMPTY_PARTICIPANTS",
                        detail="no participants; cost credited to payer only",
                    )
                )
            residual = split_residual(entry)
            if not residual.is_zero():
                issues.add(
                    LedgerIssue(
                        entry_id=entry.id,
                        kind="SPLIT_MISMATCH",
                        member_id=payer_id,
                        detail=f"overrides leave {residual} assigned to payer",
                    )
                )

            group_total += entry.cost
            if payer_id == viewer_id:
                paid += entry.cost

            viewer_share = shares.get(viewer_id, zero)
            if viewer_share > zero:
                spent += viewer_share
                category_spend[entry.category] += viewer_share
        else:
            receiver_id = entry.participant_ids[0]
            if payer_id == viewer_id:
                paid += entry.cost
            if receiver_id == viewer_id:
                received += entry.cost

        if payer_id in net:
            net[payer_id] += entry.cost
        else:
            issues.add(
                LedgerIssue(
                    entry_id=entry.id,
                    kind="UNKNOWN_MEMBER",
                    member_id=payer_id,
                    detail="payer not on roster",
                )
            )

        for member_id, share in shares.items():
            if member_id not in net:
                issues.add(
                    LedgerIssue(
                        entry_id=entry.id,
                        kind="UNKNOWN_MEMBER",
                        member_id=member_id,
                        detail="participant not on roster",
                    )
                )
                continue

            net[member_id] -= share

            if member_id == payer_id:
                continue
            if payer_id == viewer_id:
                pairwise[member_id] += share
            elif member_id == viewer_id and payer_id in pairwise:
                pairwise[payer_id] -= share

    ordered_issues = tuple(
        sorted(
            issues, key=lambda i: (i.entry_id, i.kind, i.member_id or "", i.detail)
        )
    )
    logger.debug(
        f"Aggregated balances for {viewer_id}: "
        f"{len(roster)} members, {len(ordered_issues)} issues"
    )

    return BalanceResult(
        viewer_id=viewer_id,
        pairwise_debts=pairwise,
        net_balances=net,
        spent_total=spent,
        paid_total=paid,
        received_total=received,
        group_total=group_total,
        category_spend=category_spend,
        issues=ordered_issues,
    )


def compute_balances(
    entries: Iterable[LedgerEntry],
    members: Sequence[Member],
    viewer_id: str,
    places: int = MINOR_UNIT_PLACES,
) -> BalanceResult:
    """
    Compute balances for one viewer.

    Private entries created by someone other than the viewer are excluded
    entirely before aggregation.
    """
    return aggregate_entries(
        filter_visible(entries, viewer_id), members, viewer_id, places
    )
