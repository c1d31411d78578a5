"""Service layer that composes visibility, balance and settlement logic.

Every caller that needs a balance goes through LedgerService and recomputes
from its current entry snapshot. Nothing here caches balances.
"""

import logging
from collections.abc import Iterable, Sequence

from .calculator import aggregate_entries, compute_balances
from .config import Settings
from .models import (
    BalanceResult,
    CounterpartyBalance,
    LedgerEntry,
    LedgerSummary,
    Member,
    ViewMode,
)
from .money import Money
from .optimizer import optimize_transfers, settlement_entry_id, transfer_to_entry

logger = logging.getLogger(__name__)


class LedgerService:
    """Service for computing trip balances and settlement plans."""

    def __init__(self, settings: Settings):
        """Initialize the ledger service."""
        self.settings = settings

    def summarize(
        self,
        entries: Sequence[LedgerEntry],
        members: Sequence[Member],
        viewer_id: str,
    ) -> LedgerSummary:
        """
        Compute balances and the Smart Route plan for one viewer.

        Private entries of other members are excluded.

        Args:
            entries: Current snapshot of the trip's entries
            members: Trip roster
            viewer_id: Member viewing the ledger

        Returns:
            Summary with the balance result and proposed transfers
        """
        result = compute_balances(
            entries, members, viewer_id, self.settings.minor_unit_places
        )
        return self._with_transfers(result)

    def audit(
        self,
        entries: Sequence[LedgerEntry],
        members: Sequence[Member],
        viewer_id: str,
    ) -> LedgerSummary:
        """
        Compute balances over every entry, private ones included.

        For administrative views where no single viewer's privacy applies.
        """
        result = aggregate_entries(
            entries, members, viewer_id, self.settings.minor_unit_places
        )
        return self._with_transfers(result)

    def _with_transfers(self, result: BalanceResult) -> LedgerSummary:
        self._report_issues(result)

        transfers = optimize_transfers(
            result.net_balances,
            epsilon=self.settings.epsilon,
            places=self.settings.minor_unit_places,
        )

        logger.info(
            f"Computed balances for {result.viewer_id}: "
            f"{len(transfers)} transfers proposed"
        )
        return LedgerSummary(result=result, transfers=tuple(transfers))

    def _report_issues(self, result: BalanceResult) -> None:
        """Log data-quality issues so fallbacks are never silent."""
        for issue in result.issues:
            member = f" (member {issue.member_id})" if issue.member_id else ""
            logger.warning(
                f"Data quality: {issue.kind} in entry {issue.entry_id}{member}: "
                f"{issue.detail}"
            )

    def display_balance(
        self,
        summary: LedgerSummary,
        member_id: str,
        mode: ViewMode | None = None,
    ) -> Money:
        """
        Balance between the viewer and one member, as shown to the viewer.

        Args:
            summary: Summary computed for the viewer
            member_id: Counterparty
            mode: SMART (Smart Route transfer amount) or DIRECT (pairwise
                  debt); defaults to the configured view mode

        Returns:
            Positive if the member owes the viewer, negative if the viewer
            owes the member
        """
        mode = mode or self.settings.default_view_mode
        viewer_id = summary.viewer_id

        if mode is ViewMode.DIRECT:
            return summary.result.pairwise_debts.get(member_id, Money.zero())

        for transfer in summary.transfers:
            if transfer.from_id == viewer_id and transfer.to_id == member_id:
                return -transfer.amount
            if transfer.from_id == member_id and transfer.to_id == viewer_id:
                return transfer.amount

        # Settled by the rest of the route
        return Money.zero()

    def aggregate_counterparties(
        self, results: Iterable[BalanceResult]
    ) -> list[CounterpartyBalance]:
        """
        Sum one viewer's pairwise debts across several trips.

        Balances within the settle threshold are dropped. Sorted with the
        largest amount owed to the viewer first.

        Raises:
            ValueError: If the results belong to different viewers
        """
        totals: dict[str, Money] = {}
        viewer_id: str | None = None

        for result in results:
            if viewer_id is None:
                viewer_id = result.viewer_id
            elif result.viewer_id != viewer_id:
                raise ValueError(
                    f"Cannot aggregate results of {viewer_id} and {result.viewer_id}"
                )
            for member_id, debt in result.pairwise_debts.items():
                totals[member_id] = totals.get(member_id, Money.zero()) + debt

        epsilon = self.settings.epsilon
        balances = [
            CounterpartyBalance(member_id=member_id, balance=balance)
            for member_id, balance in totals.items()
            if abs(balance) > epsilon
        ]
        return sorted(balances, key=lambda b: (-b.balance, b.member_id))

    def settlement_entries(
        self, summary: LedgerSummary, created_by: str, trip_id: str = ""
    ) -> list[LedgerEntry]:
        """
        Convert the proposed transfers into SETTLEMENT entries.

        The entries are not stored anywhere; recording them is up to the caller.
        """
        entries = [
            transfer_to_entry(
                transfer,
                entry_id=settlement_entry_id(trip_id, transfer, sequence),
                created_by=created_by,
            )
            for sequence, transfer in enumerate(summary.transfers)
        ]

        logger.info(f"Prepared {len(entries)} settlement entries for {created_by}")
        return entries
