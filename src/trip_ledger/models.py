"""Pydantic domain models for TripLedger."""

from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from .money import Money

# ============================================================================
# Roster & Ledger Models
# ============================================================================


class EntryKind(str, Enum):
    """Kind of financial fact recorded in a ledger entry."""

    EXPENSE = "EXPENSE"
    SETTLEMENT = "SETTLEMENT"


class ExpenseCategory(str, Enum):
    """Spending category of an expense."""

    STAY = "STAY"
    TRANSPORT = "TRANSPORT"
    ACTIVITY = "ACTIVITY"
    FOOD = "FOOD"
    ESSENTIALS = "ESSENTIALS"


class ViewMode(str, Enum):
    """How a viewer's per-member balance is presented.

    SMART shows the amount of the proposed Smart Route transfer between the
    viewer and the member; DIRECT shows the raw pairwise debt.
    """

    SMART = "SMART"
    DIRECT = "DIRECT"


class Member(BaseModel):
    """A trip participant."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    budget: Money | None = None  # personal trip budget, display only


class LedgerEntry(BaseModel):
    """A single expense or settlement recorded against a trip.

    For SETTLEMENT entries `payer_id` is the sender, `cost` is the transfer
    amount and `participant_ids` holds exactly one id: the receiver.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    kind: EntryKind = EntryKind.EXPENSE
    cost: Money
    payer_id: str
    participant_ids: tuple[str, ...] = ()
    split_overrides: dict[str, Money] = Field(default_factory=dict)
    created_by: str
    is_private: bool = False
    title: str = ""
    category: ExpenseCategory = ExpenseCategory.ESSENTIALS

    @property
    def is_settlement(self) -> bool:
        return self.kind is EntryKind.SETTLEMENT


# ============================================================================
# Engine Output Models
# ============================================================================


IssueKind = Literal[
    "INVALID_ENTRY", "UNKNOWN_MEMBER", "EMPTY_PARTICIPANTS", "SPLIT_MISMATCH"
]


class LedgerIssue(BaseModel):
    """A data-quality problem found while aggregating one entry.

    Issues never abort a computation; the offending contribution is skipped
    or corrected with a documented fallback and reported here.
    """

    model_config = ConfigDict(frozen=True)

    entry_id: str
    kind: IssueKind
    member_id: str | None = None
    detail: str = ""


class Transfer(BaseModel):
    """A proposed point-to-point payment from a debtor to a creditor."""

    model_config = ConfigDict(frozen=True)

    from_id: str
    to_id: str
    amount: Money


class BalanceResult(BaseModel):
    """Balances and totals for one viewer.

    Sign conventions:
    - pairwise_debts: positive = counterparty owes the viewer
    - net_balances:   positive = the member is owed money overall
    """

    model_config = ConfigDict(frozen=True)

    viewer_id: str
    pairwise_debts: dict[str, Money]
    net_balances: dict[str, Money]
    spent_total: Money
    paid_total: Money
    received_total: Money
    group_total: Money
    category_spend: dict[ExpenseCategory, Money]
    issues: tuple[LedgerIssue, ...] = ()


class LedgerSummary(BaseModel):
    """Balances for one viewer plus the Smart Route transfer plan."""

    model_config = ConfigDict(frozen=True)

    result: BalanceResult
    transfers: tuple[Transfer, ...] = ()

    @property
    def viewer_id(self) -> str:
        return self.result.viewer_id


class CounterpartyBalance(BaseModel):
    """A viewer's balance with one counterparty, aggregated across trips."""

    model_config = ConfigDict(frozen=True)

    member_id: str
    balance: Money  # positive = counterparty owes the viewer


# ============================================================================
# Snapshot Models
# ============================================================================


class TripSnapshot(BaseModel):
    """An immutable copy of one trip's roster and ledger."""

    trip_id: str = ""
    name: str = ""
    base_currency: str = "USD"
    members: list[Member]
    entries: list[LedgerEntry] = Field(default_factory=list)

    def member_name(self, member_id: str) -> str:
        """Display name for a member id, falling back to the id itself."""
        for member in self.members:
            if member.id == member_id:
                return member.name
        return member_id
