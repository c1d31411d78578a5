"""TripLedger - Group travel-expense balances and debt settlement."""

__version__ = "0.1.0"

from .calculator import aggregate_entries, compute_balances, compute_shares, member_share
from .config import Settings, load_settings
from .models import (
    BalanceResult,
    EntryKind,
    ExpenseCategory,
    LedgerEntry,
    LedgerSummary,
    Member,
    Transfer,
    ViewMode,
)
from .money import Money
from .optimizer import optimize_transfers, transfer_to_entry
from .service import LedgerService
from .visibility import filter_visible, is_visible, public_entries

__all__ = [
    "Settings",
    "load_settings",
    "Money",
    "Member",
    "LedgerEntry",
    "EntryKind",
    "ExpenseCategory",
    "BalanceResult",
    "LedgerSummary",
    "Transfer",
    "ViewMode",
    "compute_balances",
    "aggregate_entries",
    "compute_shares",
    "member_share",
    "optimize_transfers",
    "transfer_to_entry",
    "is_visible",
    "filter_visible",
    "public_entries",
    "LedgerService",
]
