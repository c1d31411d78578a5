"""Visibility rules for private ledger entries."""

from collections.abc import Iterable

from .models import LedgerEntry


def is_visible(entry: LedgerEntry, viewer_id: str) -> bool:
    """A private entry is visible only to the member who created it."""
    return not entry.is_private or entry.created_by == viewer_id


def filter_visible(entries: Iterable[LedgerEntry], viewer_id: str) -> list[LedgerEntry]:
    """Return the entries that count toward `viewer_id`'s aggregation."""
    return [entry for entry in entries if is_visible(entry, viewer_id)]


def public_entries(entries: Iterable[LedgerEntry]) -> list[LedgerEntry]:
    """Return the entries every member can see."""
    return [entry for entry in entries if not entry.is_private]
