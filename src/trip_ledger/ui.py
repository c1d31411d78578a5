"""Interactive UI components for choosing a viewer and confirming settlements."""

import logging
from typing import Any

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.document import Document

from .models import Member

logger = logging.getLogger(__name__)


def member_label(member: Member) -> str:
    """Display label used for completion and selection."""
    return f"{member.name} ({member.id})"


def fuzzy_match(query: str, text: str) -> bool:
    """
    Fuzzy match: all characters in query must appear in order in text.

    Example:
        query="ali" matches "Alice (u1)"
        query="bu2" matches "Bob (u2)"
    """
    query_idx = 0
    for char in text:
        if query_idx < len(query) and char == query[query_idx]:
            query_idx += 1
    return query_idx == len(query)


class MemberCompleter(Completer):
    """Fuzzy search completer for trip members."""

    def __init__(self, members: list[Member]):
        """Initialize the completer with the trip roster."""
        self.members = members
        self.label_to_id = {member_label(m): m.id for m in members}

    def get_completions(self, document: Document, complete_event: Any):
        """Get fuzzy-matched completions."""
        query = document.text.lower()

        for label in self.label_to_id:
            if not query or fuzzy_match(query, label.lower()):
                yield Completion(
                    text=label,
                    start_position=-len(document.text),
                    display=label,
                )


def resolve_member(members: list[Member], text: str) -> str | None:
    """Map a typed label, id or unique name back to a member id."""
    text = text.strip()
    for member in members:
        if text in (member_label(member), member.id):
            return member.id

    by_name = [m for m in members if m.name.lower() == text.lower()]
    if len(by_name) == 1:
        return by_name[0].id
    return None


def select_member_interactive(members: list[Member]) -> str | None:
    """
    Interactive viewer selection with fuzzy search.

    Args:
        members: Trip roster

    Returns:
        Selected member id, or None to cancel
    """
    print("\n👤 Whose ledger do you want to see?")
    print("   Type to search, press Enter to confirm, Ctrl+C to cancel\n")

    session: PromptSession[str] = PromptSession(completer=MemberCompleter(members))

    try:
        while True:
            result = session.prompt("Member: ", complete_while_typing=True)

            if not result:
                return None

            member_id = resolve_member(members, result)
            if member_id:
                logger.info(f"User selected viewer: {member_id}")
                return member_id

            print("❌ Unknown member. Please select from the list or press Tab to complete.")

    except KeyboardInterrupt:
        print("\n⏭️  Cancelled")
        return None
    except EOFError:
        return None


def confirm_settlement(transfer_count: int) -> bool:
    """
    Simple yes/no confirmation before recording settlement entries.

    Returns:
        True if confirmed, False otherwise
    """
    response = (
        input(f"   Record {transfer_count} settlement entries? [y/N] ").strip().lower()
    )
    return response in ("y", "yes")
