"""CLI for TripLedger using Typer."""

import logging
import sys
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .config import load_settings
from .models import LedgerSummary, TripSnapshot, ViewMode
from .money import Money
from .service import LedgerService
from .snapshot import load_snapshot, save_snapshot
from .ui import confirm_settlement, select_member_interactive
from .visibility import public_entries

app = typer.Typer(
    name="trip-ledger",
    help="Group travel-expense balances and Smart Route settlement",
)

console = Console()


def setup_logging(verbose: bool = False):
    """Setup logging configuration."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


def format_money(amount: Money, currency: str = "", use_color: bool = True) -> str:
    """
    Format money in accounting style with alignment.

    Negative amounts use parentheses: (85.02 USD)
    Positive amounts have spaces:      85.02 USD
    """
    suffix = f" {currency}" if currency else ""
    text = f"{abs(amount).round().to_decimal():,.2f}"
    if amount < Money.zero():
        if use_color:
            return f"([red]{text}[/red]{suffix})"
        return f"({text}{suffix})"
    if use_color:
        return f" [green]{text}[/green]{suffix} "
    return f" {text}{suffix} "


def resolve_viewer(snapshot: TripSnapshot, viewer: str | None) -> str | None:
    """Use the given viewer id or ask interactively."""
    if viewer:
        return viewer
    return select_member_interactive(snapshot.members)


def display_summary(
    service: LedgerService,
    snapshot: TripSnapshot,
    summary: LedgerSummary,
    mode: ViewMode,
):
    """Display a viewer's balances in table format."""
    result = summary.result
    currency = snapshot.base_currency
    viewer_name = escape(snapshot.member_name(result.viewer_id))
    title = escape(snapshot.name or snapshot.trip_id or "Trip")

    console.print(f"\n[bold]{title}[/bold]")
    console.print(f"  Viewer: {viewer_name}")
    console.print(f"  Mode: {mode.value}")
    console.print(f"  You spent:    {format_money(result.spent_total, currency)}")
    console.print(f"  You paid:     {format_money(result.paid_total, currency)}")
    console.print(f"  You received: {format_money(result.received_total, currency)}")
    console.print(f"  Group total:  {format_money(result.group_total, currency)}")
    console.print()

    table = Table(title="Balances", show_header=True, header_style="bold magenta")
    table.add_column("Member", style="cyan")
    table.add_column("Net", justify="right")
    table.add_column("With you", justify="right")

    for member in snapshot.members:
        net = result.net_balances.get(member.id, Money.zero())
        if member.id == result.viewer_id:
            with_you = "[dim]—[/dim]"
        else:
            with_you = format_money(service.display_balance(summary, member.id, mode))
        table.add_row(escape(member.name), format_money(net), with_you)

    console.print(table)

    spend_rows = [
        (category.value, amount)
        for category, amount in result.category_spend.items()
        if not amount.is_zero()
    ]
    if spend_rows:
        spend_table = Table(title="Your spending", header_style="bold magenta")
        spend_table.add_column("Category", style="yellow")
        spend_table.add_column("Amount", justify="right")
        for name, amount in spend_rows:
            spend_table.add_row(name, format_money(amount, use_color=False))
        console.print(spend_table)

    display_issues(summary)


def display_transfers(snapshot: TripSnapshot, summary: LedgerSummary):
    """Display the Smart Route transfer plan."""
    if not summary.transfers:
        console.print("\n[green]✓ Everyone is settled up.[/green]")
        return

    table = Table(title="Smart Route", show_header=True, header_style="bold magenta")
    table.add_column("#", style="dim", width=4)
    table.add_column("From", style="cyan")
    table.add_column("To", style="cyan")
    table.add_column("Amount", justify="right")

    for index, transfer in enumerate(summary.transfers, start=1):
        table.add_row(
            str(index),
            escape(snapshot.member_name(transfer.from_id)),
            escape(snapshot.member_name(transfer.to_id)),
            format_money(transfer.amount, snapshot.base_currency, use_color=False),
        )

    console.print()
    console.print(table)


def display_issues(summary: LedgerSummary):
    """List data-quality issues found while computing balances."""
    issues = summary.result.issues
    if not issues:
        return

    console.print(f"\n[yellow]⚠️  {len(issues)} data-quality issue(s):[/yellow]")
    for issue in issues:
        member = f" (member {escape(issue.member_id)})" if issue.member_id else ""
        console.print(
            f"  [dim]{escape(issue.entry_id)}[/dim] {issue.kind}{member}: "
            f"{escape(issue.detail)}"
        )


@app.command()
def balances(
    snapshot_path: Path = typer.Argument(..., help="Trip snapshot JSON file"),
    viewer: Optional[str] = typer.Option(
        None, "--viewer", "-u", help="Member id to view balances for"
    ),
    mode: Optional[ViewMode] = typer.Option(
        None, "--mode", "-m", case_sensitive=False, help="SMART or DIRECT balances"
    ),
    audit: bool = typer.Option(
        False, "--audit", help="Include private entries of every member"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
):
    """
    Show who owes whom from one member's point of view.

    Loads the trip snapshot, applies the privacy rules for the viewer
    (unless --audit is given) and prints totals and per-member balances.
    """
    setup_logging(verbose)

    try:
        settings = load_settings()
        service = LedgerService(settings)
        snapshot = load_snapshot(snapshot_path)

        viewer_id = resolve_viewer(snapshot, viewer)
        if viewer_id is None:
            console.print("[yellow]No member selected.[/yellow]")
            return

        compute = service.audit if audit else service.summarize
        summary = compute(snapshot.entries, snapshot.members, viewer_id)

        display_summary(service, snapshot, summary, mode or settings.default_view_mode)

    except Exception as e:
        console.print(f"\n[bold red]Error:[/bold red] {escape(str(e))}")
        if verbose:
            raise
        sys.exit(1)


@app.command()
def settle(
    snapshot_path: Path = typer.Argument(..., help="Trip snapshot JSON file"),
    viewer: Optional[str] = typer.Option(
        None, "--viewer", "-u", help="Member id proposing the settlement"
    ),
    apply: bool = typer.Option(
        False, "--apply", help="Record the transfers as settlement entries"
    ),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation prompt"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
):
    """
    Propose the Smart Route transfers that settle all debts.

    The plan is computed from shared entries only, so private expenses
    never shape settlements that every member sees. Without --apply this
    is a dry run. With --apply the transfers are appended to the snapshot
    as SETTLEMENT entries created by the viewer.
    """
    setup_logging(verbose)

    try:
        settings = load_settings()
        service = LedgerService(settings)
        snapshot = load_snapshot(snapshot_path)

        viewer_id = resolve_viewer(snapshot, viewer)
        if viewer_id is None:
            console.print("[yellow]No member selected.[/yellow]")
            return

        summary = service.summarize(
            public_entries(snapshot.entries), snapshot.members, viewer_id
        )
        display_transfers(snapshot, summary)
        display_issues(summary)

        if not summary.transfers:
            return

        if not apply:
            console.print(
                f"\n[bold]To record these transfers, run:[/bold]\n"
                f"  [cyan]trip-ledger settle {snapshot_path} "
                f"--viewer {viewer_id} --apply[/cyan]\n"
            )
            return

        existing_ids = {entry.id for entry in snapshot.entries}
        new_entries = [
            entry
            for entry in service.settlement_entries(
                summary, created_by=viewer_id, trip_id=snapshot.trip_id
            )
            if entry.id not in existing_ids
        ]
        if not new_entries:
            console.print(
                "\n[yellow]⚠️  These settlements are already recorded.[/yellow]\n"
            )
            return

        if not yes and not confirm_settlement(len(new_entries)):
            console.print("[yellow]Cancelled.[/yellow]")
            return

        updated = snapshot.model_copy(
            update={"entries": [*snapshot.entries, *new_entries]}
        )
        save_snapshot(snapshot_path, updated)

        console.print(
            f"\n[bold green]✓ Recorded {len(new_entries)} settlement entries "
            f"in {snapshot_path}[/bold green]"
        )

    except Exception as e:
        console.print(f"\n[bold red]Error:[/bold red] {escape(str(e))}")
        if verbose:
            raise
        sys.exit(1)


if __name__ == "__main__":
    app()
