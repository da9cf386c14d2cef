"""Transaction management commands (add, delete)."""

import sqlite3
import sys

from rich.console import Console

from shandu.config import get_advisor_settings
from shandu.domain.ledger import LedgerError, find_transaction, new_transaction
from shandu.formatting import format_signed, short_id
from shandu.state import open_state

console = Console()


def add_command(
    type: str,
    amount: float,
    description: str,
    category: str | None = None,
    date: str | None = None,
) -> None:
    """Add a transaction manually.

    Args:
        type: "income" or "expense".
        amount: Non-negative amount.
        description: Transaction description.
        category: Optional category name (added to the category list if new).
        date: Optional date (YYYY-MM-DD, DD/MM/YYYY, or other formats). Defaults to now.
    """
    state = open_state()
    currency = get_advisor_settings().currency

    try:
        txn = new_transaction(type, amount, category or "Other", description, date)
    except LedgerError as e:
        console.print(f"[red]{e}[/red]")
        console.print("[dim]Accepted date formats: YYYY-MM-DD, DD/MM/YYYY, DD-MM-YYYY, etc.[/dim]")
        sys.exit(1)

    try:
        is_new_category = state.record_transaction(txn)
    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)

    if is_new_category:
        console.print(f"[green]✓[/green] Added new category: {txn.category}")
    console.print(
        f"[green]✓[/green] Recorded {txn.type} {format_signed(txn.amount, txn.type, currency)} "
        f"({txn.category}) [dim]{short_id(txn.id)}[/dim]"
    )


def delete_command(txn_id: str) -> None:
    """Delete a transaction by id or unique id prefix."""
    state = open_state()

    txn = find_transaction(state.transactions, txn_id)
    if txn is None:
        console.print(f"[red]No unique transaction matches '{txn_id}'[/red]")
        sys.exit(1)

    try:
        state.delete_transaction(txn.id)
    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)

    console.print(f"[green]✓[/green] Deleted transaction {short_id(txn.id)}: {txn.description}")
