"""Advisor commands: ask a question, search a product, shop for alternatives."""

import sqlite3
import sys

import typer
from rich.console import Console
from rich.table import Table

from shandu.advisor import get_financial_advice, get_shopping_insights, search_product
from shandu.config import get_advisor_settings
from shandu.domain.models import Citation
from shandu.domain.shopping import purchase_transaction
from shandu.formatting import format_money, short_id
from shandu.state import open_state

console = Console()


def print_citations(citations: list[Citation]) -> None:
    """Print source links under a response."""
    if not citations:
        return
    console.print("\n[dim]Sources:[/dim]")
    for citation in citations:
        console.print(f"  [dim]•[/dim] [link={citation.uri}]{citation.title}[/link]")


def ask_command(question: str) -> None:
    """Ask the advisor a free-form question about your finances."""
    state = open_state()
    settings = get_advisor_settings()

    with console.status("Consulting Buddy..."):
        answer = get_financial_advice(state.transactions, state.mode, question, settings)

    console.print(answer)


def search_command(query: str) -> None:
    """Look up current prices for a product."""
    state = open_state()
    settings = get_advisor_settings()

    with console.status(f"Searching for {query}..."):
        response = search_product(query, state.mode, settings)

    console.print(response.text)
    print_citations(response.citations)


def shop_command(query: str) -> None:
    """Find cheapest, healthier and sale options, and optionally log a purchase."""
    state = open_state()
    settings = get_advisor_settings()

    with console.status(f"Scanning stores for {query}..."):
        insights = get_shopping_insights(query, settings)

    if insights.text:
        console.print(insights.text)
    print_citations(insights.citations)

    if not insights.items:
        console.print("\n[dim]No structured recommendations found[/dim]")
        return

    table = Table(title=f"Options for {query}")
    table.add_column("#", style="dim", justify="right")
    table.add_column("Type", style="magenta")
    table.add_column("Product", style="white")
    table.add_column("Store", style="cyan")
    table.add_column("Price", justify="right")
    table.add_column("Why", style="dim")

    for idx, item in enumerate(insights.items, 1):
        table.add_row(
            str(idx),
            item.type,
            f"{item.brand} {item.name}",
            item.store,
            format_money(item.price, settings.currency),
            item.reason,
        )
    console.print()
    console.print(table)

    choice: str = typer.prompt(
        f"\nLog a purchase as an expense (1-{len(insights.items)}, or q to quit)", type=str, default="q"
    )
    if choice.lower() == "q":
        return

    try:
        idx = int(choice) - 1
    except ValueError:
        console.print("[red]Invalid input[/red]")
        return
    if not 0 <= idx < len(insights.items):
        console.print("[red]Invalid selection[/red]")
        return

    txn = purchase_transaction(insights.items[idx])
    try:
        state.record_transaction(txn)
    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)

    console.print(
        f"[green]✓[/green] Logged expense {format_money(txn.amount, settings.currency)}: "
        f"{txn.description} [dim]{short_id(txn.id)}[/dim]"
    )
