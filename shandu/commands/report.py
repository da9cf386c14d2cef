"""Summary command: totals, monthly rates and expense breakdown."""

from rich.console import Console

from shandu.config import get_advisor_settings
from shandu.domain.ledger import balance_history, expense_breakdown
from shandu.domain.models import Money
from shandu.domain.projection import months_spanned
from shandu.formatting import format_money
from shandu.state import open_state

console = Console()

STATUS_STYLES = {
    "profit": "green",
    "loss": "red",
    "break-even": "yellow",
}


def calculate_histogram_bar_length(
    amount: Money,
    max_amount: Money,
    bar_width: int,
) -> int:
    """Calculate histogram bar length.

    Args:
        amount: Amount to display.
        max_amount: Maximum amount in dataset.
        bar_width: Maximum bar width in characters.

    Returns:
        Bar length in characters.
    """
    if max_amount <= 0:
        return 0
    return int((abs(amount) / max_amount) * bar_width)


def summary_command(histogram: bool = True) -> None:
    """Show ledger summary, projected monthly rates and expenses by category."""
    state = open_state()
    currency = get_advisor_settings().currency

    summary = state.summary()
    projection = state.projection()
    style = STATUS_STYLES[summary.status]

    console.print(f"[bold cyan]{state.mode.title()} Ledger[/bold cyan]\n")
    console.print(f"  [bold]Net position:[/bold]   [{style}]{format_money(summary.balance, currency)}[/{style}]")
    console.print(f"  [bold]Total income:[/bold]   [green]{format_money(summary.total_income, currency)}[/green]")
    console.print(f"  [bold]Total expenses:[/bold] [red]{format_money(summary.total_expense, currency)}[/red]")
    console.print(f"  [bold]Status:[/bold]         [{style}]{summary.status.upper()}[/{style}]\n")

    if not state.transactions:
        console.print("[dim]No transactions yet[/dim]")
        return

    months = months_spanned(state.transactions)
    console.print(f"[bold]Monthly rates[/bold] [dim](over {months:.1f} months)[/dim]\n")
    console.print(f"  Avg income:   {format_money(projection.avg_monthly_income, currency)}")
    console.print(f"  Avg expenses: {format_money(projection.avg_monthly_expense, currency)}")
    surplus_style = "green" if projection.monthly_surplus >= 0 else "red"
    console.print(
        f"  Surplus:      [{surplus_style}]{format_money(projection.monthly_surplus, currency)}[/{surplus_style}]\n"
    )

    breakdown = expense_breakdown(state.transactions)
    if breakdown:
        console.print("[bold red]Expenses by category:[/bold red]\n")
        max_amount = breakdown[0][1]
        for category, total in breakdown:
            amount_display = format_money(total, currency)
            if histogram:
                bar = "█" * calculate_histogram_bar_length(total, max_amount, 30)
                console.print(f"  {category:20} {amount_display:>12} {bar}")
            else:
                console.print(f"  {category}: {amount_display}")
        console.print()

    history = balance_history(state.transactions)
    lowest = min(history, key=lambda p: p.balance)
    highest = max(history, key=lambda p: p.balance)
    console.print(
        f"[dim]Balance range: {format_money(lowest.balance, currency)} ({lowest.date.date().isoformat()}) "
        f"to {format_money(highest.balance, currency)} ({highest.date.date().isoformat()})[/dim]"
    )
