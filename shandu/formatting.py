"""Text formatting helpers shared by commands and advisor prompts."""

from shandu.domain.models import Transaction


def format_money(amount: float, currency: str = "R") -> str:
    """Format an amount with a currency prefix, e.g. R1,234.50 or -R20.00."""
    if amount < 0:
        return f"-{currency}{abs(amount):,.2f}"
    return f"{currency}{amount:,.2f}"


def format_signed(amount: float, type: str, currency: str = "R") -> str:
    """Format a transaction amount with rich colour markup (+ income, - expense)."""
    if type == "income":
        return f"[green]+{currency}{amount:,.2f}[/green]"
    return f"[red]-{currency}{amount:,.2f}[/red]"


def transaction_line(txn: Transaction, currency: str = "R") -> str:
    """One-line plain-text description of a transaction."""
    sign = "+" if txn.type == "income" else "-"
    return f"{txn.date.date().isoformat()} {sign}{currency}{txn.amount:,.2f} {txn.category}: {txn.description}"


def short_id(value: str) -> str:
    """First 8 characters of an id, for display."""
    return value[:8]
