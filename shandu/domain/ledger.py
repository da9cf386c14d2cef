"""Pure functions for the transaction ledger.

This module contains the functional core for ledger operations:
- No I/O operations (no database, no console, no files)
- No side effects
- Pure data transformations
- Easy to test

The ledger is an immutable tuple of transactions. Mutations return a new
tuple and leave the original untouched.
"""

import math
import uuid
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime

from shandu.dates import parse_date
from shandu.domain.models import (
    TRANSACTION_TYPES,
    CategoryName,
    Money,
    Transaction,
    TransactionType,
)

Ledger = tuple[Transaction, ...]


class LedgerError(ValueError):
    """Raised when a transaction cannot be created from the given fields."""


@dataclass(frozen=True)
class BalancePoint:
    """Running balance after a single transaction."""

    date: datetime
    amount: Money
    balance: Money


def new_transaction(
    type: str,
    amount: float,
    category: str,
    description: str,
    date: str | datetime | None = None,
    now: datetime | None = None,
) -> Transaction:
    """Create a new transaction with a fresh id.

    Args:
        type: "income" or "expense".
        amount: Non-negative amount.
        category: Category label.
        description: Free-text description.
        date: Date of occurrence. Defaults to now.
        now: Current time, used when date is omitted.

    Returns:
        New Transaction.

    Raises:
        LedgerError: If the type is unknown, the amount is negative or not finite, or the date is unparseable.
    """
    if type not in TRANSACTION_TYPES:
        raise LedgerError(f"Unknown transaction type '{type}'")
    if not math.isfinite(amount):
        raise LedgerError("Amount must be a finite number")
    if amount < 0:
        raise LedgerError("Amount must not be negative")

    if date is None:
        occurred = now or datetime.now()
    else:
        try:
            occurred = parse_date(date)
        except ValueError as e:
            raise LedgerError(str(e)) from e

    txn_type: TransactionType = "income" if type == "income" else "expense"
    return Transaction(
        id=uuid.uuid4().hex,
        type=txn_type,
        amount=Money(float(amount)),
        category=CategoryName(category.strip() or "Other"),
        description=description.strip(),
        date=occurred,
    )


def add_transaction(ledger: Sequence[Transaction], txn: Transaction) -> Ledger:
    """Return a new ledger with the transaction appended."""
    return (*ledger, txn)


def delete_transaction(ledger: Sequence[Transaction], txn_id: str) -> Ledger:
    """Return a new ledger without the transaction with the given id.

    Unknown ids leave the ledger unchanged.
    """
    return tuple(t for t in ledger if t.id != txn_id)


def find_transaction(ledger: Iterable[Transaction], txn_id: str) -> Transaction | None:
    """Find a transaction by id, or by a unique id prefix."""
    if not txn_id:
        return None
    matches = [t for t in ledger if t.id == txn_id or t.id.startswith(txn_id)]
    exact = [t for t in matches if t.id == txn_id]
    if exact:
        return exact[0]
    return matches[0] if len(matches) == 1 else None


def total_by_type(transactions: Iterable[Transaction], type: TransactionType) -> Money:
    """Sum the amounts of all transactions of one type."""
    return Money(sum((t.amount for t in transactions if t.type == type), 0.0))


def signed_amount(txn: Transaction) -> Money:
    """Amount with expenses negated."""
    return txn.amount if txn.type == "income" else Money(-txn.amount)


def sort_by_date(transactions: Iterable[Transaction], newest_first: bool = False) -> list[Transaction]:
    """Sort transactions by date (stable for equal dates)."""
    return sorted(transactions, key=lambda t: t.date, reverse=newest_first)


def recent_transactions(ledger: Sequence[Transaction], count: int = 5) -> list[Transaction]:
    """The last `count` transactions in recording order."""
    if count <= 0:
        return []
    return list(ledger[-count:])


def balance_history(transactions: Iterable[Transaction]) -> list[BalancePoint]:
    """Running balance in date order.

    Args:
        transactions: Transactions in any order.

    Returns:
        One BalancePoint per transaction, oldest first.
    """
    history: list[BalancePoint] = []
    balance = 0.0
    for txn in sort_by_date(transactions):
        balance += signed_amount(txn)
        history.append(BalancePoint(date=txn.date, amount=txn.amount, balance=Money(balance)))
    return history


def expense_breakdown(transactions: Iterable[Transaction]) -> list[tuple[CategoryName, Money]]:
    """Total expense per category, largest first.

    Args:
        transactions: Transactions in any order.

    Returns:
        List of (category, total) tuples sorted by total descending, then name.
    """
    totals: dict[CategoryName, float] = {}
    for txn in transactions:
        if txn.type == "expense":
            totals[txn.category] = totals.get(txn.category, 0.0) + txn.amount
    return sorted(
        ((category, Money(total)) for category, total in totals.items()),
        key=lambda x: (-x[1], x[0]),
    )
