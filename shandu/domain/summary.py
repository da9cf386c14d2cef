"""Financial summary: totals, balance and profit/loss classification."""

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Literal

from shandu.domain.ledger import total_by_type
from shandu.domain.models import Money, Transaction

Status = Literal["profit", "loss", "break-even"]

# Balances within +/- DEADBAND are reported as break-even
DEADBAND = 100.0


@dataclass(frozen=True)
class FinancialSummary:
    """Immutable ledger summary."""

    total_income: Money
    total_expense: Money
    balance: Money
    status: Status


def classify_balance(balance: float) -> Status:
    """Classify a balance as profit, loss or break-even.

    Args:
        balance: Income minus expense.

    Returns:
        "profit" above +DEADBAND, "loss" below -DEADBAND, otherwise "break-even".
    """
    if balance > DEADBAND:
        return "profit"
    if balance < -DEADBAND:
        return "loss"
    return "break-even"


def summarize(transactions: Iterable[Transaction]) -> FinancialSummary:
    """Summarise the full ledger.

    Args:
        transactions: Full ledger.

    Returns:
        FinancialSummary with totals, balance and status.
    """
    txns = list(transactions)
    income = total_by_type(txns, "income")
    expense = total_by_type(txns, "expense")
    balance = Money(income - expense)

    return FinancialSummary(
        total_income=income,
        total_expense=expense,
        balance=balance,
        status=classify_balance(balance),
    )
