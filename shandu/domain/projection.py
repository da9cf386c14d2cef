"""Rate projection: normalise an irregular ledger into monthly rates.

The projection is recomputed from the full ledger on every call. Ledgers
are personal-finance sized, so a full rescan is always cheap enough.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime

from shandu.dates import DAYS_PER_MONTH, days_between
from shandu.domain.ledger import total_by_type
from shandu.domain.models import Money, Transaction


@dataclass(frozen=True)
class RateProjection:
    """Immutable average monthly income, expense and surplus."""

    avg_monthly_income: Money
    avg_monthly_expense: Money
    monthly_surplus: Money


def months_spanned(transactions: Sequence[Transaction], now: datetime | None = None) -> float:
    """Number of months covered by the ledger, floored at one.

    Args:
        transactions: Transactions in any order.
        now: Reference time used for an empty ledger. Defaults to the current time.

    Returns:
        Months between the oldest and newest transaction (30-day months), at least 1.
    """
    if transactions:
        dates = [t.date for t in transactions]
        min_date, max_date = min(dates), max(dates)
    else:
        min_date = max_date = now or datetime.now()

    days_span = max(1.0, days_between(min_date, max_date))
    return max(1.0, days_span / DAYS_PER_MONTH)


def project_rates(transactions: Sequence[Transaction], now: datetime | None = None) -> RateProjection:
    """Project the ledger into average monthly rates.

    Args:
        transactions: Full ledger, unsorted, possibly empty.
        now: Reference time used for an empty ledger.

    Returns:
        RateProjection. All rates are zero for an empty ledger.
    """
    months = months_spanned(transactions, now)
    avg_income = total_by_type(transactions, "income") / months
    avg_expense = total_by_type(transactions, "expense") / months

    return RateProjection(
        avg_monthly_income=Money(avg_income),
        avg_monthly_expense=Money(avg_expense),
        monthly_surplus=Money(avg_income - avg_expense),
    )
