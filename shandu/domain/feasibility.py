"""Goal feasibility: compare required savings velocity with the projected surplus."""

from dataclasses import dataclass
from datetime import datetime

from shandu.dates import DAYS_PER_MONTH, days_between
from shandu.domain.models import Goal, Money
from shandu.domain.projection import RateProjection

# Floor for months remaining; keeps the required rate finite for due or overdue goals
MIN_MONTHS_LEFT = 0.5


@dataclass(frozen=True)
class FeasibilityVerdict:
    """Immutable feasibility result for one goal."""

    months_left: float
    required_per_month: Money
    monthly_surplus: Money
    is_achievable: bool
    gap: Money  # Positive = shortfall, negative = headroom


def months_until(deadline: datetime, now: datetime) -> float:
    """Months (30-day) from now until the deadline, floored at MIN_MONTHS_LEFT."""
    return max(MIN_MONTHS_LEFT, days_between(now, deadline) / DAYS_PER_MONTH)


def evaluate_goal(goal: Goal, projection: RateProjection, now: datetime | None = None) -> FeasibilityVerdict:
    """Evaluate whether the projected surplus can fund a goal by its deadline.

    Past deadlines are not rejected; they fall to the floor and usually
    produce a large shortfall.

    Args:
        goal: Goal with a positive target amount.
        projection: Current rate projection.
        now: Reference time. Defaults to the current time.

    Returns:
        FeasibilityVerdict. Achievable when the surplus meets or exceeds the required rate.
    """
    months_left = months_until(goal.deadline, now or datetime.now())
    required = goal.target_amount / months_left
    surplus = projection.monthly_surplus

    return FeasibilityVerdict(
        months_left=months_left,
        required_per_month=Money(required),
        monthly_surplus=surplus,
        is_achievable=surplus >= required,
        gap=Money(required - surplus),
    )
