"""Pure functions for goals: creation, scoping and feasibility reports.

This module contains the functional core for goal operations:
- No I/O operations (no database, no console, no files)
- No side effects
- Pure data transformations
- Easy to test
"""

import math
import uuid
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime

from shandu.dates import parse_date
from shandu.domain.feasibility import FeasibilityVerdict, evaluate_goal
from shandu.domain.models import (
    GOAL_TYPES,
    MODES,
    PRIORITIES,
    CategoryName,
    Goal,
    GoalType,
    Mode,
    Money,
    Priority,
    Transaction,
)
from shandu.domain.projection import project_rates

Goals = tuple[Goal, ...]

# Wizard labels per mode; personal mode does not offer profit_increase
GOAL_TYPE_LABELS: dict[Mode, dict[GoalType, str]] = {
    "personal": {
        "save": "Save Money (Target Amount)",
        "debt": "Pay Off Debt",
        "buy": "Buy Something (Laptop, Car, etc.)",
        "waste_reduction": "Reduce Wasteful Spending",
        "emergency": "Build Emergency Fund",
    },
    "business": {
        "profit_increase": "Increase Monthly Profit",
        "waste_reduction": "Reduce Operating Costs",
        "buy": "Acquire Asset / Equipment",
        "emergency": "Build Cash Reserves",
        "debt": "Clear Business Debt",
    },
}

_PRIORITY_RANK: dict[Priority, int] = {"high": 0, "medium": 1, "low": 2}


class GoalError(ValueError):
    """Raised when a goal cannot be created from the given fields."""


@dataclass(frozen=True)
class GoalFeasibility:
    """A goal paired with its feasibility verdict."""

    goal: Goal
    verdict: FeasibilityVerdict


def new_goal(
    mode: str,
    type: str,
    title: str,
    target_amount: float,
    deadline: str | datetime,
    priority: str = "medium",
    category: str = "General",
    now: datetime | None = None,
) -> Goal:
    """Create a new goal with a fresh id.

    Args:
        mode: "personal" or "business".
        type: One of GOAL_TYPES.
        title: Goal title.
        target_amount: Positive amount to accumulate.
        deadline: Deadline date. Past dates are accepted.
        priority: "low", "medium" or "high".
        category: Free-text category.
        now: Creation time. Defaults to the current time.

    Returns:
        New Goal.

    Raises:
        GoalError: If any field is invalid.
    """
    if mode not in MODES:
        raise GoalError(f"Unknown mode '{mode}'")
    if type not in GOAL_TYPES:
        raise GoalError(f"Unknown goal type '{type}'")
    if priority not in PRIORITIES:
        raise GoalError(f"Unknown priority '{priority}'")
    if not title.strip():
        raise GoalError("Title must not be empty")
    if not math.isfinite(target_amount):
        raise GoalError("Target amount must be a finite number")
    if not target_amount > 0:
        raise GoalError("Target amount must be positive")

    try:
        due = parse_date(deadline)
    except ValueError as e:
        raise GoalError(str(e)) from e

    return Goal(
        id=uuid.uuid4().hex,
        mode=mode,  # type: ignore[arg-type]
        type=type,  # type: ignore[arg-type]
        title=title.strip(),
        category=CategoryName(category.strip() or "General"),
        target_amount=Money(float(target_amount)),
        deadline=due,
        priority=priority,  # type: ignore[arg-type]
        created_at=now or datetime.now(),
    )


def add_goal(goals: Sequence[Goal], goal: Goal) -> Goals:
    """Return a new goal collection with the goal appended."""
    return (*goals, goal)


def delete_goal(goals: Sequence[Goal], goal_id: str) -> Goals:
    """Return a new goal collection without the goal with the given id."""
    return tuple(g for g in goals if g.id != goal_id)


def find_goal(goals: Iterable[Goal], goal_id: str) -> Goal | None:
    """Find a goal by id, or by a unique id prefix."""
    if not goal_id:
        return None
    matches = [g for g in goals if g.id == goal_id or g.id.startswith(goal_id)]
    exact = [g for g in matches if g.id == goal_id]
    if exact:
        return exact[0]
    return matches[0] if len(matches) == 1 else None


def goals_for_mode(goals: Iterable[Goal], mode: Mode) -> list[Goal]:
    """Goals visible in the given operating mode, in creation order."""
    return [g for g in goals if g.mode == mode]


def goal_type_label(goal_type: GoalType, mode: Mode) -> str:
    """Human label for a goal type as the wizard shows it in the given mode."""
    labels = GOAL_TYPE_LABELS[mode]
    if goal_type in labels:
        return labels[goal_type]
    return goal_type.replace("_", " ").title()


def feasibility_report(
    goals: Iterable[Goal],
    transactions: Sequence[Transaction],
    mode: Mode,
    now: datetime | None = None,
) -> list[GoalFeasibility]:
    """Evaluate every goal of the active mode against one projection.

    Args:
        goals: All goals.
        transactions: Full ledger.
        mode: Active operating mode.
        now: Reference time. Defaults to the current time.

    Returns:
        GoalFeasibility list sorted by priority (high first), then deadline.
    """
    now = now or datetime.now()
    projection = project_rates(transactions, now)
    visible = sorted(goals_for_mode(goals, mode), key=lambda g: (_PRIORITY_RANK[g.priority], g.deadline))
    return [GoalFeasibility(goal=g, verdict=evaluate_goal(g, projection, now)) for g in visible]
