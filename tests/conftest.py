"""Shared fixtures for shandu tests."""

from datetime import datetime

import pytest

from shandu.domain.models import CategoryName, Goal, Money, Transaction
from shandu.store.snapshot import Snapshot

NOW = datetime(2025, 6, 1, 12, 0, 0)


class MemoryStore:
    """In-memory SnapshotStore that records every save."""

    def __init__(self, snapshot: Snapshot | None = None) -> None:
        self.snapshot = snapshot or Snapshot()
        self.saves: list[Snapshot] = []

    def load(self) -> Snapshot:
        return self.snapshot

    def save(self, snapshot: Snapshot) -> None:
        self.snapshot = snapshot
        self.saves.append(snapshot)


def make_txn(
    type: str = "expense",
    amount: float = 10.0,
    date: datetime = NOW,
    category: str = "Groceries",
    id: str = "t1",
    description: str = "Bread",
) -> Transaction:
    return Transaction(
        id=id,
        type=type,  # type: ignore[arg-type]
        amount=Money(amount),
        category=CategoryName(category),
        description=description,
        date=date,
    )


def make_goal(
    target: float = 1000.0,
    deadline: datetime = NOW,
    mode: str = "personal",
    id: str = "g1",
    priority: str = "medium",
    title: str = "Laptop",
) -> Goal:
    return Goal(
        id=id,
        mode=mode,  # type: ignore[arg-type]
        type="save",
        title=title,
        category=CategoryName("General"),
        target_amount=Money(target),
        deadline=deadline,
        priority=priority,  # type: ignore[arg-type]
        created_at=NOW,
    )


@pytest.fixture
def memory_store() -> MemoryStore:
    return MemoryStore()
