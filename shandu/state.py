"""Application state coordinator.

AppState owns the ledger, goals, categories and preferences. The store is
injected; every mutation replaces the owned collection and persists the
whole snapshot. Derived values are recomputed on every access.
"""

import logging
from dataclasses import replace
from datetime import datetime
from pathlib import Path

from shandu.domain.goals import GoalFeasibility, add_goal, delete_goal, feasibility_report, goals_for_mode
from shandu.domain.ledger import add_transaction, delete_transaction
from shandu.domain.models import MODES, THEMES, CategoryName, Goal, Mode, Transaction
from shandu.domain.projection import RateProjection, project_rates
from shandu.domain.summary import FinancialSummary, summarize
from shandu.store.snapshot import Snapshot, SnapshotStore, SqliteStore

logger = logging.getLogger(__name__)


class AppState:
    """Single-writer owner of all persisted state."""

    def __init__(self, store: SnapshotStore) -> None:
        self._store = store
        self._snapshot = store.load()

    @property
    def snapshot(self) -> Snapshot:
        return self._snapshot

    @property
    def transactions(self) -> tuple[Transaction, ...]:
        return self._snapshot.transactions

    @property
    def goals(self) -> tuple[Goal, ...]:
        return self._snapshot.goals

    @property
    def categories(self) -> tuple[CategoryName, ...]:
        return self._snapshot.categories

    @property
    def theme(self) -> str:
        return self._snapshot.theme

    @property
    def mode(self) -> Mode:
        return self._snapshot.mode

    def _commit(self, snapshot: Snapshot) -> None:
        self._store.save(snapshot)
        self._snapshot = snapshot

    def add_transaction(self, txn: Transaction) -> None:
        """Record a transaction."""
        self._commit(replace(self._snapshot, transactions=add_transaction(self.transactions, txn)))
        logger.debug("Added %s %s (%s)", txn.type, txn.id, txn.amount)

    def record_transaction(self, txn: Transaction) -> bool:
        """Record a transaction and register its category in one save.

        Returns:
            True if the category was new.
        """
        categories = self.categories
        is_new = txn.category not in categories
        if is_new:
            categories = (*categories, txn.category)
        self._commit(
            replace(
                self._snapshot,
                transactions=add_transaction(self.transactions, txn),
                categories=categories,
            )
        )
        logger.debug("Recorded %s %s (%s)", txn.type, txn.id, txn.amount)
        return is_new

    def delete_transaction(self, txn_id: str) -> bool:
        """Delete a transaction by id.

        Returns:
            True if a transaction was removed.
        """
        remaining = delete_transaction(self.transactions, txn_id)
        if len(remaining) == len(self.transactions):
            return False
        self._commit(replace(self._snapshot, transactions=remaining))
        return True

    def add_goal(self, goal: Goal) -> None:
        """Record a goal."""
        self._commit(replace(self._snapshot, goals=add_goal(self.goals, goal)))

    def delete_goal(self, goal_id: str) -> bool:
        """Delete a goal by id.

        Returns:
            True if a goal was removed.
        """
        remaining = delete_goal(self.goals, goal_id)
        if len(remaining) == len(self.goals):
            return False
        self._commit(replace(self._snapshot, goals=remaining))
        return True

    def add_category(self, name: str) -> bool:
        """Add a category if it is not already present.

        Returns:
            True if the category was added.
        """
        name = name.strip()
        if not name or name in self.categories:
            return False
        self._commit(replace(self._snapshot, categories=(*self.categories, CategoryName(name))))
        return True

    def set_theme(self, theme_id: str) -> None:
        """Select a theme from the catalogue.

        Raises:
            ValueError: If the theme id is unknown.
        """
        if theme_id not in THEMES:
            raise ValueError(f"Unknown theme '{theme_id}'. Choose from: {', '.join(THEMES)}")
        self._commit(replace(self._snapshot, theme=theme_id))

    def set_mode(self, mode: str) -> None:
        """Switch the operating mode.

        Raises:
            ValueError: If the mode is unknown.
        """
        if mode not in MODES:
            raise ValueError(f"Unknown mode '{mode}'. Choose from: {', '.join(MODES)}")
        self._commit(replace(self._snapshot, mode=mode))  # type: ignore[arg-type]

    def summary(self) -> FinancialSummary:
        return summarize(self.transactions)

    def projection(self, now: datetime | None = None) -> RateProjection:
        return project_rates(self.transactions, now)

    def visible_goals(self) -> list[Goal]:
        return goals_for_mode(self.goals, self.mode)

    def feasibility(self, now: datetime | None = None) -> list[GoalFeasibility]:
        return feasibility_report(self.goals, self.transactions, self.mode, now)


def open_state(db_path: Path | None = None) -> AppState:
    """AppState backed by the SQLite store at db_path (default location if None)."""
    return AppState(SqliteStore(db_path))
