"""Snapshot persistence: load and save the whole application state as one unit."""

import json
import logging
import sqlite3
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

from shandu.domain.models import (
    DEFAULT_CATEGORIES,
    DEFAULT_MODE,
    DEFAULT_THEME,
    CategoryName,
    Goal,
    Mode,
    Transaction,
)
from shandu.store.queries import get_values, set_values
from shandu.store.records import (
    decode_categories,
    decode_goals,
    decode_mode,
    decode_theme,
    decode_transactions,
    encode_goal,
    encode_transaction,
)
from shandu.store.schema import get_db_path, init_database

logger = logging.getLogger(__name__)

KEYS = ["transactions", "goals", "categories", "theme", "mode"]


@dataclass(frozen=True)
class Snapshot:
    """Immutable copy of everything the application persists."""

    transactions: tuple[Transaction, ...] = ()
    goals: tuple[Goal, ...] = ()
    categories: tuple[CategoryName, ...] = field(default=DEFAULT_CATEGORIES)
    theme: str = DEFAULT_THEME
    mode: Mode = DEFAULT_MODE


class SnapshotStore(Protocol):
    """Persistence port used by the application state."""

    def load(self) -> Snapshot: ...

    def save(self, snapshot: Snapshot) -> None: ...


def encode_snapshot(snapshot: Snapshot) -> dict[str, str]:
    """Encode a snapshot as one JSON document per key."""
    return {
        "transactions": json.dumps([encode_transaction(t) for t in snapshot.transactions]),
        "goals": json.dumps([encode_goal(g) for g in snapshot.goals]),
        "categories": json.dumps(list(snapshot.categories)),
        "theme": json.dumps(snapshot.theme),
        "mode": json.dumps(snapshot.mode),
    }


def decode_snapshot(values: dict[str, str]) -> Snapshot:
    """Decode stored documents; missing or malformed entries fall back to defaults."""
    return Snapshot(
        transactions=decode_transactions(values.get("transactions")),
        goals=decode_goals(values.get("goals")),
        categories=decode_categories(values.get("categories")),
        theme=decode_theme(values.get("theme")),
        mode=decode_mode(values.get("mode")),
    )


class SqliteStore:
    """SnapshotStore backed by the SQLite key-value table."""

    def __init__(self, db_path: Path | None = None) -> None:
        self.db_path = db_path if db_path is not None else get_db_path()

    def load(self) -> Snapshot:
        """Load the stored snapshot.

        A missing or unreadable database yields an empty snapshot; the
        failure is logged.
        """
        if not self.db_path.exists():
            logger.info("No database at %s, starting empty", self.db_path)
            return Snapshot()
        try:
            values = get_values(KEYS, self.db_path)
        except sqlite3.Error as e:
            logger.warning("Failed to read %s: %s", self.db_path, e)
            return Snapshot()
        return decode_snapshot(values)

    def save(self, snapshot: Snapshot) -> None:
        """Persist the whole snapshot in one transaction.

        Raises:
            sqlite3.Error: If database operation fails.
        """
        if not self.db_path.exists():
            init_database(self.db_path)
        set_values(encode_snapshot(snapshot), self.db_path)
        logger.debug(
            "Saved %d transactions and %d goals to %s",
            len(snapshot.transactions),
            len(snapshot.goals),
            self.db_path,
        )
