"""Key-value query functions."""

import sqlite3
from pathlib import Path

from shandu.store.schema import get_db_path


def _connect(db_path: Path | None = None) -> sqlite3.Connection:
    """Create a database connection with row factory.

    Args:
        db_path: Path to the database file. If None, uses default location.

    Returns:
        Database connection with row_factory configured.
    """
    if db_path is None:
        db_path = get_db_path()
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    return conn


def get_value(key: str, db_path: Path | None = None) -> str | None:
    """Get the raw stored text for a key.

    Args:
        key: Key name.
        db_path: Path to the database file. If None, uses default location.

    Returns:
        Stored text, or None if the key is missing.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        cursor.execute("SELECT value FROM kv WHERE key = ?", (key,))
        row = cursor.fetchone()
        return row["value"] if row else None


def get_values(keys: list[str], db_path: Path | None = None) -> dict[str, str]:
    """Get the raw stored text for several keys.

    Args:
        keys: Key names.
        db_path: Path to the database file. If None, uses default location.

    Returns:
        Dictionary of key to stored text; missing keys are absent.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    if not keys:
        return {}
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        placeholders = ", ".join("?" for _ in keys)
        cursor.execute(f"SELECT key, value FROM kv WHERE key IN ({placeholders})", keys)
        return {row["key"]: row["value"] for row in cursor.fetchall()}


def set_values(values: dict[str, str], db_path: Path | None = None) -> None:
    """Write several keys in one transaction.

    Args:
        values: Dictionary of key to text.
        db_path: Path to the database file. If None, uses default location.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        try:
            cursor.executemany(
                """
                INSERT INTO kv (key, value, updated_at) VALUES (?, ?, datetime('now'))
                ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = excluded.updated_at
                """,
                list(values.items()),
            )
            conn.commit()
        except sqlite3.Error:
            conn.rollback()
            raise
