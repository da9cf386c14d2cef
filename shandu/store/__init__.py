"""Database store layer - provides persistence for the application.

This module re-exports the public persistence API for easy importing.
"""

from shandu.store.queries import get_value, get_values, set_values
from shandu.store.schema import database_exists, get_db_path, init_database
from shandu.store.snapshot import Snapshot, SnapshotStore, SqliteStore, decode_snapshot, encode_snapshot

__all__ = [
    # Schema
    "database_exists",
    "get_db_path",
    "init_database",
    # Queries
    "get_value",
    "get_values",
    "set_values",
    # Snapshots
    "Snapshot",
    "SnapshotStore",
    "SqliteStore",
    "decode_snapshot",
    "encode_snapshot",
]
