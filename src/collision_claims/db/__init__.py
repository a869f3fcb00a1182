"""Key-value persistence for claims, conversations, and the signed-in user."""

from collision_claims.db.database import (
    KeyValueStore,
    MemoryKeyValueStore,
    SqliteKeyValueStore,
    get_connection,
    get_db_path,
    init_db,
)
from collision_claims.db.repository import ClaimRepository

__all__ = [
    "ClaimRepository",
    "KeyValueStore",
    "MemoryKeyValueStore",
    "SqliteKeyValueStore",
    "get_connection",
    "get_db_path",
    "init_db",
]
