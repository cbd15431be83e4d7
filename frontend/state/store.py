"""
Local Persistent Store
The client's flat key-value store, and the per-user namespacing on top of it.

Responsibilities:
- LocalStore: raw text values by key (SQLite file, survives restarts)
- KeyedStore: (user, collection) -> key mapping, JSON helpers

NOT responsible for:
- Knowing which collections exist (CollectionCache does)
- Network anything
"""

import json
import logging
import sqlite3
from pathlib import Path
from typing import Any, Iterable, List, Optional
from urllib.parse import quote

from .errors import StorageCorruption

logger = logging.getLogger(__name__)

KEY_PREFIX = "sc"

# Global keys written by older versions of the client. They held every
# user's data in one place and must not survive a startup.
LEGACY_GLOBAL_KEYS = ("sc_users", "LS_USERS", "LS_CURRENT_USER")


class LocalStore:
    """
    SQLite-backed key-value store.

    Tables:
        - kv: key -> text value
    """

    def __init__(self, db_path: str = "data/local_store.db"):
        self.db_path = db_path
        Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
        with sqlite3.connect(self.db_path) as conn:
            conn.execute("CREATE TABLE IF NOT EXISTS kv (key TEXT PRIMARY KEY, value TEXT NOT NULL)")

    def get_item(self, key: str) -> Optional[str]:
        with sqlite3.connect(self.db_path) as conn:
            row = conn.execute("SELECT value FROM kv WHERE key = ?", [key]).fetchone()
        return row[0] if row else None

    def set_item(self, key: str, value: str) -> None:
        with sqlite3.connect(self.db_path) as conn:
            conn.execute("INSERT OR REPLACE INTO kv (key, value) VALUES (?, ?)", [key, value])

    def remove_item(self, key: str) -> None:
        with sqlite3.connect(self.db_path) as conn:
            conn.execute("DELETE FROM kv WHERE key = ?", [key])

    def keys(self) -> List[str]:
        with sqlite3.connect(self.db_path) as conn:
            return [row[0] for row in conn.execute("SELECT key FROM kv ORDER BY key")]


def namespaced_key(user_key: str, collection: str) -> str:
    """
    Deterministic physical key for (user, collection).

    The user key is percent-encoded (":" included) so two different pairs can
    never produce the same key, whatever characters the identity contains.
    """
    return f"{KEY_PREFIX}:{quote(str(user_key), safe='')}:{collection}"


class KeyedStore:
    """
    Per-user view over a LocalStore.

    Usage:
        keyed = KeyedStore(LocalStore(path))
        keyed.purge_legacy_keys()
        keyed.set_json("u1", "expenses", [...])
        keyed.get_json("u1", "expenses")   # -> [...] or None
    """

    def __init__(self, store: LocalStore):
        self.store = store

    def get(self, user_key: str, collection: str) -> Optional[str]:
        return self.store.get_item(namespaced_key(user_key, collection))

    def set(self, user_key: str, collection: str, value: str) -> None:
        self.store.set_item(namespaced_key(user_key, collection), value)

    def remove(self, user_key: str, collection: str) -> None:
        self.store.remove_item(namespaced_key(user_key, collection))

    # =========================================================================
    # JSON helpers
    # =========================================================================

    def get_json(self, user_key: str, collection: str) -> Any:
        """Decoded value, or None when absent or unreadable"""
        raw = self.get(user_key, collection)
        if raw is None:
            return None
        try:
            return decode_json(raw)
        except StorageCorruption as exc:
            logger.warning("ignoring corrupt cache %s/%s: %s", user_key, collection, exc)
            return None

    def set_json(self, user_key: str, collection: str, value: Any) -> None:
        self.set(user_key, collection, json.dumps(value))

    def purge_legacy_keys(self, keys: Iterable[str] = LEGACY_GLOBAL_KEYS) -> int:
        """Delete pre-namespacing global keys; returns how many existed"""
        purged = 0
        for key in keys:
            if self.store.get_item(key) is not None:
                purged += 1
            self.store.remove_item(key)
        if purged:
            logger.info("purged %d legacy global cache keys", purged)
        return purged


def decode_json(raw: str) -> Any:
    try:
        return json.loads(raw)
    except (TypeError, ValueError) as exc:
        raise StorageCorruption(str(exc)) from exc
