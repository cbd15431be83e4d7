"""
App Context
Explicit owner of everything identity-scoped on the client.

One AppContext per browser session, kept in st.session_state. Nothing in
the client reaches for a module-level singleton; views receive the
context and use its caches, session and sync.
"""

import logging
from typing import Dict, Optional

from models.records import DiaryEntry, Event, Expense, FeedPost, MoodLog, Note, Task
from utils.api_client import APIClient
from utils.config import ClientSettings, get_client_settings
from .cache import CollectionCache, InsertPolicy, ValueCache
from .session import PendingPasswordReset, SessionManager
from .store import KeyedStore, LocalStore
from .sync import RemoteSync

logger = logging.getLogger(__name__)

AVATAR = "avatar"


class AppContext:
    """
    Usage:
        ctx = AppContext.create()
        ctx.start()                       # restore session, kick off fetches
        ctx.expenses.items                # render
        ctx.sync.submit(ctx.expenses, Expense(...))
    """

    def __init__(self, store: LocalStore, api, settings: Optional[ClientSettings] = None):
        self.settings = settings or get_client_settings()
        self.keyed = KeyedStore(store)
        self.session = SessionManager(self.keyed)
        self.pending_reset: Optional[PendingPasswordReset] = None

        self.expenses = CollectionCache("expenses", Expense, self.keyed, InsertPolicy.PREPEND)
        self.tasks = CollectionCache("tasks", Task, self.keyed, InsertPolicy.APPEND)
        self.events = CollectionCache("events", Event, self.keyed, InsertPolicy.APPEND)
        self.moods = CollectionCache("moods", MoodLog, self.keyed, InsertPolicy.PREPEND)
        self.diary = CollectionCache("diary", DiaryEntry, self.keyed, InsertPolicy.PREPEND)
        self.feed = CollectionCache("feed", FeedPost, self.keyed, InsertPolicy.PREPEND)
        self.notes = CollectionCache("notes", Note, self.keyed, InsertPolicy.PREPEND)
        self.avatar = ValueCache(AVATAR, self.keyed)

        self.api = api
        self.sync = RemoteSync(api, self.session, workers=self.settings.sync_workers)

        for scoped in (*self.caches.values(), self.avatar):
            self.session.attach(scoped)
        self.session.on_change(self._on_session_change)
        self._fetched_epoch = -1

    @classmethod
    def create(cls, settings: Optional[ClientSettings] = None) -> "AppContext":
        settings = settings or get_client_settings()
        return cls(LocalStore(settings.local_store_path), APIClient.from_settings(settings), settings)

    @property
    def caches(self) -> Dict[str, CollectionCache]:
        return {
            "expenses": self.expenses,
            "tasks": self.tasks,
            "events": self.events,
            "moods": self.moods,
            "diary": self.diary,
            "feed": self.feed,
            "notes": self.notes,
        }

    def versions(self) -> Dict[str, int]:
        return {name: cache.version for name, cache in self.caches.items()}

    def apply_completed(self) -> bool:
        """Commit finished background reads; True when a cache or the profile changed"""
        before = (self.versions(), self.session.user)
        self.sync.apply_completed()
        return (self.versions(), self.session.user) != before

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def start(self) -> None:
        """Purge legacy keys and restore the persisted session"""
        self.keyed.purge_legacy_keys()
        self.session.restore()

    def refresh(self) -> None:
        """One background fetch per remote collection, plus the profile"""
        token = self.session.token()
        if not token.identity:
            return
        for cache in self.caches.values():
            self.sync.schedule_fetch(cache, token)
        self.sync.schedule_profile_refresh(token)
        self._fetched_epoch = token.epoch

    def _on_session_change(self, session: SessionManager) -> None:
        if not session.is_authenticated:
            self.sync.status.clear()
        # update_profile keeps the epoch; only a new session triggers fetches
        elif session.epoch != self._fetched_epoch:
            self.refresh()

    # =========================================================================
    # Password reset deep link
    # =========================================================================

    def begin_password_reset(self, pending: PendingPasswordReset) -> None:
        """A reset link always ends the current session"""
        if self.session.is_authenticated:
            logger.info("reset link opened while logged in; logging out")
            self.session.logout()
        self.pending_reset = pending

    def clear_password_reset(self) -> None:
        self.pending_reset = None
