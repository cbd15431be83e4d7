"""
State Management
Local persistence, identity-scoped caches, session transitions and
best-effort remote sync.

AppContext (state.context) ties them together; import it from there.
"""

from .errors import (
    CompanionError,
    ValidationError,
    RemoteUnavailable,
    RemoteRejected,
    AuthorizationDenied,
    StorageCorruption,
)
from .store import LocalStore, KeyedStore, namespaced_key
from .cache import CollectionCache, ValueCache, ItemId, IdKind, InsertPolicy, LocalIdClock
from .session import SessionManager, SessionStatus, SyncToken, PendingPasswordReset
from .sync import RemoteSync, SyncOutcome

__all__ = [
    "CompanionError",
    "ValidationError",
    "RemoteUnavailable",
    "RemoteRejected",
    "AuthorizationDenied",
    "StorageCorruption",
    "LocalStore",
    "KeyedStore",
    "namespaced_key",
    "CollectionCache",
    "ValueCache",
    "ItemId",
    "IdKind",
    "InsertPolicy",
    "LocalIdClock",
    "SessionManager",
    "SessionStatus",
    "SyncToken",
    "PendingPasswordReset",
    "RemoteSync",
    "SyncOutcome",
]
