"""
Typed Models for the client
Records as the services send them, plus sync status.
"""

from .records import (
    Record,
    Expense,
    Task,
    Event,
    MoodLog,
    DiaryEntry,
    Comment,
    FeedCategory,
    FeedPost,
    Note,
    UserProfile,
)
from .status import SyncLevel, CollectionSyncStatus

__all__ = [
    "Record",
    "Expense",
    "Task",
    "Event",
    "MoodLog",
    "DiaryEntry",
    "Comment",
    "FeedCategory",
    "FeedPost",
    "Note",
    "UserProfile",
    "SyncLevel",
    "CollectionSyncStatus",
]
