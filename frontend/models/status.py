"""
Sync Status Models
How current each cached collection is relative to its service.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class SyncLevel(Enum):
    """Collection sync classification"""
    SYNCED = "synced"      # last fetch applied < 60s ago
    STALE = "stale"        # last fetch applied, but a while ago
    PENDING = "pending"    # a fetch is in flight
    OFFLINE = "offline"    # last remote call failed; showing local data
    LOCAL = "local"        # collection has no remote

    @property
    def color(self) -> str:
        colors = {
            "synced": "#10b981",
            "stale": "#f59e0b",
            "pending": "#3b82f6",
            "offline": "#ef4444",
            "local": "#64748b",
        }
        return colors.get(self.value, "#64748b")

    @property
    def label(self) -> str:
        labels = {
            "synced": "SYNCED",
            "stale": "STALE",
            "pending": "SYNCING",
            "offline": "OFFLINE",
            "local": "LOCAL",
        }
        return labels.get(self.value, "UNKNOWN")


STALE_AFTER_SECONDS = 60


@dataclass
class CollectionSyncStatus:
    """Last known sync state of one collection"""
    collection: str
    last_synced: Optional[datetime] = None
    pending: bool = False
    failed: bool = False
    local_only: bool = False
    message: Optional[str] = None

    @property
    def level(self) -> SyncLevel:
        if self.local_only:
            return SyncLevel.LOCAL
        if self.pending:
            return SyncLevel.PENDING
        if self.failed or self.last_synced is None:
            return SyncLevel.OFFLINE
        if self.age_seconds > STALE_AFTER_SECONDS:
            return SyncLevel.STALE
        return SyncLevel.SYNCED

    @property
    def age_seconds(self) -> float:
        if self.last_synced is None:
            return 0.0
        return (datetime.now() - self.last_synced).total_seconds()

    @property
    def display(self) -> str:
        if self.level == SyncLevel.LOCAL:
            return "This device only"
        if self.last_synced is None:
            return "Never synced"
        return f"{self.age_seconds:.0f}s ago"
