"""
Collection Caches
In-memory, locally persisted mirrors of each domain collection.

The cache is the ONLY thing the UI renders from. Every mutation is written
through to the KeyedStore before the method returns, so a reload never
loses a change the user has already seen.

Structure:
    ItemId           → tagged identifier (server | local) + resolution
    LocalIdClock     → strictly increasing millisecond ids for offline items
    CollectionCache  → ordered list of records for one identity
    ValueCache       → single text value (avatar) for one identity
"""

import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Generic, Iterator, List, Optional, Tuple, Type, TypeVar

from pydantic import ValidationError as PydanticValidationError

from models.records import Record
from .store import KeyedStore

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=Record)


# =============================================================================
# Identifiers
# =============================================================================

class IdKind(str, Enum):
    SERVER = "server"
    LOCAL = "local"


@dataclass(frozen=True)
class ItemId:
    """Either the server's _id or the device-local id"""
    kind: IdKind
    value: Any

    @classmethod
    def server(cls, value: str) -> "ItemId":
        return cls(IdKind.SERVER, value)

    @classmethod
    def local(cls, value: int) -> "ItemId":
        return cls(IdKind.LOCAL, value)

    @classmethod
    def of(cls, record: Record) -> Optional["ItemId"]:
        """Resolve a record's identifier: server id first, local id second"""
        if record.server_id:
            return cls.server(record.server_id)
        if record.local_id is not None:
            return cls.local(record.local_id)
        return None

    def matches(self, record: Record) -> bool:
        if self.kind == IdKind.SERVER:
            return record.server_id is not None and record.server_id == self.value
        return record.local_id is not None and record.local_id == self.value

    @property
    def key(self) -> str:
        """Stable string form for widget keys"""
        return f"{self.kind.value}:{self.value}"


class LocalIdClock:
    """Millisecond clock that never repeats a reading"""

    def __init__(self, now: Callable[[], float] = time.time):
        self._now = now
        self._last = 0

    def next_id(self) -> int:
        current = int(self._now() * 1000)
        self._last = max(current, self._last + 1)
        return self._last


class InsertPolicy(str, Enum):
    APPEND = "append"
    PREPEND = "prepend"


# =============================================================================
# Collection Cache
# =============================================================================

class CollectionCache(Generic[T]):
    """
    Ordered records of one type for the current identity.

    Usage:
        cache = CollectionCache("expenses", Expense, keyed_store)
        cache.load("u1")
        cache.add(Expense(title="Coffee", amount=3.5, date="2024-05-01", id=1))
        cache.remove(ItemId.local(1))
    """

    def __init__(
        self,
        name: str,
        model: Type[T],
        store: KeyedStore,
        insert_policy: InsertPolicy = InsertPolicy.APPEND,
    ):
        self.name = name
        self.model = model
        self.store = store
        self.insert_policy = insert_policy
        self.identity: Optional[str] = None
        self.version = 0
        self._items: List[T] = []

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def load(self, identity: str) -> List[T]:
        """Read this identity's persisted items. Never raises."""
        self.identity = identity
        raw = self.store.get_json(identity, self.name)

        items: List[T] = []
        if raw is not None and not isinstance(raw, list):
            logger.warning("cache %s for %s is not a list; starting empty", self.name, identity)
        elif raw:
            for entry in raw:
                try:
                    items.append(self.model.model_validate(entry))
                except PydanticValidationError as exc:
                    logger.warning("skipping invalid %s item: %s", self.name, exc.errors()[:1])

        self._items = items
        self._changed()
        return list(items)

    def reset(self) -> None:
        """Forget everything in memory; the departing namespace is not touched"""
        self.identity = None
        self._items = []
        self._changed()

    # =========================================================================
    # Reads
    # =========================================================================

    @property
    def items(self) -> List[T]:
        return list(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[T]:
        return iter(list(self._items))

    def index_of(self, item_id: ItemId) -> Optional[int]:
        for index, item in enumerate(self._items):
            if item_id.matches(item):
                return index
        return None

    def get(self, item_id: ItemId) -> Optional[T]:
        index = self.index_of(item_id)
        return self._items[index] if index is not None else None

    # =========================================================================
    # Mutations (each one persists before returning)
    # =========================================================================

    def replace_all(self, items: List[T]) -> None:
        self._items = list(items)
        self._persist()

    def append(self, item: T) -> T:
        self._items.append(item)
        self._persist()
        return item

    def prepend(self, item: T) -> T:
        self._items.insert(0, item)
        self._persist()
        return item

    def add(self, item: T) -> T:
        """Insert according to the collection's ordering"""
        if self.insert_policy == InsertPolicy.PREPEND:
            return self.prepend(item)
        return self.append(item)

    def insert(self, index: int, item: T) -> T:
        self._items.insert(index, item)
        self._persist()
        return item

    def update(self, item_id: ItemId, patch: Dict[str, Any]) -> Optional[T]:
        """Apply a patch keyed by wire names (dueDate, ...); None if not found"""
        index = self.index_of(item_id)
        if index is None:
            return None
        data = {**self._items[index].to_wire(), **patch}
        updated = self.model.model_validate(data)
        self._items[index] = updated
        self._persist()
        return updated

    def replace(self, item_id: ItemId, item: T) -> bool:
        """Swap one item in place, keeping its position"""
        index = self.index_of(item_id)
        if index is None:
            return False
        self._items[index] = item
        self._persist()
        return True

    def remove(self, item_id: ItemId) -> Optional[Tuple[int, T]]:
        """Remove an item; returns (position, item) so callers can roll back"""
        index = self.index_of(item_id)
        if index is None:
            return None
        item = self._items.pop(index)
        self._persist()
        return index, item

    def _persist(self) -> None:
        if self.identity is None:
            raise RuntimeError(f"cache {self.name} mutated with no identity loaded")
        self.store.set_json(self.identity, self.name, [item.to_wire() for item in self._items])
        self._changed()

    def _changed(self) -> None:
        # polled by the UI to decide whether a rerun is needed
        self.version += 1


class ValueCache:
    """Single persisted text value per identity (the avatar)"""

    def __init__(self, name: str, store: KeyedStore):
        self.name = name
        self.store = store
        self.identity: Optional[str] = None
        self.value: Optional[str] = None

    def load(self, identity: str) -> Optional[str]:
        self.identity = identity
        self.value = self.store.get(identity, self.name) or None
        return self.value

    def reset(self) -> None:
        self.identity = None
        self.value = None

    def set(self, value: str) -> None:
        if self.identity is None:
            raise RuntimeError(f"cache {self.name} mutated with no identity loaded")
        self.value = value
        self.store.set(self.identity, self.name, value)

    def clear(self) -> None:
        if self.identity is None:
            return
        self.value = None
        self.store.remove(self.identity, self.name)
