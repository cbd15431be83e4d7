"""
Remote Sync
Best-effort reconciliation between the collection caches and the services.

Rules:
- The cache is always updated first; the network is never awaited before
  the UI can show a change.
- Remote reads run on worker threads and only RETURN data. The commit
  (cache.replace_all) happens on the UI thread in apply_completed().
- Every commit checks the SyncToken it was started under. A result that
  arrives after logout or a user switch is discarded.
- Failures fall back to local state. No retry, no queue.

Known limitations:
- A fetch that completes after a local mutation on the same collection
  overwrites that mutation (last completion wins).
- A successful fetch replaces the whole collection, so items created
  offline that never reached the service (local id only) are dropped from
  the cache and from the store at that point.
"""

import logging
from concurrent import futures
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Optional, Protocol, Tuple

from pydantic import ValidationError as PydanticValidationError

from models.records import Comment, FeedPost, Record, UserProfile
from models.status import CollectionSyncStatus
from .cache import CollectionCache, ItemId, LocalIdClock
from .errors import AuthorizationDenied, RemoteRejected, RemoteUnavailable
from .session import SessionManager, SyncToken

logger = logging.getLogger(__name__)

# Collections that have a service behind them
REMOTE_COLLECTIONS = ("expenses", "tasks", "events", "moods", "diary", "feed")

PROFILE = "profile"


class SyncOutcome(str, Enum):
    APPLIED = "applied"
    FAILED = "failed"
    DISCARDED = "discarded"
    SKIPPED = "skipped"


class RecordsAPI(Protocol):
    """The slice of APIClient that sync depends on"""

    def list_records(self, collection: str, user_id: str) -> List[Dict[str, Any]]: ...

    def create_record(self, collection: str, payload: Dict[str, Any]) -> Dict[str, Any]: ...

    def update_record(
        self, collection: str, record_id: str, user_id: str, patch: Dict[str, Any]
    ) -> Dict[str, Any]: ...

    def delete_record(self, collection: str, record_id: str, user_id: str) -> None: ...

    def get_profile(self, user_id: str) -> Dict[str, Any]: ...

    def toggle_like(self, post_id: str, user_id: str) -> Dict[str, Any]: ...

    def add_comment(self, post_id: str, user_id: str, user_name: str, text: str) -> Dict[str, Any]: ...

    def delete_comment(self, post_id: str, comment_id: str, user_id: str) -> Dict[str, Any]: ...


@dataclass
class _PendingRead:
    label: str
    future: Future
    token: SyncToken
    commit: Callable[[Any], SyncOutcome]


class RemoteSync:
    """
    Usage:
        sync = RemoteSync(api, session)
        sync.schedule_fetch(expenses_cache)     # returns immediately
        ...
        sync.apply_completed()                  # on the next script run

        sync.submit(expenses_cache, Expense(title="Coffee", amount=3.5, date="2024-05-01"))
        sync.remove(expenses_cache, ItemId.server("..."))
    """

    def __init__(
        self,
        api: RecordsAPI,
        session: SessionManager,
        workers: int = 4,
        executor: Optional[ThreadPoolExecutor] = None,
        clock: Optional[LocalIdClock] = None,
    ):
        self.api = api
        self.session = session
        self.executor = executor or ThreadPoolExecutor(max_workers=workers, thread_name_prefix="sync")
        self.clock = clock or LocalIdClock()
        self.status: Dict[str, CollectionSyncStatus] = {}
        self._pending: List[_PendingRead] = []

    # =========================================================================
    # Helpers
    # =========================================================================

    @staticmethod
    def has_remote(cache: CollectionCache) -> bool:
        return cache.name in REMOTE_COLLECTIONS

    def status_for(self, name: str) -> CollectionSyncStatus:
        if name not in self.status:
            self.status[name] = CollectionSyncStatus(
                collection=name,
                local_only=name not in REMOTE_COLLECTIONS and name != PROFILE,
            )
        return self.status[name]

    def _mark_ok(self, name: str) -> None:
        status = self.status_for(name)
        status.last_synced = datetime.now()
        status.failed = False
        status.message = None

    def _mark_failed(self, name: str, error: Exception) -> None:
        status = self.status_for(name)
        status.failed = True
        status.message = str(error)

    def _token(self, token: Optional[SyncToken]) -> SyncToken:
        return token if token is not None else self.session.token()

    @staticmethod
    def _parse_items(cache: CollectionCache, raw: Iterable[Any]) -> List[Record]:
        items = []
        for entry in raw:
            try:
                items.append(cache.model.model_validate(entry))
            except PydanticValidationError as exc:
                logger.warning("dropping malformed %s record from service: %s", cache.name, exc.errors()[:1])
        return items

    def _read(self, cache: CollectionCache, token: SyncToken) -> List[Record]:
        """Network read only; safe to run off the UI thread"""
        raw = self.api.list_records(cache.name, token.identity)
        return self._parse_items(cache, raw)

    def _commit(self, cache: CollectionCache, token: SyncToken, items: List[Record]) -> SyncOutcome:
        if not self.session.is_current(token):
            logger.info("discarding %s fetch started for %s (epoch %d)", cache.name, token.identity, token.epoch)
            return SyncOutcome.DISCARDED
        cache.replace_all(items)
        self._mark_ok(cache.name)
        logger.debug("applied %d %s from service", len(items), cache.name)
        return SyncOutcome.APPLIED

    # =========================================================================
    # Fetch
    # =========================================================================

    def fetch_and_reconcile(self, cache: CollectionCache, token: Optional[SyncToken] = None) -> SyncOutcome:
        """Blocking fetch + commit"""
        token = self._token(token)
        if not self.has_remote(cache) or not token.identity:
            return SyncOutcome.SKIPPED
        try:
            items = self._read(cache, token)
        except (RemoteUnavailable, RemoteRejected) as e:
            logger.warning("keeping local %s: %s", cache.name, e)
            if self.session.is_current(token):
                self._mark_failed(cache.name, e)
            return SyncOutcome.FAILED
        return self._commit(cache, token, items)

    def schedule_fetch(self, cache: CollectionCache, token: Optional[SyncToken] = None) -> Optional[Future]:
        """Start a fetch on a worker thread; commit later via apply_completed()"""
        token = self._token(token)
        if not self.has_remote(cache) or not token.identity:
            return None

        future = self.executor.submit(self._read, cache, token)
        self._pending.append(_PendingRead(
            label=cache.name,
            future=future,
            token=token,
            commit=lambda items: self._commit(cache, token, items),
        ))
        self.status_for(cache.name).pending = True
        return future

    def schedule_profile_refresh(self, token: Optional[SyncToken] = None) -> Optional[Future]:
        """Refresh the displayed user record from the profile service"""
        token = self._token(token)
        if not token.identity:
            return None

        def commit(raw: Dict[str, Any]) -> SyncOutcome:
            if not self.session.is_current(token):
                return SyncOutcome.DISCARDED
            try:
                user = UserProfile.model_validate(raw)
            except PydanticValidationError as exc:
                logger.warning("ignoring malformed profile: %s", exc.errors()[:1])
                return SyncOutcome.FAILED
            if user.identity != token.identity:
                logger.warning("profile service returned a different identity; ignoring")
                return SyncOutcome.DISCARDED
            self.session.update_profile(user)
            self._mark_ok(PROFILE)
            return SyncOutcome.APPLIED

        future = self.executor.submit(self.api.get_profile, token.identity)
        self._pending.append(_PendingRead(PROFILE, future, token, commit))
        self.status_for(PROFILE).pending = True
        return future

    def apply_completed(self) -> List[Tuple[str, SyncOutcome]]:
        """Commit every finished read. Call from the UI thread."""
        results = []
        still_running = []
        for pending in self._pending:
            if not pending.future.done():
                still_running.append(pending)
                continue

            try:
                data = pending.future.result()
            except (RemoteUnavailable, RemoteRejected) as e:
                logger.warning("keeping local %s: %s", pending.label, e)
                outcome = SyncOutcome.FAILED
                if self.session.is_current(pending.token):
                    self._mark_failed(pending.label, e)
            else:
                outcome = pending.commit(data)

            results.append((pending.label, outcome))

        self._pending = still_running
        running = {p.label for p in still_running}
        for name, status in self.status.items():
            status.pending = name in running
        return results

    @property
    def has_pending(self) -> bool:
        return bool(self._pending)

    def wait(self, timeout: Optional[float] = None) -> None:
        """Block until every scheduled read has finished (tests, shutdown)"""
        futures.wait([pending.future for pending in self._pending], timeout=timeout)

    def shutdown(self) -> None:
        self.executor.shutdown(wait=False, cancel_futures=True)

    # =========================================================================
    # Writes
    # =========================================================================

    def submit(self, cache: CollectionCache, record: Record, token: Optional[SyncToken] = None) -> Record:
        """
        Optimistically add a new record, then create it remotely.

        Returns the record as it ends up in the cache: the server's version
        when the create succeeded, the local-id version otherwise.
        """
        token = self._token(token)
        local_id = self.clock.next_id()
        item = record.model_copy(update={"local_id": local_id, "user_id": token.identity})
        cache.add(item)

        if not self.has_remote(cache):
            return item

        try:
            created = self.api.create_record(cache.name, item.payload())
        except (RemoteUnavailable, RemoteRejected) as e:
            logger.warning("%s kept locally as %d: %s", cache.name, local_id, e)
            self._mark_failed(cache.name, e)
            return item

        try:
            server_item = cache.model.model_validate(created)
        except PydanticValidationError as exc:
            logger.warning("service returned malformed %s: %s", cache.name, exc.errors()[:1])
            return item

        if not self.session.is_current(token):
            logger.info("not reconciling %s %d: session changed", cache.name, local_id)
            return item
        if not cache.replace(ItemId.local(local_id), server_item):
            logger.info("%s %d left the cache before reconciliation", cache.name, local_id)
            return item

        self._mark_ok(cache.name)
        return server_item

    def update(
        self,
        cache: CollectionCache,
        item_id: ItemId,
        patch: Dict[str, Any],
        token: Optional[SyncToken] = None,
    ) -> Optional[Record]:
        """Optimistic patch, then best-effort PUT for records the service knows"""
        token = self._token(token)
        before = cache.get(item_id)
        if before is None:
            return None
        updated = cache.update(item_id, patch)

        if not self.has_remote(cache) or before.server_id is None:
            return updated

        try:
            self.api.update_record(cache.name, before.server_id, token.identity, patch)
        except AuthorizationDenied:
            if self.session.is_current(token):
                cache.replace(item_id, before)
            raise
        except (RemoteUnavailable, RemoteRejected) as e:
            logger.warning("%s %s updated locally only: %s", cache.name, before.server_id, e)
            self._mark_failed(cache.name, e)
        return updated

    def remove(self, cache: CollectionCache, item_id: ItemId, token: Optional[SyncToken] = None) -> bool:
        """
        Optimistic delete. A network failure keeps the item removed; an
        explicit authorization denial puts it back where it was and raises.
        """
        token = self._token(token)
        removed = cache.remove(item_id)
        if removed is None:
            return False
        index, item = removed

        if not self.has_remote(cache) or item.server_id is None:
            return True

        try:
            self.api.delete_record(cache.name, item.server_id, token.identity)
        except AuthorizationDenied:
            if self.session.is_current(token):
                cache.insert(index, item)
            logger.warning("delete of %s %s denied; restored", cache.name, item.server_id)
            raise
        except (RemoteUnavailable, RemoteRejected) as e:
            logger.warning("%s %s removed locally only: %s", cache.name, item.server_id, e)
            self._mark_failed(cache.name, e)
        return True

    # =========================================================================
    # Feed interactions (remote first, then replace in place)
    # =========================================================================

    def _replace_post(self, cache: CollectionCache, post_id: str, raw: Dict[str, Any], token: SyncToken) -> FeedPost:
        try:
            post = FeedPost.model_validate(raw)
        except PydanticValidationError as exc:
            raise RemoteUnavailable("Malformed post in response") from exc
        if self.session.is_current(token):
            cache.replace(ItemId.server(post_id), post)
        return post

    def toggle_like(self, cache: CollectionCache, post_id: str, token: Optional[SyncToken] = None) -> FeedPost:
        token = self._token(token)
        raw = self.api.toggle_like(post_id, token.identity)
        return self._replace_post(cache, post_id, raw, token)

    def add_comment(
        self, cache: CollectionCache, post_id: str, text: str, token: Optional[SyncToken] = None
    ) -> FeedPost:
        token = self._token(token)
        user_name = self.session.user.display_name if self.session.user else "Anonymous"
        raw = self.api.add_comment(post_id, token.identity, user_name, text)
        return self._replace_post(cache, post_id, raw, token)

    def delete_comment(
        self, cache: CollectionCache, post_id: str, comment: Comment, token: Optional[SyncToken] = None
    ) -> FeedPost:
        token = self._token(token)
        raw = self.api.delete_comment(post_id, comment.server_id, token.identity)
        return self._replace_post(cache, post_id, raw, token)
