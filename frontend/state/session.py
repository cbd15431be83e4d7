"""
Session State Management
Who is logged in, and the one place that moves the app between users.

States:
    Anonymous               → no user; every cache is empty
    Authenticated(identity) → caches hold this identity's namespace

Transitions:
    login(user)          Anonymous → Authenticated
                         persist user, bump epoch, load caches, notify
    logout()             Authenticated → Anonymous
                         clear persisted user, bump epoch, reset caches
    update_profile(user) Authenticated(x) → Authenticated(x)
                         persist + replace displayed fields only

The epoch is what lets asynchronous work tell whether the session it was
started under is still the current one (see SyncToken).
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Mapping, Optional, Protocol

from pydantic import ValidationError as PydanticValidationError

from models.records import UserProfile
from .store import KeyedStore

logger = logging.getLogger(__name__)

# Persisted under sc:session:current_user
SESSION_NAMESPACE = "session"
CURRENT_USER = "current_user"


class SessionStatus(str, Enum):
    ANONYMOUS = "anonymous"
    AUTHENTICATED = "authenticated"


@dataclass(frozen=True)
class SyncToken:
    """Snapshot of the session a piece of async work was started under"""
    identity: Optional[str]
    epoch: int


@dataclass(frozen=True)
class PendingPasswordReset:
    """Reset deep link (?token=..&email=..) waiting to be handled"""
    token: str
    email: str

    @classmethod
    def from_query_params(cls, params: Mapping[str, str]) -> Optional["PendingPasswordReset"]:
        token = params.get("token")
        email = params.get("email")
        if token and email:
            return cls(token=token, email=email)
        return None


class IdentityScoped(Protocol):
    """Anything that loads per identity and empties on logout"""

    def load(self, identity: str): ...

    def reset(self) -> None: ...


class SessionManager:
    """
    Owns the current user and drives every identity-scoped cache.

    Usage:
        session = SessionManager(keyed_store)
        session.attach(expenses_cache)
        session.on_change(lambda s: ...)
        session.restore()

        session.login(UserProfile.model_validate(response["user"]))
        session.logout()
    """

    def __init__(self, store: KeyedStore):
        self.store = store
        self.user: Optional[UserProfile] = None
        self.epoch = 0
        self._scoped: List[IdentityScoped] = []
        self._listeners: List[Callable[["SessionManager"], None]] = []

    # =========================================================================
    # Property Accessors
    # =========================================================================

    @property
    def identity(self) -> Optional[str]:
        return self.user.identity if self.user else None

    @property
    def status(self) -> SessionStatus:
        return SessionStatus.AUTHENTICATED if self.identity else SessionStatus.ANONYMOUS

    @property
    def is_authenticated(self) -> bool:
        return self.status == SessionStatus.AUTHENTICATED

    def token(self) -> SyncToken:
        return SyncToken(self.identity, self.epoch)

    def is_current(self, token: SyncToken) -> bool:
        return token.identity == self.identity and token.epoch == self.epoch

    # =========================================================================
    # Wiring
    # =========================================================================

    def attach(self, scoped: IdentityScoped) -> None:
        self._scoped.append(scoped)
        if self.identity:
            scoped.load(self.identity)

    def on_change(self, callback: Callable[["SessionManager"], None]) -> None:
        self._listeners.append(callback)

    # =========================================================================
    # Transitions
    # =========================================================================

    def restore(self) -> SessionStatus:
        """Start from whatever user was persisted; unreadable data means Anonymous"""
        raw = self.store.get_json(SESSION_NAMESPACE, CURRENT_USER)
        user = None
        if isinstance(raw, dict):
            try:
                user = UserProfile.model_validate(raw)
            except PydanticValidationError as exc:
                logger.warning("discarding persisted user: %s", exc.errors()[:1])

        if user and user.identity:
            self._enter(user)
        else:
            if raw is not None:
                self.store.remove(SESSION_NAMESPACE, CURRENT_USER)
            logger.info("starting anonymous")
        return self.status

    def login(self, user: UserProfile) -> None:
        if not user.identity:
            raise ValueError("user record carries no identity")

        if self.identity and self.identity != user.identity:
            self.logout()
        elif self.identity == user.identity:
            self.update_profile(user)
            return

        self._enter(user)

    def logout(self) -> None:
        if not self.identity:
            return
        departing = self.identity
        self.store.remove(SESSION_NAMESPACE, CURRENT_USER)
        self.user = None
        self.epoch += 1
        for scoped in self._scoped:
            scoped.reset()
        logger.info("logged out %s", departing)
        self._notify()

    def update_profile(self, user: UserProfile) -> None:
        """Replace displayed fields for the same identity"""
        if not self.identity or user.identity != self.identity:
            raise ValueError("profile update must keep the current identity")
        self._persist(user)
        self.user = user
        self._notify()

    def _enter(self, user: UserProfile) -> None:
        self._persist(user)
        self.user = user
        self.epoch += 1
        for scoped in self._scoped:
            scoped.load(user.identity)
        logger.info("session started for %s (epoch %d)", user.identity, self.epoch)
        self._notify()

    def _persist(self, user: UserProfile) -> None:
        self.store.set_json(SESSION_NAMESPACE, CURRENT_USER, user.to_wire())

    def _notify(self) -> None:
        for callback in self._listeners:
            try:
                callback(self)
            except Exception:
                logger.exception("session listener failed")
