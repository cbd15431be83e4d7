import pytest

from models.records import Expense, UserProfile
from state.cache import CollectionCache, ValueCache
from state.session import (
    CURRENT_USER,
    SESSION_NAMESPACE,
    PendingPasswordReset,
    SessionManager,
    SessionStatus,
)
from state.store import KeyedStore, LocalStore, namespaced_key


def _user(identity: str, name: str = "Ada") -> UserProfile:
    return UserProfile(server_id=identity, student_id=f"S-{identity}", name=name)


@pytest.fixture
def expenses(keyed: KeyedStore, session: SessionManager) -> CollectionCache:
    cache = CollectionCache("expenses", Expense, keyed)
    session.attach(cache)
    return cache


def test_starts_anonymous(session: SessionManager) -> None:
    assert session.restore() == SessionStatus.ANONYMOUS
    assert session.identity is None


def test_restores_persisted_user(keyed: KeyedStore, expenses: CollectionCache) -> None:
    keyed.set_json("u1", "expenses", [{"title": "Coffee", "amount": 3.5, "date": "2024-05-01", "id": 1}])
    first = SessionManager(keyed)
    first.login(_user("u1"))

    restored = SessionManager(keyed)
    cache = CollectionCache("expenses", Expense, keyed)
    restored.attach(cache)

    assert restored.restore() == SessionStatus.AUTHENTICATED
    assert restored.identity == "u1"
    assert restored.user.name == "Ada"
    assert [e.title for e in cache] == ["Coffee"]


def test_corrupt_persisted_user_is_anonymous(keyed: KeyedStore, local_store: LocalStore) -> None:
    local_store.set_item(namespaced_key(SESSION_NAMESPACE, CURRENT_USER), "{broken")
    session = SessionManager(keyed)
    assert session.restore() == SessionStatus.ANONYMOUS


def test_persisted_user_without_identity_is_anonymous(keyed: KeyedStore) -> None:
    keyed.set_json(SESSION_NAMESPACE, CURRENT_USER, {"name": "No id"})
    session = SessionManager(keyed)
    assert session.restore() == SessionStatus.ANONYMOUS
    assert keyed.get_json(SESSION_NAMESPACE, CURRENT_USER) is None


def test_identity_falls_back_to_student_id() -> None:
    assert UserProfile(student_id="S7").identity == "S7"
    assert UserProfile(server_id="abc", student_id="S7").identity == "abc"
    assert UserProfile(name="x").identity is None


def test_login_persists_bumps_epoch_and_loads(session: SessionManager, keyed: KeyedStore, expenses: CollectionCache) -> None:
    keyed.set_json("u1", "expenses", [{"title": "Coffee", "amount": 3.5, "date": "2024-05-01", "id": 1}])
    epoch = session.epoch

    session.login(_user("u1"))

    assert session.status == SessionStatus.AUTHENTICATED
    assert session.epoch == epoch + 1
    assert keyed.get_json(SESSION_NAMESPACE, CURRENT_USER)["_id"] == "u1"
    assert [e.title for e in expenses] == ["Coffee"]


def test_login_without_identity_rejected(session: SessionManager) -> None:
    with pytest.raises(ValueError):
        session.login(UserProfile(name="ghost"))


def test_logout_clears_without_writing(session: SessionManager, keyed: KeyedStore, expenses: CollectionCache) -> None:
    session.login(_user("u1"))
    expenses.add(Expense(title="Coffee", amount=3.5, date="2024-05-01", local_id=1))
    epoch = session.epoch

    session.logout()

    assert session.status == SessionStatus.ANONYMOUS
    assert session.epoch == epoch + 1
    assert len(expenses) == 0
    assert keyed.get_json(SESSION_NAMESPACE, CURRENT_USER) is None
    # the departing namespace is untouched
    assert keyed.get_json("u1", "expenses")[0]["title"] == "Coffee"


def test_switching_users_leaves_only_new_users_data(session: SessionManager, keyed: KeyedStore, expenses: CollectionCache) -> None:
    avatar = ValueCache("avatar", keyed)
    session.attach(avatar)

    session.login(_user("u1"))
    expenses.add(Expense(title="u1 coffee", amount=3.5, date="2024-05-01", local_id=1))
    avatar.set("data:u1")
    session.logout()

    session.login(_user("u2"))
    assert len(expenses) == 0
    assert avatar.value is None

    expenses.add(Expense(title="u2 lunch", amount=9, date="2024-05-01", local_id=2))
    assert [e.title for e in expenses] == ["u2 lunch"]
    assert keyed.get_json("u1", "expenses")[0]["title"] == "u1 coffee"


def test_login_as_other_user_is_logout_then_login(session: SessionManager, keyed: KeyedStore, expenses: CollectionCache) -> None:
    keyed.set_json("u2", "expenses", [{"title": "u2 lunch", "amount": 9, "date": "2024-05-01", "id": 2}])
    session.login(_user("u1"))
    expenses.add(Expense(title="u1 coffee", amount=3.5, date="2024-05-01", local_id=1))
    epoch = session.epoch

    session.login(_user("u2"))

    assert session.identity == "u2"
    assert session.epoch == epoch + 2
    assert [e.title for e in expenses] == ["u2 lunch"]


def test_update_profile_keeps_caches_and_epoch(session: SessionManager, expenses: CollectionCache) -> None:
    session.login(_user("u1"))
    expenses.add(Expense(title="Coffee", amount=3.5, date="2024-05-01", local_id=1))
    epoch, version = session.epoch, expenses.version

    session.update_profile(_user("u1", name="Ada Lovelace"))

    assert session.user.name == "Ada Lovelace"
    assert session.epoch == epoch
    assert expenses.version == version


def test_update_profile_must_keep_identity(session: SessionManager) -> None:
    session.login(_user("u1"))
    with pytest.raises(ValueError):
        session.update_profile(_user("u2"))


def test_token_tracks_epoch(session: SessionManager) -> None:
    session.login(_user("u1"))
    token = session.token()
    assert session.is_current(token)

    session.logout()
    session.login(_user("u1"))
    assert not session.is_current(token)


def test_listener_failure_does_not_abort_transition(session: SessionManager) -> None:
    seen = []
    session.on_change(lambda s: 1 / 0)
    session.on_change(lambda s: seen.append(s.identity))

    session.login(_user("u1"))
    session.logout()

    assert seen == ["u1", None]
    assert session.status == SessionStatus.ANONYMOUS


def test_pending_reset_from_query_params() -> None:
    pending = PendingPasswordReset.from_query_params({"token": "abc", "email": "ada@uni.test"})
    assert pending == PendingPasswordReset(token="abc", email="ada@uni.test")
    assert PendingPasswordReset.from_query_params({"token": "abc"}) is None
    assert PendingPasswordReset.from_query_params({}) is None
