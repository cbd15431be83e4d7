import pytest

from models.records import Expense, FeedPost, Task
from state.cache import CollectionCache, IdKind, InsertPolicy, ItemId, LocalIdClock, ValueCache
from state.store import KeyedStore, LocalStore, namespaced_key


@pytest.fixture
def expenses(keyed: KeyedStore) -> CollectionCache:
    cache = CollectionCache("expenses", Expense, keyed, InsertPolicy.PREPEND)
    cache.load("u1")
    return cache


def _expense(title: str, local_id: int = None, server_id: str = None) -> Expense:
    return Expense(title=title, amount=1.25, date="2024-05-01", local_id=local_id, server_id=server_id)


def test_replace_all_then_load_round_trips(expenses: CollectionCache, keyed: KeyedStore) -> None:
    items = [_expense("a", server_id="a" * 24), _expense("b", local_id=17)]
    expenses.replace_all(items)

    fresh = CollectionCache("expenses", Expense, keyed)
    assert fresh.load("u1") == items
    assert [i.to_wire() for i in fresh] == [i.to_wire() for i in items]


def test_append_then_remove_restores_state(expenses: CollectionCache) -> None:
    expenses.replace_all([_expense("a", server_id="a" * 24)])
    before = expenses.items

    expenses.append(_expense("x", local_id=5))
    index, removed = expenses.remove(ItemId.local(5))

    assert index == 1
    assert removed.title == "x"
    assert expenses.items == before


def test_remove_then_insert_rolls_back(expenses: CollectionCache) -> None:
    expenses.replace_all([_expense("a", local_id=1), _expense("b", local_id=2), _expense("c", local_id=3)])
    index, item = expenses.remove(ItemId.local(2))
    expenses.insert(index, item)
    assert [e.title for e in expenses] == ["a", "b", "c"]


def test_insert_policy(expenses: CollectionCache, keyed: KeyedStore) -> None:
    expenses.add(_expense("old", local_id=1))
    expenses.add(_expense("new", local_id=2))
    assert [e.title for e in expenses] == ["new", "old"]

    tasks = CollectionCache("tasks", Task, keyed, InsertPolicy.APPEND)
    tasks.load("u1")
    tasks.add(Task(title="first", due_date="2024-05-01", local_id=1))
    tasks.add(Task(title="second", due_date="2024-05-01", local_id=2))
    assert [t.title for t in tasks] == ["first", "second"]


def test_update_by_wire_name(keyed: KeyedStore) -> None:
    tasks = CollectionCache("tasks", Task, keyed)
    tasks.load("u1")
    tasks.add(Task(title="t", due_date="2024-05-01", server_id="f" * 24))

    updated = tasks.update(ItemId.server("f" * 24), {"completed": True, "dueDate": "2024-06-01"})
    assert updated.completed is True
    assert updated.due_date == "2024-06-01"
    assert tasks.update(ItemId.local(99), {"completed": True}) is None


def test_server_id_resolution_wins(expenses: CollectionCache) -> None:
    item = _expense("both", local_id=7, server_id="e" * 24)
    assert ItemId.of(item) == ItemId(IdKind.SERVER, "e" * 24)
    assert ItemId.of(_expense("local", local_id=7)) == ItemId.local(7)
    assert ItemId.of(_expense("none")) is None


def test_load_skips_invalid_items(keyed: KeyedStore) -> None:
    keyed.set_json("u1", "expenses", [
        {"title": "ok", "amount": 2, "date": "2024-05-01", "id": 1},
        {"title": "no amount", "date": "2024-05-01"},
    ])
    cache = CollectionCache("expenses", Expense, keyed)
    assert [e.title for e in cache.load("u1")] == ["ok"]


@pytest.mark.parametrize("raw", ["{oops", '{"not": "a list"}', "42"])
def test_corrupt_data_loads_empty(keyed: KeyedStore, local_store: LocalStore, raw: str) -> None:
    local_store.set_item(namespaced_key("u1", "expenses"), raw)
    cache = CollectionCache("expenses", Expense, keyed)
    assert cache.load("u1") == []


def test_unknown_fields_survive(keyed: KeyedStore) -> None:
    keyed.set_json("u1", "feed", [{"_id": "p" * 24, "userName": "Ada", "text": "hi", "pinned": True}])
    feed = CollectionCache("feed", FeedPost, keyed)
    feed.load("u1")
    feed.replace_all(feed.items)
    assert keyed.get_json("u1", "feed")[0]["pinned"] is True


def test_reset_does_not_write(expenses: CollectionCache, keyed: KeyedStore) -> None:
    expenses.add(_expense("kept", local_id=1))
    expenses.reset()
    assert len(expenses) == 0
    assert keyed.get_json("u1", "expenses")[0]["title"] == "kept"


def test_mutation_without_identity_is_an_error(keyed: KeyedStore) -> None:
    cache = CollectionCache("expenses", Expense, keyed)
    with pytest.raises(RuntimeError):
        cache.add(_expense("x", local_id=1))


def test_every_mutation_bumps_version(expenses: CollectionCache) -> None:
    version = expenses.version
    expenses.add(_expense("x", local_id=1))
    expenses.update(ItemId.local(1), {"amount": 2})
    expenses.remove(ItemId.local(1))
    assert expenses.version == version + 3

    expenses.reset()
    assert expenses.version == version + 4


def test_local_id_clock_strictly_increases() -> None:
    clock = LocalIdClock(now=lambda: 1714557600.0)
    ids = [clock.next_id() for _ in range(3)]
    assert ids == [1714557600000, 1714557600001, 1714557600002]


def test_value_cache(keyed: KeyedStore) -> None:
    avatar = ValueCache("avatar", keyed)
    avatar.load("u1")
    avatar.set("data:image/png;base64,AAAA")

    other = ValueCache("avatar", keyed)
    assert other.load("u1") == "data:image/png;base64,AAAA"
    assert other.load("u2") is None

    avatar.clear()
    assert ValueCache("avatar", keyed).load("u1") is None
