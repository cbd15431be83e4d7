import pytest

from state.errors import StorageCorruption
from state.store import KeyedStore, LocalStore, decode_json, namespaced_key

COLLECTIONS = ["expenses", "tasks", "events", "moods", "diary", "feed", "notes", "avatar"]


@pytest.mark.parametrize("collection", COLLECTIONS)
def test_namespaces_are_isolated(keyed: KeyedStore, collection: str) -> None:
    keyed.set_json("userA", collection, [{"title": "A's"}])
    keyed.set_json("userB", collection, [{"title": "B's"}])

    assert keyed.get_json("userA", collection) == [{"title": "A's"}]
    assert keyed.get_json("userB", collection) == [{"title": "B's"}]

    keyed.remove("userA", collection)
    assert keyed.get_json("userA", collection) is None
    assert keyed.get_json("userB", collection) == [{"title": "B's"}]


def test_keys_cannot_collide() -> None:
    # without encoding these two pairs would both produce sc:a:b:c
    assert namespaced_key("a:b", "c") != namespaced_key("a", "b:c")
    assert namespaced_key("a_b", "c") != namespaced_key("a", "b_c")
    assert namespaced_key("u1", "expenses") == "sc:u1:expenses"


def test_malformed_json_reads_as_absent(keyed: KeyedStore, local_store: LocalStore) -> None:
    local_store.set_item(namespaced_key("u1", "expenses"), "{not json")
    assert keyed.get_json("u1", "expenses") is None


def test_decode_json_raises_storage_corruption() -> None:
    with pytest.raises(StorageCorruption):
        decode_json("[1, 2")


def test_values_survive_reopen(tmp_path) -> None:
    path = str(tmp_path / "local.db")
    KeyedStore(LocalStore(path)).set("u1", "avatar", "data:image/png;base64,AAAA")
    assert KeyedStore(LocalStore(path)).get("u1", "avatar") == "data:image/png;base64,AAAA"


def test_purge_legacy_keys(keyed: KeyedStore, local_store: LocalStore) -> None:
    local_store.set_item("sc_users", "[]")
    local_store.set_item("LS_CURRENT_USER", "{}")
    keyed.set_json("u1", "expenses", [])

    assert keyed.purge_legacy_keys() == 2
    assert local_store.keys() == [namespaced_key("u1", "expenses")]
    assert keyed.purge_legacy_keys() == 0
