from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

import db.sqlite as sqlite_module
import services.mailer as mailer_module
from core.config import get_settings
from state.errors import AuthorizationDenied, RemoteUnavailable
from state.session import SessionManager
from state.store import KeyedStore, LocalStore
from state.sync import RemoteSync


# =============================================================================
# Services
# =============================================================================

@pytest.fixture
def settings(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    monkeypatch.setenv("SC_DB_PATH", str(tmp_path / "services.db"))
    monkeypatch.setenv("SC_BCRYPT_ROUNDS", "4")
    monkeypatch.setenv("SC_FRONTEND_URL", "http://client.test")
    get_settings.cache_clear()
    monkeypatch.setattr(sqlite_module, "_storage", None)
    monkeypatch.setattr(mailer_module, "_mailer", None)
    yield get_settings()
    get_settings.cache_clear()


@pytest.fixture
def client(settings):
    from main import app

    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def registered(client) -> Dict[str, Any]:
    """A registered student, as returned by the auth service"""
    resp = client.post("/api/auth/register", json={
        "studentId": "S100",
        "password": "Secret123",
        "name": "Ada",
        "email": "ada@uni.test",
    })
    assert resp.status_code == 200
    return resp.json()["user"]


# =============================================================================
# Client
# =============================================================================

@pytest.fixture
def local_store(tmp_path: Path) -> LocalStore:
    return LocalStore(str(tmp_path / "local.db"))


@pytest.fixture
def keyed(local_store: LocalStore) -> KeyedStore:
    return KeyedStore(local_store)


class FakeAPI:
    """In-memory stand-in for APIClient"""

    def __init__(self):
        self.records: Dict[str, List[Dict[str, Any]]] = {}
        self.offline = False
        self.deny = False
        self.calls: List[tuple] = []
        self._next = 0

    def _check(self, call: tuple) -> None:
        self.calls.append(call)
        if self.offline:
            raise RemoteUnavailable("Service not reachable")

    def _new_id(self) -> str:
        self._next += 1
        return f"{self._next:024x}"

    def list_records(self, collection: str, user_id: str) -> List[Dict[str, Any]]:
        self._check(("list", collection, user_id))
        return [r for r in self.records.get(collection, []) if r.get("userId") == user_id]

    def create_record(self, collection: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        self._check(("create", collection, payload))
        record = {**payload, "_id": self._new_id(), "createdAt": "2024-05-01T10:00:00+00:00"}
        self.records.setdefault(collection, []).insert(0, record)
        return record

    def update_record(self, collection: str, record_id: str, user_id: str, patch: Dict[str, Any]) -> Dict[str, Any]:
        self._check(("update", collection, record_id, user_id))
        if self.deny:
            raise AuthorizationDenied("Not authorized", 403)
        for record in self.records.get(collection, []):
            if record["_id"] == record_id:
                record.update(patch)
                return record
        return {**patch, "_id": record_id}

    def delete_record(self, collection: str, record_id: str, user_id: str) -> None:
        self._check(("delete", collection, record_id, user_id))
        if self.deny:
            raise AuthorizationDenied("Not authorized", 403)
        self.records[collection] = [r for r in self.records.get(collection, []) if r["_id"] != record_id]

    def get_profile(self, user_id: str) -> Dict[str, Any]:
        self._check(("profile", user_id))
        return {"_id": user_id, "studentId": "S1", "name": "Refreshed"}

    def _post(self, post_id: str) -> Dict[str, Any]:
        return next(p for p in self.records.get("feed", []) if p["_id"] == post_id)

    def toggle_like(self, post_id: str, user_id: str) -> Dict[str, Any]:
        self._check(("like", post_id, user_id))
        post = self._post(post_id)
        likes = post.setdefault("likes", [])
        if user_id in likes:
            likes.remove(user_id)
        else:
            likes.append(user_id)
        return dict(post)

    def add_comment(self, post_id: str, user_id: str, user_name: str, text: str) -> Dict[str, Any]:
        self._check(("comment", post_id, user_id))
        post = self._post(post_id)
        post.setdefault("comments", []).append(
            {"_id": self._new_id(), "userId": user_id, "userName": user_name, "text": text}
        )
        return dict(post)

    def delete_comment(self, post_id: str, comment_id: str, user_id: str) -> Dict[str, Any]:
        self._check(("uncomment", post_id, comment_id))
        if self.deny:
            raise AuthorizationDenied("Not authorized", 403)
        post = self._post(post_id)
        post["comments"] = [c for c in post.get("comments", []) if c["_id"] != comment_id]
        return dict(post)


@pytest.fixture
def fake_api() -> FakeAPI:
    return FakeAPI()


@pytest.fixture
def session(keyed: KeyedStore) -> SessionManager:
    return SessionManager(keyed)


@pytest.fixture
def sync(fake_api: FakeAPI, session: SessionManager):
    remote = RemoteSync(fake_api, session, workers=2)
    yield remote
    remote.shutdown()
