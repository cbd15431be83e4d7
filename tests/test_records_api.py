import pytest


def test_create_and_list_expense(client) -> None:
    resp = client.post("/api/expenses", json={
        "userId": "u1", "title": "Coffee", "amount": 3.5, "date": "2024-05-01",
    })
    assert resp.status_code == 200
    body = resp.json()
    assert body["message"] == "Expense added"
    expense = body["expense"]
    assert expense["amount"] == 3.5
    assert expense["userId"] == "u1"
    assert len(expense["_id"]) == 24
    assert expense["createdAt"]

    listed = client.get("/api/expenses", params={"userId": "u1"}).json()
    assert [e["_id"] for e in listed] == [expense["_id"]]


def test_list_is_scoped_and_newest_first(client) -> None:
    first = client.post("/api/tasks", json={"userId": "u1", "title": "A", "dueDate": "2024-05-01"}).json()["task"]
    second = client.post("/api/tasks", json={"userId": "u1", "title": "B", "dueDate": "2024-05-02"}).json()["task"]
    client.post("/api/tasks", json={"userId": "u2", "title": "C", "dueDate": "2024-05-03"})

    listed = client.get("/api/tasks", params={"userId": "u1"}).json()
    assert [t["_id"] for t in listed] == [second["_id"], first["_id"]]
    assert listed[0]["completed"] is False


@pytest.mark.parametrize("collection,singular,body", [
    ("events", "event", {"name": "Exam", "date": "2024-06-01"}),
    ("moods", "mood", {"mood": "Happy", "date": "2024-06-01"}),
    ("diary", "entry", {"date": "2024-06-01", "message": "Dear diary"}),
])
def test_post_returns_singular_key(client, collection, singular, body) -> None:
    resp = client.post(f"/api/{collection}", json={"userId": "u1", **body})
    assert resp.status_code == 200
    assert resp.json()[singular]["userId"] == "u1"


def test_defaults_applied(client) -> None:
    event = client.post("/api/events", json={"userId": "u1", "name": "Exam", "date": "2024-06-01"}).json()["event"]
    assert event["color"] == "#1976d2"
    entry = client.post("/api/diary", json={"userId": "u1", "date": "2024-06-01", "message": "hi"}).json()["entry"]
    assert entry["title"] == "Untitled entry"


def test_missing_fields_rejected(client) -> None:
    resp = client.post("/api/expenses", json={"userId": "u1", "title": "Coffee"})
    assert resp.status_code == 422


def test_update_own_record(client) -> None:
    task = client.post("/api/tasks", json={"userId": "u1", "title": "A", "dueDate": "2024-05-01"}).json()["task"]

    resp = client.put(f"/api/tasks/{task['_id']}", params={"userId": "u1"},
                      json={"completed": True, "userId": "u2", "_id": "x"})
    assert resp.status_code == 200
    updated = resp.json()["task"]
    assert updated["completed"] is True
    # protected fields are ignored
    assert updated["userId"] == "u1"
    assert updated["_id"] == task["_id"]


def test_delete_checks_ownership(client) -> None:
    expense = client.post("/api/expenses", json={
        "userId": "u1", "title": "Coffee", "amount": 3.5, "date": "2024-05-01",
    }).json()["expense"]

    resp = client.delete(f"/api/expenses/{expense['_id']}", params={"userId": "u2"})
    assert resp.status_code == 403
    assert resp.json()["detail"] == "Not authorized"

    resp = client.delete(f"/api/expenses/{expense['_id']}", params={"userId": "u1"})
    assert resp.status_code == 200
    assert client.get("/api/expenses", params={"userId": "u1"}).json() == []

    resp = client.delete(f"/api/expenses/{expense['_id']}", params={"userId": "u1"})
    assert resp.status_code == 404


def test_update_unknown_record(client) -> None:
    resp = client.put("/api/events/" + "0" * 24, params={"userId": "u1"}, json={"name": "x"})
    assert resp.status_code == 404


def test_health_counts_documents(client) -> None:
    client.post("/api/moods", json={"userId": "u1", "mood": "Sad", "date": "2024-06-01"})
    body = client.get("/health").json()
    assert body["status"] == "ok"
    assert body["documents"] == {"moods": 1}
    assert "feed" in body["services"]
