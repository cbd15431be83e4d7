def _post(client, **fields):
    body = {"userId": "u1", "userName": "Ada", "text": "hello", **fields}
    resp = client.post("/api/feed", json=body)
    assert resp.status_code == 200
    return resp.json()["post"]


def test_feed_is_global_and_newest_first(client) -> None:
    first = _post(client)
    second = _post(client, userId="u2", userName="Bob", text="hi")

    for params in ({}, {"userId": "u1"}):
        posts = client.get("/api/feed", params=params).json()
        assert [p["_id"] for p in posts] == [second["_id"], first["_id"]]


def test_feed_limit(client, monkeypatch) -> None:
    monkeypatch.setenv("SC_FEED_LIMIT", "2")
    from core.config import get_settings
    get_settings.cache_clear()

    for i in range(3):
        _post(client, text=f"post {i}")
    assert len(client.get("/api/feed").json()) == 2


def test_empty_post_rejected(client) -> None:
    resp = client.post("/api/feed", json={"userId": "u1", "text": "   "})
    assert resp.status_code == 400


def test_event_fields_derived_from_text(client) -> None:
    post = _post(client, category="event", text="Hackathon on 2024-07-01 at 09:30")
    assert post["eventName"] == "Hackathon on 2024-07-01 at 09:30"
    assert post["eventDate"] == "2024-07-01"
    assert post["eventTime"] == "09:30"
    assert post["eventColor"] == "#1976d2"


def test_general_post_has_no_event_fields(client) -> None:
    post = _post(client, eventName="ignored")
    assert post["eventName"] is None
    assert post["category"] == "general"
    assert post["likes"] == []
    assert post["comments"] == []


def test_like_toggles(client) -> None:
    post = _post(client)
    liked = client.post(f"/api/feed/{post['_id']}/like", json={"userId": "u2"}).json()
    assert liked["message"] == "Liked"
    assert liked["post"]["likes"] == ["u2"]

    unliked = client.post(f"/api/feed/{post['_id']}/like", json={"userId": "u2"}).json()
    assert unliked["message"] == "Unliked"
    assert unliked["post"]["likes"] == []


def test_like_unknown_post(client) -> None:
    resp = client.post("/api/feed/" + "0" * 24 + "/like", json={"userId": "u2"})
    assert resp.status_code == 404


def test_comments(client) -> None:
    post = _post(client)
    resp = client.post(f"/api/feed/{post['_id']}/comment", json={"userId": "u2", "userName": "Bob", "text": "nice"})
    comment = resp.json()["post"]["comments"][0]
    assert comment["text"] == "nice"
    assert len(comment["_id"]) == 24

    url = f"/api/feed/{post['_id']}/comment/{comment['_id']}"
    assert client.delete(url, params={"userId": "u1"}).status_code == 403

    resp = client.delete(url, params={"userId": "u2"})
    assert resp.status_code == 200
    assert resp.json()["post"]["comments"] == []

    assert client.delete(url, params={"userId": "u2"}).status_code == 404


def test_delete_post_requires_owner(client) -> None:
    post = _post(client)
    assert client.delete(f"/api/feed/{post['_id']}", params={"userId": "u2"}).status_code == 403
    assert client.delete(f"/api/feed/{post['_id']}", params={"userId": "u1"}).status_code == 200
    assert client.get("/api/feed").json() == []


def test_rename_propagates_to_posts_and_comments(client) -> None:
    post = _post(client)
    other = _post(client, userId="u2", userName="Bob")
    client.post(f"/api/feed/{other['_id']}/comment", json={"userId": "u1", "userName": "Ada", "text": "hey"})

    resp = client.put("/api/users/u1/name", json={"userName": "Ada L."})
    assert resp.json()["postsUpdated"] == 1
    assert resp.json()["commentsUpdated"] == 1

    posts = {p["_id"]: p for p in client.get("/api/feed").json()}
    assert posts[post["_id"]]["userName"] == "Ada L."
    assert posts[other["_id"]]["userName"] == "Bob"
    assert posts[other["_id"]]["comments"][0]["userName"] == "Ada L."
