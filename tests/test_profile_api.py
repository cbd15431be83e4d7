def test_get_profile_by_server_or_student_id(client, registered) -> None:
    by_id = client.get(f"/api/profile/{registered['_id']}")
    assert by_id.status_code == 200
    assert by_id.json()["user"]["name"] == "Ada"
    assert "password" not in by_id.json()["user"]

    by_student = client.get("/api/profile/S100")
    assert by_student.json()["user"]["_id"] == registered["_id"]


def test_get_unknown_profile(client) -> None:
    assert client.get("/api/profile/nobody").status_code == 404


def test_partial_update(client, registered) -> None:
    resp = client.put("/api/profile", json={"userId": registered["_id"], "phone": "555", "department": ""})
    assert resp.status_code == 200
    user = resp.json()["user"]
    assert user["phone"] == "555"
    assert user["name"] == "Ada"
    assert user["email"] == "ada@uni.test"


def test_update_rejects_bad_email(client, registered) -> None:
    resp = client.put("/api/profile", json={"userId": registered["_id"], "email": "nope"})
    assert resp.status_code == 400


def test_avatar_update(client, registered) -> None:
    avatar = "data:image/png;base64,AAAA"
    user = client.put("/api/profile", json={"userId": registered["_id"], "avatar": avatar}).json()["user"]
    assert user["avatar"] == avatar


def test_rename_updates_feed(client, registered) -> None:
    uid = registered["_id"]
    client.post("/api/feed", json={"userId": uid, "userName": "Ada", "text": "hello"})

    client.put("/api/profile", json={"userId": uid, "name": "Ada Lovelace"})

    posts = client.get("/api/feed").json()
    assert posts[0]["userName"] == "Ada Lovelace"


def test_user_stats(client, registered) -> None:
    uid = registered["_id"]
    for amount in (3.5, 6.5):
        client.post("/api/expenses", json={"userId": uid, "title": "x", "amount": amount, "date": "2024-05-01"})
    client.post("/api/tasks", json={"userId": uid, "title": "t", "dueDate": "2024-05-01"})
    client.post("/api/feed", json={"userId": uid, "text": "hello"})
    client.post("/api/expenses", json={"userId": "someone-else", "title": "x", "amount": 100, "date": "2024-05-01"})

    stats = client.get(f"/api/profile/user-stats/{uid}").json()
    assert stats == {
        "totalExpenses": 2,
        "totalExpenseAmount": 10.0,
        "totalFeedPosts": 1,
        "totalEvents": 0,
        "totalTasks": 1,
        "totalMoodLogs": 0,
        "totalDiaryEntries": 0,
    }
