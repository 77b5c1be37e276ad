import pytest
from fastapi.testclient import TestClient

from epictech import server


@pytest.fixture
def api(monkeypatch, session):
    monkeypatch.setattr(server, "_build_session", lambda: session)
    with TestClient(server.app) as client:
        yield client


def test_welcome(api):
    body = api.get("/").json()
    assert body["mode"] == "ai"
    assert "Epic Tech AI" in body["message"]


def test_chat_roundtrip(api):
    body = api.post("/api/chat", json={"input": "hello"}).json()
    assert body["output"] == "hi there"
    assert [t["role"] for t in body["turns"]] == ["user", "bot"]
    assert body["streak"]["count"] == 2

    log = api.get("/api/conversation").json()["turns"]
    assert [t["content"] for t in log] == ["hello", "hi there"]


def test_chat_command(api):
    body = api.post("/api/chat", json={"input": "/unknowncmd"}).json()
    assert body["output"].startswith("❓ Unknown command!")
    assert body["turns"][1]["origin"] == "command-table"


def test_chat_with_image(api, client):
    payload = {"input": "", "image": {"data": "data:image/png;base64,AA", "mime_type": "image/png"}}
    body = api.post("/api/chat", json=payload).json()
    assert body["turns"][0]["content"] == "[Image uploaded]"
    assert "Vision analysis coming soon" in client.prompts[-1]


def test_chat_busy_is_conflict(api, session):
    session._dispatch_lock.acquire()
    try:
        assert api.post("/api/chat", json={"input": "hello"}).status_code == 409
    finally:
        session._dispatch_lock.release()
    assert len(session.store) == 0


def test_empty_chat_is_noop(api):
    body = api.post("/api/chat", json={"input": "  "}).json()
    assert body["turns"] == []
    assert body["output"] is None


def test_reset(api):
    api.post("/api/chat", json={"input": "hello"})
    api.delete("/api/conversation")
    assert api.get("/api/conversation").json()["turns"] == []


def test_reset_while_busy_is_conflict(api, session):
    api.post("/api/chat", json={"input": "hello"})
    session._dispatch_lock.acquire()
    try:
        assert api.delete("/api/conversation").status_code == 409
    finally:
        session._dispatch_lock.release()
    assert len(session.store) == 2


def test_suggest(api):
    tokens = [s["token"] for s in api.get("/api/suggest", params={"q": "/jo"}).json()["suggestions"]]
    assert "/joke" in tokens


def test_switch_mode(api, bridge):
    assert api.put("/api/mode", json={"mode": "alternate-bot"}).json()["mode"] == "alternate-bot"
    body = api.post("/api/chat", json={"input": "yo bot"}).json()
    assert body["turns"][1]["origin"] == "alternate-bot"
    assert bridge.sent == [("yo bot", None)]
    assert api.put("/api/mode", json={"mode": "nope"}).status_code == 422


def test_quests(api):
    quests = api.get("/api/quests").json()["quests"]
    assert len(quests) == 3
    done = api.post("/api/quests/0/complete").json()["quests"]
    assert done[0]["done"] is True
    assert api.post("/api/quests/9/complete").status_code == 404


def test_leaderboard_upsert(api):
    assert len(api.get("/api/leaderboard").json()) == 3
    api.post("/api/leaderboard", json={"name": "guest42", "streak": 10})
    api.post("/api/leaderboard", json={"name": "newbie", "streak": 1})
    board = {e["name"]: e for e in api.get("/api/leaderboard").json()}
    assert board["guest42"]["streak"] == 10
    assert board["newbie"]["emoji"] == "⭐"


def test_reminders(api):
    api.post("/api/reminders", json={"time": "18:00", "user": "me", "message": "stretch"})
    assert api.get("/api/reminders").json() == [{"time": "18:00", "user": "me", "message": "stretch"}]


def test_media_flow(api):
    files = [
        {"name": "a.mp3", "url": "blob:a", "mime_type": "audio/mpeg"},
        {"name": "b.mp4", "url": "blob:b", "mime_type": "video/mp4"},
    ]
    state = api.post("/api/media/items", json={"files": files}).json()
    assert state["state"] == "loaded"
    assert state["items"][1]["kind"] == "video"

    assert api.post("/api/media/play").json()["state"] == "playing"
    state = api.put("/api/media", json={"select": 1, "volume": 0.3, "seek": 12}).json()
    assert (state["current"], state["volume"], state["progress"]) == (1, 0.3, 12)

    state = api.delete("/api/media/items/1").json()
    assert state["current"] == 0
    state = api.delete("/api/media/items/0").json()
    assert state["state"] == "idle"
    assert api.delete("/api/media/items/0").status_code == 404
    assert api.post("/api/media/rewind").status_code == 404


def test_health(api):
    assert api.get("/health").json() == {"server": "ok", "busy": False, "mode": "ai"}
