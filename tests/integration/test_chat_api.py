import json
from urllib.parse import unquote

from fastapi.testclient import TestClient

from emporium.api.chat import COOKIE_NAME, decode_cookie, encode_cookie
from emporium.api.main import app
from emporium.db import models


def _start(client, email="Sam@Example.com", name="Sam"):
    r = client.post("/api/chat/start", json={"email": email, "name": name})
    assert r.status_code == 200, r.text
    return r.json()


def _key(reference):
    return reference.split(":", 1)[1]


def test_start_sets_http_only_cookie(client):
    session = _start(client)
    assert session["resumed"] is False
    assert session["chat_user"]["email"] == "sam@example.com"
    assert session["chat"]["status"] == "open"

    header = client.post("/api/chat/start", json={"email": "sam@example.com"}).headers["set-cookie"]
    assert header.startswith(f"{COOKIE_NAME}=")
    assert "HttpOnly" in header
    assert "samesite=lax" in header.lower()
    assert "Max-Age=259200" in header

    cookie = json.loads(unquote(client.cookies[COOKIE_NAME]))
    assert cookie["chat_id"] == session["chat"]["id"]
    assert cookie["user_email"] == "sam@example.com"
    assert cookie["user_name"] == "Sam"


def test_start_again_resumes_the_open_chat(client):
    first = _start(client)
    second = _start(client, email="sam@example.com")
    assert second["resumed"] is True
    assert second["chat"]["id"] == first["chat"]["id"]

    r = client.get("/api/chat/session")
    assert r.status_code == 200
    assert r.json()["chat"]["id"] == first["chat"]["id"]


def test_session_without_cookie_is_404(client):
    assert client.get("/api/chat/session").status_code == 404
    r = client.get("/api/chat/session", headers={"cookie": f"{COOKIE_NAME}=not-json"})
    assert r.status_code == 404


def test_invalid_email_rejected(client):
    r = client.post("/api/chat/start", json={"email": "nobody"})
    assert r.status_code == 400
    assert r.json()["details"][0] == {"path": "email", "message": "A valid email address is required"}


def test_same_email_reuses_chat_user(client):
    first = _start(client)
    other = TestClient(app)
    second = _start(other, email="sam@example.com")
    assert second["chat_user"]["id"] == first["chat_user"]["id"]
    assert second["chat"]["id"] != first["chat"]["id"]


def test_messages_in_order_and_owned(client):
    session = _start(client)
    chat_key = _key(session["chat"]["id"])
    for text in ("hello", "anyone there?"):
        r = client.post(f"/api/chat/{chat_key}/messages", json={"content": text})
        assert r.status_code == 201
        assert r.json()["sender_role"] == "user"
        assert r.json()["sender_id"] == session["chat_user"]["id"]

    messages = client.get(f"/api/chat/{chat_key}/messages").json()
    assert [m["content"] for m in messages] == ["hello", "anyone there?"]

    stranger = TestClient(app)
    assert stranger.get(f"/api/chat/{chat_key}/messages").status_code == 404
    _start(stranger, email="eve@example.com")
    r = stranger.post(f"/api/chat/{chat_key}/messages", json={"content": "hi"})
    assert r.status_code == 404

    assert client.post(f"/api/chat/{chat_key}/messages", json={"content": ""}).status_code == 400


def test_admin_console_flow(client, admin_headers, user_headers, db_session):
    session = _start(client)
    chat_id = session["chat"]["id"]
    client.post(f"/api/chat/{_key(chat_id)}/messages", json={"content": "help"})

    admin = TestClient(app)
    assert admin.get("/api/admin/chats", headers=user_headers).status_code == 404

    rows = admin.get("/api/admin/chats", headers=admin_headers).json()
    assert len(rows) == 1
    assert rows[0]["user_email"] == "sam@example.com"
    assert rows[0]["last_message"] == "help"
    assert admin.get("/api/admin/chats", params={"status": "bogus"}, headers=admin_headers).status_code == 400

    r = admin.post(f"/api/admin/chats/{chat_id}/view", headers=admin_headers)
    assert r.json()["status"] == "viewed"

    admins = admin.get("/api/admin/admins", headers=admin_headers).json()
    admin_id = admins[0]["id"]
    writer = admin.get("/api/me", headers=user_headers).json()
    r = admin.post(f"/api/admin/chats/{chat_id}/assign", json={"admin_id": writer["id"]}, headers=admin_headers)
    assert r.status_code == 400
    r = admin.post(f"/api/admin/chats/{chat_id}/assign", json={"admin_id": admin_id}, headers=admin_headers)
    assert r.status_code == 200
    assert r.json()["status"] == "active"
    assert r.json()["admin_id"] == admin_id

    r = admin.post(f"/api/admin/chats/{chat_id}/messages", json={"content": "on it"}, headers=admin_headers)
    assert r.status_code == 201
    assert r.json()["sender_role"] == "admin"
    reply = r.json()

    r = admin.put(f"/api/admin/messages/{reply['id']}", json={"content": "on it!"}, headers=admin_headers)
    assert r.json()["content"] == "on it!"

    detail = admin.get(f"/api/admin/chats/{chat_id}", headers=admin_headers).json()
    assert [m["content"] for m in detail["messages"]] == ["help", "on it!"]

    r = admin.delete(f"/api/admin/messages/{reply['id']}", headers=admin_headers)
    assert r.json() == {"message": "Message deleted successfully."}

    r = admin.post(f"/api/admin/chats/{chat_id}/close", headers=admin_headers)
    assert r.json()["status"] == "closed"
    assert r.json()["ended_at"] is not None

    # The visitor can no longer post, and a new start opens a fresh chat
    r = client.post(f"/api/chat/{_key(chat_id)}/messages", json={"content": "hello?"})
    assert r.status_code == 409
    fresh = _start(client, email="sam@example.com")
    assert fresh["resumed"] is False
    assert fresh["chat"]["id"] != chat_id

    actions = {row.action_type for row in db_session.query(models.AuditLog).all()}
    assert actions == {"chat_assign", "chat_close", "message_update", "message_delete"}


def test_cookie_helpers_round_trip():
    chat_user = models.ChatUser(id="ChatUser:u1", email="a@b.c", name="A")
    chat = models.Chat(id="Chat:c1", user_id="ChatUser:u1", status="open")
    raw = encode_cookie(chat_user, chat)
    assert ";" not in raw and " " not in raw
    assert decode_cookie(raw) == {
        "chat_user_id": "ChatUser:u1",
        "chat_id": "Chat:c1",
        "user_email": "a@b.c",
        "user_name": "A",
    }
    assert decode_cookie('{"chat_id": "x"}') is None
    assert decode_cookie(None) is None


def test_chat_feature_flag_off(client, monkeypatch):
    from emporium.utils.feature_flags import refresh_feature_flag_cache

    monkeypatch.setenv("FEATURE_CHAT_ENABLED", "false")
    refresh_feature_flag_cache()
    assert client.post("/api/chat/start", json={"email": "sam@example.com"}).status_code == 404


def test_admin_chat_paging_is_bounded(client, admin_headers):
    r = client.get("/api/admin/chats", params={"skip": -1}, headers=admin_headers)
    assert r.status_code == 400
    assert r.json()["details"][0]["path"] == "skip"
    r = client.get("/api/admin/chats", params={"limit": 0}, headers=admin_headers)
    assert r.status_code == 400
    assert client.get("/api/admin/chats", params={"skip": 0, "limit": 5}, headers=admin_headers).status_code == 200
