import pytest

from emporium.db import models
from emporium.live import capture
from emporium.live.hub import hub
from emporium.live.state import LiveCollection


@pytest.fixture
def live_messages():
    capture.install(hub)
    opened = []

    def _open(table="Message", filters=None):
        query_id = hub.live(table, filters)
        opened.append(query_id)
        items = LiveCollection(sort_key="created_at")
        items.attach(hub, query_id)
        return query_id, items

    yield _open
    for query_id in opened:
        if hub.exists(query_id):
            hub.kill(query_id)


def test_unknown_or_hidden_feeds_are_404(client, user_headers):
    assert client.get("/api/live/User").status_code == 404
    assert client.get("/api/live/ShopOrder").status_code == 404
    assert client.get("/api/live/ShopOrder", headers=user_headers).status_code == 404


def test_unknown_filter_field_is_400(client):
    r = client.get("/api/live/Message", params={"colour": "red"})
    assert r.status_code == 400
    assert r.json()["details"][0]["path"] == "colour"


def test_kill_unknown_query_is_404(client):
    assert client.delete("/api/live/does-not-exist").status_code == 404


def test_kill_open_query(client):
    query_id = hub.live("Chat")
    r = client.delete(f"/api/live/{query_id}")
    assert r.status_code == 200
    assert r.json() == {"message": "Live query killed successfully."}
    assert not hub.exists(query_id)


def test_chat_messages_reach_matching_live_queries(client, live_messages):
    r = client.post("/api/chat/start", json={"email": "sam@example.com"})
    chat_id = r.json()["chat"]["id"]
    _, mine = live_messages("Message", {"chat_id": chat_id})
    _, others = live_messages("Message", {"chat_id": "Chat:someoneelse"})
    _, chats = live_messages("Chat")

    key = chat_id.split(":", 1)[1]
    client.post(f"/api/chat/{key}/messages", json={"content": "first"})
    client.post(f"/api/chat/{key}/messages", json={"content": "second"})

    assert [m["content"] for m in mine.items] == ["first", "second"]
    assert len(others) == 0
    assert chats.items == []


def test_admin_edits_and_deletes_are_streamed(client, admin_headers, live_messages):
    chat_id = client.post("/api/chat/start", json={"email": "sam@example.com"}).json()["chat"]["id"]
    _, messages = live_messages("Message", {"chat_id": chat_id})
    _, chats = live_messages("Chat")

    reply = client.post(
        f"/api/admin/chats/{chat_id}/messages", json={"content": "hello"}, headers=admin_headers
    ).json()
    client.put(f"/api/admin/messages/{reply['id']}", json={"content": "hello!"}, headers=admin_headers)
    assert messages.items[0]["content"] == "hello!"

    client.post(f"/api/admin/chats/{chat_id}/close", headers=admin_headers)
    assert chats.items[0]["status"] == "closed"

    client.delete(f"/api/admin/messages/{reply['id']}", headers=admin_headers)
    assert len(messages) == 0


def test_rolled_back_changes_are_not_published(db_session, live_messages):
    _, messages = live_messages("Message")
    db_session.add(models.Message(chat_id="Chat:c1", sender_id="ChatUser:u1", sender_role="user", content="draft"))
    db_session.flush()
    db_session.rollback()
    assert len(messages) == 0

    db_session.add(models.Message(chat_id="Chat:c1", sender_id="ChatUser:u1", sender_role="user", content="sent"))
    db_session.commit()
    assert messages.ids() and messages.items[0]["content"] == "sent"
