from unittest.mock import MagicMock

import pytest

from emporium.clients.chat_widget import ChatClientError, ChatWidgetClient, parse_sse


def _response(status_code=200, payload=None, lines=None):
    response = MagicMock()
    response.status_code = status_code
    response.json.return_value = payload
    response.iter_lines.return_value = iter(lines or [])
    return response


SESSION_PAYLOAD = {
    "chat_user": {"id": "ChatUser:u1", "email": "sam@example.com", "name": "Sam"},
    "chat": {"id": "Chat:c1", "chat_user_id": "ChatUser:u1", "status": "open"},
    "resumed": False,
}


def test_parse_sse_skips_pings_and_decodes_json():
    lines = [
        "event: live",
        'data: {"query_id": "q1"}',
        "",
        ": ping",
        "",
        b"event: CREATE",
        b'data: {"id": "Message:1"}',
        b"",
        "event: CLOSE",
        "data: null",
    ]
    assert list(parse_sse(lines)) == [
        ("live", {"query_id": "q1"}),
        ("CREATE", {"id": "Message:1"}),
        ("CLOSE", None),
    ]


def test_parse_sse_multiline_and_plain_data():
    assert list(parse_sse(["data: first", "data: second", ""])) == [("message", "first\nsecond")]


def test_start_posts_email_and_remembers_chat():
    session = MagicMock()
    session.post.return_value = _response(payload=SESSION_PAYLOAD)
    client = ChatWidgetClient("http://shop.test/", session=session)

    payload = client.start("sam@example.com", "Sam")

    session.post.assert_called_once_with(
        "http://shop.test/api/chat/start", json={"email": "sam@example.com", "name": "Sam"}, timeout=10
    )
    assert payload["chat"]["id"] == "Chat:c1"
    assert client.chat_user["email"] == "sam@example.com"


def test_resume_without_cookie_returns_none():
    session = MagicMock()
    session.get.return_value = _response(status_code=404)
    client = ChatWidgetClient("http://shop.test", session=session)
    assert client.resume() is None
    assert client.chat is None


def test_send_requires_a_chat():
    client = ChatWidgetClient("http://shop.test", session=MagicMock())
    with pytest.raises(ChatClientError):
        client.send("hello")


def test_send_and_load_messages_use_chat_key():
    session = MagicMock()
    session.post.side_effect = [
        _response(payload=SESSION_PAYLOAD),
        _response(payload={"id": "Message:2", "chat_id": "Chat:c1", "content": "hi", "created_at": "2026-01-01T00:00:02"}),
    ]
    session.get.return_value = _response(
        payload=[{"id": "Message:1", "chat_id": "Chat:c1", "content": "hello", "created_at": "2026-01-01T00:00:01"}]
    )
    client = ChatWidgetClient("http://shop.test", session=session)
    client.start("sam@example.com")

    client.load_messages()
    client.send("hi")

    assert session.get.call_args[0][0] == "http://shop.test/api/chat/c1/messages"
    assert session.post.call_args[0][0] == "http://shop.test/api/chat/c1/messages"
    assert client.messages.ids() == ["Message:1", "Message:2"]


def test_follow_folds_events_and_close_kills_query():
    session = MagicMock()
    session.post.return_value = _response(payload=SESSION_PAYLOAD)
    stream = _response(
        lines=[
            "event: live",
            'data: {"query_id": "q-1"}',
            "",
            "event: CREATE",
            'data: {"id": "Message:9", "content": "reply", "created_at": "2026-01-01T00:00:09"}',
            "",
            ": ping",
            "",
            "event: UPDATE",
            'data: {"id": "Message:9", "content": "edited"}',
            "",
        ]
    )
    session.get.return_value = stream
    session.delete.return_value = _response(status_code=200)
    client = ChatWidgetClient("http://shop.test", session=session)
    client.start("sam@example.com")

    events = list(client.follow(max_events=2))

    assert [event for event, _ in events] == ["CREATE", "UPDATE"]
    assert client.messages.items[0]["content"] == "edited"
    assert session.get.call_args.kwargs["params"] == {"chat_id": "Chat:c1"}
    stream.close.assert_called_once()
    assert client.query_id == "q-1"

    client.close()
    session.delete.assert_called_once_with("http://shop.test/api/live/q-1", timeout=10)
    assert client.query_id is None
