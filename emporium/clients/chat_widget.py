"""
Python client for the chat widget endpoints and the live message feed.

Keeps the ``chatUser`` cookie in its ``requests`` session, so a client that
started a chat can resume it, post messages and follow replies as they land.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Dict, Iterable, Iterator, Optional, Tuple

import requests

from emporium.live.state import LiveCollection

logger = logging.getLogger(__name__)

_DEFAULT_TIMEOUT = 10
CLOSE = "CLOSE"


class ChatClientError(RuntimeError):
    pass


def _decode(data: str) -> Any:
    try:
        return json.loads(data)
    except ValueError:
        return data


def parse_sse(lines: Iterable) -> Iterator[Tuple[str, Any]]:
    """Turn raw Server-Sent Events lines into ``(event, data)`` pairs.

    Comment lines (``: ping``) are skipped; data is JSON-decoded when possible.
    """
    event: Optional[str] = None
    data_lines = []
    for raw in lines:
        line = raw.decode("utf-8") if isinstance(raw, bytes) else raw
        line = line.rstrip("\r\n")
        if not line:
            if event is not None or data_lines:
                yield event or "message", _decode("\n".join(data_lines))
            event, data_lines = None, []
            continue
        if line.startswith(":"):
            continue
        name, _, value = line.partition(":")
        if value.startswith(" "):
            value = value[1:]
        if name == "event":
            event = value
        elif name == "data":
            data_lines.append(value)
    if event is not None or data_lines:
        yield event or "message", _decode("\n".join(data_lines))


class ChatWidgetClient:
    def __init__(self, base_url: str, session: Optional[requests.Session] = None, timeout: float = _DEFAULT_TIMEOUT):
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout
        self.chat_user: Optional[Dict[str, Any]] = None
        self.chat: Optional[Dict[str, Any]] = None
        self.query_id: Optional[str] = None
        self.messages = LiveCollection(sort_key="created_at")

    def _url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    def _chat_key(self) -> str:
        if not self.chat:
            raise ChatClientError("No chat started; call start() or resume() first")
        return self.chat["id"].partition(":")[2] or self.chat["id"]

    def _remember(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        self.chat_user = payload["chat_user"]
        self.chat = payload["chat"]
        return payload

    def start(self, email: str, name: Optional[str] = None) -> Dict[str, Any]:
        response = self.session.post(
            self._url("/api/chat/start"), json={"email": email, "name": name}, timeout=self.timeout
        )
        response.raise_for_status()
        payload = self._remember(response.json())
        logger.info("chat %s %s for %s", "resumed" if payload.get("resumed") else "started", self.chat["id"], email)
        return payload

    def resume(self) -> Optional[Dict[str, Any]]:
        """Reload the chat named by the session cookie; None when there is none."""
        response = self.session.get(self._url("/api/chat/session"), timeout=self.timeout)
        if response.status_code == 404:
            return None
        response.raise_for_status()
        return self._remember(response.json())

    def send(self, content: str) -> Dict[str, Any]:
        response = self.session.post(
            self._url(f"/api/chat/{self._chat_key()}/messages"), json={"content": content}, timeout=self.timeout
        )
        response.raise_for_status()
        message = response.json()
        self.messages.apply("CREATE", message)
        return message

    def load_messages(self) -> LiveCollection:
        response = self.session.get(self._url(f"/api/chat/{self._chat_key()}/messages"), timeout=self.timeout)
        response.raise_for_status()
        self.messages.seed(response.json())
        return self.messages

    def follow(self, max_events: Optional[int] = None) -> Iterator[Tuple[str, Any]]:
        """Fold live message notifications into ``messages`` and yield each one."""
        if not self.chat:
            raise ChatClientError("No chat started; call start() or resume() first")
        response = self.session.get(
            self._url("/api/live/Message"),
            params={"chat_id": self.chat["id"]},
            stream=True,
            timeout=(self.timeout, None),
        )
        response.raise_for_status()
        seen = 0
        try:
            for event, data in parse_sse(response.iter_lines(decode_unicode=True)):
                if event == "live":
                    self.query_id = data.get("query_id") if isinstance(data, dict) else None
                    continue
                self.messages.apply(event, data if isinstance(data, dict) else None)
                yield event, data
                seen += 1
                if event == CLOSE or (max_events is not None and seen >= max_events):
                    break
        finally:
            response.close()

    def close(self) -> None:
        """Kill the live query opened by ``follow``."""
        if not self.query_id:
            return
        response = self.session.delete(self._url(f"/api/live/{self.query_id}"), timeout=self.timeout)
        if response.status_code not in (200, 404):
            response.raise_for_status()
        self.query_id = None
