"""
Live query hub.

A live query is a standing subscription to one table (optionally narrowed by
field equality). Every committed change of that table is delivered to the
query's subscribers as a ``LiveNotification``; killing the query delivers a
final ``CLOSE``.

Request handlers run in the threadpool while SSE streams run on the event
loop, so registration and publishing are guarded by a lock and stream
delivery hops onto the loop with ``call_soon_threadsafe``.
"""
from __future__ import annotations

import asyncio
import logging
import threading
import uuid
from dataclasses import dataclass, field
from typing import Any, AsyncIterator, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)

CREATE = "CREATE"
UPDATE = "UPDATE"
DELETE = "DELETE"
CLOSE = "CLOSE"
ACTIONS = (CREATE, UPDATE, DELETE)


class LiveQueryNotFound(KeyError):
    pass


@dataclass(frozen=True)
class LiveNotification:
    query_id: str
    action: str
    table: str
    record: Optional[Dict[str, Any]] = None


Callback = Callable[[LiveNotification], None]


@dataclass
class _LiveQuery:
    id: str
    table: str
    filters: Dict[str, str] = field(default_factory=dict)
    subscribers: List[Callback] = field(default_factory=list)

    def matches(self, table: str, record: Dict[str, Any]) -> bool:
        if table != self.table:
            return False
        for name, expected in self.filters.items():
            value = record.get(name)
            if value is None or str(value) != str(expected):
                return False
        return True


class LiveQueryHub:
    def __init__(self):
        self._lock = threading.RLock()
        self._queries: Dict[str, _LiveQuery] = {}

    def live(self, table: str, filters: Optional[Dict[str, str]] = None) -> str:
        query_id = str(uuid.uuid4())
        with self._lock:
            self._queries[query_id] = _LiveQuery(query_id, table, dict(filters or {}))
        logger.info("live query %s opened on %s filters=%s", query_id, table, filters or {})
        return query_id

    def subscribe_live(self, query_id: str, callback: Callback) -> Callable[[], None]:
        """Register ``callback``; returns a function that detaches it again."""
        with self._lock:
            query = self._get(query_id)
            query.subscribers.append(callback)

        def _unsubscribe() -> None:
            with self._lock:
                current = self._queries.get(query_id)
                if current is not None and callback in current.subscribers:
                    current.subscribers.remove(callback)

        return _unsubscribe

    def kill(self, query_id: str) -> None:
        with self._lock:
            query = self._queries.pop(query_id, None)
        if query is None:
            raise LiveQueryNotFound(query_id)
        logger.info("live query %s killed", query_id)
        self._deliver(query.subscribers, LiveNotification(query_id, CLOSE, query.table))

    def exists(self, query_id: str) -> bool:
        with self._lock:
            return query_id in self._queries

    def table_of(self, query_id: str) -> str:
        with self._lock:
            return self._get(query_id).table

    def publish(self, action: str, table: str, record: Dict[str, Any]) -> int:
        """Fan a change out to every matching query; returns the delivery count."""
        with self._lock:
            targets = [
                (q.id, list(q.subscribers)) for q in self._queries.values() if q.matches(table, record)
            ]
        delivered = 0
        for query_id, subscribers in targets:
            delivered += self._deliver(subscribers, LiveNotification(query_id, action, table, record))
        return delivered

    def open_stream(self, query_id: str, heartbeat: Optional[float] = None) -> "LiveStream":
        """Subscribe ``query_id`` now; call from the event loop that will drain it."""
        return LiveStream(self, query_id, heartbeat)

    def _get(self, query_id: str) -> _LiveQuery:
        query = self._queries.get(query_id)
        if query is None:
            raise LiveQueryNotFound(query_id)
        return query

    def _deliver(self, subscribers: List[Callback], notification: LiveNotification) -> int:
        delivered = 0
        for callback in subscribers:
            try:
                callback(notification)
                delivered += 1
            except Exception:
                logger.exception("live subscriber failed for query %s", notification.query_id)
        return delivered


class LiveStream:
    """Notifications of one live query, buffered from the moment of creation.

    Publishing may happen on any thread; delivery hops onto the loop that
    created the stream.
    """

    def __init__(self, live_hub: LiveQueryHub, query_id: str, heartbeat: Optional[float] = None):
        self.query_id = query_id
        self.heartbeat = heartbeat
        self._loop = asyncio.get_running_loop()
        self._queue: asyncio.Queue = asyncio.Queue()
        self._unsubscribe = live_hub.subscribe_live(query_id, self._enqueue)

    def _enqueue(self, notification: LiveNotification) -> None:
        self._loop.call_soon_threadsafe(self._queue.put_nowait, notification)

    def close(self) -> None:
        self._unsubscribe()

    async def drain(self) -> AsyncIterator[Optional[LiveNotification]]:
        """Yield notifications until ``CLOSE``.

        With ``heartbeat`` set, ``None`` is yielded after that many seconds
        without a notification so callers can keep idle connections alive.
        """
        try:
            while True:
                try:
                    if self.heartbeat is None:
                        notification = await self._queue.get()
                    else:
                        notification = await asyncio.wait_for(self._queue.get(), timeout=self.heartbeat)
                except asyncio.TimeoutError:
                    yield None
                    continue
                yield notification
                if notification.action == CLOSE:
                    break
        finally:
            self.close()


hub = LiveQueryHub()


def get_hub() -> LiveQueryHub:
    return hub
