"""
Client-side list state for one live query.

Folds CREATE / UPDATE / DELETE notifications into an ordered list of record
dicts keyed by ``id``; CLOSE marks the collection finished.
"""
from __future__ import annotations

import threading
from typing import Any, Callable, Dict, Iterable, List, Optional

from .hub import CLOSE, CREATE, DELETE, UPDATE, LiveNotification, LiveQueryHub


class LiveCollection:
    def __init__(self, items: Optional[Iterable[Dict[str, Any]]] = None, sort_key: Optional[str] = None):
        self._lock = threading.Lock()
        self.sort_key = sort_key
        self.items: List[Dict[str, Any]] = []
        self.closed = False
        if items:
            self.seed(items)

    def seed(self, items: Iterable[Dict[str, Any]]) -> None:
        with self._lock:
            self.items = [dict(item) for item in items]
            self._sort()

    def apply(self, action: str, record: Optional[Dict[str, Any]] = None) -> None:
        with self._lock:
            if action == CLOSE:
                self.closed = True
                return
            if not record or "id" not in record:
                return
            index = self._index(record["id"])
            if action == CREATE:
                if index is None:
                    self.items.append(dict(record))
                else:
                    self.items[index] = dict(record)
            elif action == UPDATE:
                if index is None:
                    self.items.append(dict(record))
                else:
                    self.items[index] = {**self.items[index], **record}
            elif action == DELETE:
                if index is not None:
                    del self.items[index]
                return
            else:
                raise ValueError(f"Unknown live action {action}")
            self._sort()

    def on_notification(self, notification: LiveNotification) -> None:
        self.apply(notification.action, notification.record)

    def attach(self, hub: LiveQueryHub, query_id: str) -> Callable[[], None]:
        return hub.subscribe_live(query_id, self.on_notification)

    def ids(self) -> List[str]:
        return [item["id"] for item in self.items]

    def __len__(self) -> int:
        return len(self.items)

    def _index(self, record_id: str) -> Optional[int]:
        for i, item in enumerate(self.items):
            if item.get("id") == record_id:
                return i
        return None

    def _sort(self) -> None:
        if self.sort_key:
            key = self.sort_key
            self.items.sort(key=lambda item: (item.get(key) is None, item.get(key) or ""))
