"""In-process change feed: live queries, commit-time capture and list folding."""

from .hub import LiveQueryHub, LiveNotification, LiveQueryNotFound, LiveStream, hub, get_hub
from .state import LiveCollection

__all__ = [
    "LiveQueryHub",
    "LiveNotification",
    "LiveQueryNotFound",
    "LiveStream",
    "LiveCollection",
    "hub",
    "get_hub",
]
