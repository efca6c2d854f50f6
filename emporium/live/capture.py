"""
Commit-time change capture.

Session hooks snapshot created, updated and deleted rows of live-enabled
tables at flush time and hand them to the hub only once the transaction
commits; a rollback drops them.
"""
from __future__ import annotations

import logging
from typing import Dict, List, Tuple

from sqlalchemy import event
from sqlalchemy.orm import Session

from emporium.db.repositories.records import to_record
from .hub import CREATE, DELETE, UPDATE, LiveQueryHub

logger = logging.getLogger(__name__)

# record table -> admin only
LIVE_TABLES: Dict[str, bool] = {
    "Message": False,
    "Chat": False,
    "BlogComment": False,
    "ShopOrder": True,
}

_PENDING_KEY = "live_changes"
_installed_hub: List[LiveQueryHub] = []


def _live_table(obj):
    table = getattr(type(obj), "__record_table__", None)
    return table if table in LIVE_TABLES else None


def _pending(session: Session) -> List[Tuple[str, str, dict]]:
    return session.info.setdefault(_PENDING_KEY, [])


def _after_flush(session: Session, flush_context) -> None:
    pending = _pending(session)
    for obj in session.new:
        table = _live_table(obj)
        if table:
            pending.append((CREATE, table, to_record(obj)))
    for obj in session.dirty:
        table = _live_table(obj)
        if table and session.is_modified(obj, include_collections=False):
            pending.append((UPDATE, table, to_record(obj)))
    for obj in session.deleted:
        table = _live_table(obj)
        if table:
            pending.append((DELETE, table, to_record(obj)))


def _after_commit(session: Session) -> None:
    changes = session.info.pop(_PENDING_KEY, [])
    if not changes or not _installed_hub:
        return
    live_hub = _installed_hub[0]
    for action, table, record in changes:
        live_hub.publish(action, table, record)


def _after_rollback(session: Session) -> None:
    session.info.pop(_PENDING_KEY, None)


def install(live_hub: LiveQueryHub) -> None:
    """Route committed changes of every ORM session to ``live_hub``."""
    if _installed_hub:
        _installed_hub[0] = live_hub
        return
    _installed_hub.append(live_hub)
    event.listen(Session, "after_flush", _after_flush)
    event.listen(Session, "after_commit", _after_commit)
    event.listen(Session, "after_rollback", _after_rollback)
    logger.info("live change capture installed for %s", ", ".join(sorted(LIVE_TABLES)))
