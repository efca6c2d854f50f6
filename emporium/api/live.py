"""
Server-Sent Events surface of the live query hub.

``GET /api/live/{table}?field=value`` opens a live query and streams its
notifications; the query is killed when the client goes away.
"""
from __future__ import annotations

import json
import logging
from typing import AsyncIterator, Dict

from fastapi import APIRouter, Depends, Request
from starlette.responses import StreamingResponse

from emporium.api.deps import get_optional_user_context, require_feature
from emporium.api.errors import not_found, validation_error
from emporium.db.record_id import InvalidRecordId, ref
from emporium.db.tables import model_for
from emporium.live.capture import LIVE_TABLES
from emporium.live.hub import CLOSE, LiveQueryHub, LiveQueryNotFound, LiveStream, get_hub
from emporium.utils.feature_flags import live_queries_enabled
from emporium.utils.runtime import live_ping_interval

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/live",
    tags=["live"],
    dependencies=[Depends(require_feature(live_queries_enabled))],
)

PING_FRAME = ": ping\n\n"


def sse_frame(event: str, data) -> str:
    return f"event: {event}\ndata: {json.dumps(data, default=str)}\n\n"


def live_filters(table: str, params) -> Dict[str, str]:
    """Equality filters from the query string, references normalised."""
    model = model_for(table)
    filters: Dict[str, str] = {}
    for name, value in params.items():
        if name not in model.__table__.columns:
            raise validation_error(name, f"Unknown field '{name}' for {table}")
        target = model.__references__.get(name)
        if target:
            try:
                value = ref(target, value)
            except InvalidRecordId as exc:
                raise validation_error(name, str(exc))
        filters[name] = value
    return filters


async def event_stream(live_hub: LiveQueryHub, live_stream: LiveStream) -> AsyncIterator[str]:
    try:
        yield sse_frame("live", {"query_id": live_stream.query_id})
        async for notification in live_stream.drain():
            if notification is None:
                yield PING_FRAME
                continue
            yield sse_frame(notification.action, notification.record)
            if notification.action == CLOSE:
                break
    finally:
        live_stream.close()
        try:
            live_hub.kill(live_stream.query_id)
        except LiveQueryNotFound:
            pass


@router.get("/{table}")
async def open_live_query(
    table: str,
    request: Request,
    user_context=Depends(get_optional_user_context),
    live_hub: LiveQueryHub = Depends(get_hub),
):
    if table not in LIVE_TABLES:
        raise not_found(f"No live feed for {table}.")
    if LIVE_TABLES[table] and (user_context is None or not user_context[1]["is_admin"]):
        raise not_found(f"No live feed for {table}.")

    query_id = live_hub.live(table, live_filters(table, request.query_params))
    # subscribed before the response starts so no change is missed
    live_stream = live_hub.open_stream(query_id, live_ping_interval())
    return StreamingResponse(
        event_stream(live_hub, live_stream),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
    )


@router.delete("/{query_id}")
def kill_live_query(query_id: str, live_hub: LiveQueryHub = Depends(get_hub)):
    try:
        live_hub.kill(query_id)
    except LiveQueryNotFound:
        raise not_found(f"Live query {query_id} does not exist.")
    return {"message": "Live query killed successfully."}
