"""Server-Sent Events (SSE) API endpoints."""

import asyncio
import json
from typing import AsyncGenerator, Optional, Set

from fastapi import APIRouter, Request
from sse_starlette.sse import EventSourceResponse

from ...core import ChangeFeed
from ..auth.dependencies import CurrentUser
from .deps import DbSession, Changes

router = APIRouter()


def parse_tables(tables: Optional[str]) -> Optional[Set[str]]:
    """Comma separated table names; empty means every table."""
    if not tables:
        return None
    names = {name.strip() for name in tables.split(",") if name.strip()}
    return names or None


async def change_generator(
    changes: ChangeFeed,
    tables: Optional[Set[str]],
    request: Request,
    heartbeat_seconds: float,
) -> AsyncGenerator[dict, None]:
    """
    Generate SSE events from the change feed.

    Yields:
        SSE event dictionaries
    """
    queue = changes.subscribe(tables)

    # Send connection confirmation
    yield {
        "event": "connected",
        "data": json.dumps({
            "status": "connected",
            "tables": sorted(tables) if tables else "*",
        }),
    }

    try:
        while True:
            # Check if client disconnected
            if await request.is_disconnected():
                break

            try:
                notice = await asyncio.wait_for(queue.get(), timeout=heartbeat_seconds)
            except asyncio.TimeoutError:
                yield {
                    "event": "heartbeat",
                    "data": json.dumps({"status": "ok"}),
                }
                continue

            # Forward notice to client; it refetches the affected view
            yield {
                "event": "invalidate",
                "data": json.dumps({
                    "table": notice["table"],
                    "operation": notice.get("operation"),
                    "id": notice.get("id"),
                }),
            }

    except asyncio.CancelledError:
        pass
    finally:
        changes.unsubscribe(queue)


@router.get("/sse/changes")
async def sse_changes(
    request: Request,
    auth: CurrentUser,
    db: DbSession,
    changes: Changes,
    tables: Optional[str] = None,
):
    """
    Subscribe to table change notices via Server-Sent Events.

    Event types:
    - connected: Connection established
    - invalidate: A watched table changed; refetch views built from it
    - heartbeat: Keep-alive ping
    """
    # The stream outlives the request; release the auth lookup's connection
    await db.close()

    return EventSourceResponse(
        change_generator(
            changes,
            parse_tables(tables),
            request,
            request.app.state.config.SSE_HEARTBEAT_SECONDS,
        ),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",  # Disable nginx buffering
        },
    )
