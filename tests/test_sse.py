import asyncio
import json

import pytest

from sentinel.core import ChangeFeed, ViewCache
from sentinel.web.api.sse import change_generator, parse_tables


class FakeRequest:
    def __init__(self):
        self.disconnected = False

    async def is_disconnected(self):
        return self.disconnected


def test_parse_tables():
    assert parse_tables(None) is None
    assert parse_tables("") is None
    assert parse_tables(" , ") is None
    assert parse_tables("anomalies, gate_approval_requests,") == {"anomalies", "gate_approval_requests"}


def test_stream_forwards_watched_tables_only():
    async def scenario():
        feed = ChangeFeed(ViewCache())
        request = FakeRequest()
        stream = change_generator(feed, {"anomalies"}, request, heartbeat_seconds=5)

        connected = await stream.__anext__()
        assert connected["event"] == "connected"
        assert json.loads(connected["data"]) == {"status": "connected", "tables": ["anomalies"]}
        assert feed.subscriber_count == 1

        await feed.publish("camera_metadata", "insert", "c1")
        await feed.publish("anomalies", "update", "a1")

        event = await stream.__anext__()
        assert event["event"] == "invalidate"
        assert json.loads(event["data"]) == {"table": "anomalies", "operation": "update", "id": "a1"}

        request.disconnected = True
        with pytest.raises(StopAsyncIteration):
            await stream.__anext__()
        assert feed.subscriber_count == 0

    asyncio.run(scenario())


def test_stream_sends_heartbeat_when_idle():
    async def scenario():
        feed = ChangeFeed(ViewCache())
        stream = change_generator(feed, None, FakeRequest(), heartbeat_seconds=0.01)

        connected = await stream.__anext__()
        assert json.loads(connected["data"])["tables"] == "*"

        heartbeat = await stream.__anext__()
        assert heartbeat["event"] == "heartbeat"
        assert json.loads(heartbeat["data"]) == {"status": "ok"}

        await stream.aclose()
        assert feed.subscriber_count == 0

    asyncio.run(scenario())


def test_stream_requires_auth(client):
    response = client.get("/api/sse/changes")

    assert response.status_code == 401
    assert response.json() == {"error": "Unauthorized"}
