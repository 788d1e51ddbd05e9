import asyncio
import json

from redis.exceptions import ConnectionError as RedisConnectionError

from sentinel.core import ChangeFeed, ViewCache
from sentinel.shared.redis import change_channel, ChangePublisher, ChangeSubscriber


class RecordingRedis:
    """Stands in for the redis client; records published messages."""

    def __init__(self, fail=False):
        self.fail = fail
        self.messages = []

    async def publish(self, channel, message):
        if self.fail:
            raise RedisConnectionError("redis is down")
        self.messages.append((channel, json.loads(message)))
        return 1


async def load(value):
    return value


def test_publish_invalidates_cache_and_notifies_subscribers():
    async def scenario():
        cache = ViewCache()
        feed = ChangeFeed(cache)
        await cache.get("cameras", ["camera_metadata"], lambda: load("old"))

        watching = feed.subscribe(["camera_metadata"])
        other = feed.subscribe(["anomalies"])
        everything = feed.subscribe()

        notice = await feed.publish("camera_metadata", "insert", 7)

        assert notice["id"] == "7"
        assert watching.get_nowait()["table"] == "camera_metadata"
        assert everything.get_nowait()["operation"] == "insert"
        assert other.empty()
        assert await cache.get("cameras", ["camera_metadata"], lambda: load("new")) == "new"

    asyncio.run(scenario())


def test_publish_goes_out_on_table_channel():
    async def scenario():
        redis = RecordingRedis()
        feed = ChangeFeed(ViewCache(), publisher=ChangePublisher(redis))

        await feed.publish("leave_approvals", "update", "abc")

        channel, notice = redis.messages[0]
        assert channel == change_channel("leave_approvals") == "changes:leave_approvals"
        assert notice["origin"] == feed.origin

    asyncio.run(scenario())


def test_publish_survives_redis_failure():
    async def scenario():
        feed = ChangeFeed(ViewCache(), publisher=ChangePublisher(RecordingRedis(fail=True)))
        queue = feed.subscribe()

        await feed.publish("anomalies", "insert")

        assert queue.get_nowait()["table"] == "anomalies"

    asyncio.run(scenario())


def test_receive_skips_own_notices():
    async def scenario():
        feed = ChangeFeed(ViewCache())
        queue = feed.subscribe()

        assert not feed.receive({"table": "anomalies", "origin": feed.origin})
        assert feed.receive({"table": "anomalies", "operation": "insert", "origin": "pipeline"})
        assert queue.qsize() == 1

    asyncio.run(scenario())


def test_slow_subscriber_drops_notices():
    async def scenario():
        feed = ChangeFeed(ViewCache(), queue_size=2)
        queue = feed.subscribe()

        for _ in range(5):
            await feed.publish("system_logs", "insert")

        assert queue.qsize() == 2
        feed.unsubscribe(queue)
        assert feed.subscriber_count == 0

    asyncio.run(scenario())


class FakePubSub:
    """Replays a fixed list of pub/sub messages."""

    def __init__(self, messages):
        self.messages = messages
        self.patterns = []
        self.closed = False

    async def psubscribe(self, pattern):
        self.patterns.append(pattern)

    async def punsubscribe(self, pattern):
        self.patterns.remove(pattern)

    async def aclose(self):
        self.closed = True

    async def listen(self):
        for message in self.messages:
            yield message


class PubSubRedis:
    def __init__(self, messages):
        self.pubsub_instance = FakePubSub(messages)

    def pubsub(self):
        return self.pubsub_instance


def pmessage(channel, data):
    return {"type": "pmessage", "pattern": "changes:*", "channel": channel, "data": data}


def test_subscriber_reads_notices_from_change_channels():
    async def scenario():
        redis = PubSubRedis([
            {"type": "psubscribe", "pattern": "changes:*", "channel": "changes:*", "data": 1},
            pmessage("changes:anomalies", "{not json"),
            pmessage("changes:anomalies", json.dumps(["not", "a", "dict"])),
            pmessage("changes:gate_approval_requests", json.dumps({"operation": "update", "id": "g1"})),
            pmessage("changes:anomalies", json.dumps({"table": "anomalies", "operation": "insert"})),
        ])

        notices = [notice async for notice in ChangeSubscriber(redis).subscribe()]

        assert notices == [
            {"operation": "update", "id": "g1", "table": "gate_approval_requests"},
            {"table": "anomalies", "operation": "insert"},
        ]
        assert redis.pubsub_instance.patterns == []
        assert redis.pubsub_instance.closed

    asyncio.run(scenario())


class ReplaySubscriber:
    def __init__(self, notices):
        self.notices = notices

    async def subscribe(self):
        for notice in self.notices:
            yield notice


def test_listen_applies_notices_from_other_processes():
    async def scenario():
        cache = ViewCache()
        feed = ChangeFeed(cache)
        queue = feed.subscribe()
        await cache.get("leave-management", ["leave_approvals"], lambda: load("old"))

        await feed.listen(ReplaySubscriber([
            {"table": "anomalies", "operation": "insert", "origin": feed.origin},
            {"operation": "insert", "origin": "pipeline"},
            {"table": "leave_approvals", "operation": "update", "origin": "web-2"},
        ]))

        assert queue.qsize() == 1
        assert queue.get_nowait()["table"] == "leave_approvals"
        assert await cache.get("leave-management", ["leave_approvals"], lambda: load("new")) == "new"

    asyncio.run(scenario())


class BrokenSubscriber:
    async def subscribe(self):
        raise RedisConnectionError("connection lost")
        yield


def test_listen_stops_on_redis_error():
    async def scenario():
        feed = ChangeFeed(ViewCache())
        await feed.listen(BrokenSubscriber())
        assert feed.subscriber_count == 0

    asyncio.run(scenario())
