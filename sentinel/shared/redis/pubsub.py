"""Redis pub/sub helpers for table change notices."""

import json
import logging
from typing import AsyncGenerator, Optional

import redis.asyncio as redis

logger = logging.getLogger(__name__)

# Channel pattern: one channel per table
CHANGE_CHANNEL_PREFIX = "changes:"


def change_channel(table: str) -> str:
    return f"{CHANGE_CHANNEL_PREFIX}{table}"


class ChangePublisher:
    """Publishes table change notices to Redis."""

    def __init__(self, client: redis.Redis):
        self.client = client

    async def publish_change(self, table: str, notice: dict) -> int:
        """
        Publish a change notice for a table.

        Args:
            table: Name of the table that changed
            notice: Notice payload (operation, row id, origin)

        Returns:
            Number of subscribers that received the message
        """
        return await self.client.publish(change_channel(table), json.dumps(notice))


class ChangeSubscriber:
    """Subscribes to change notices for every table."""

    def __init__(self, client: redis.Redis):
        self.client = client
        self._pubsub: Optional[redis.client.PubSub] = None

    async def subscribe(self) -> AsyncGenerator[dict, None]:
        """
        Subscribe to all change channels.

        Yields:
            Notice dictionaries with the table name filled in from the channel
        """
        pattern = f"{CHANGE_CHANNEL_PREFIX}*"
        self._pubsub = self.client.pubsub()

        try:
            await self._pubsub.psubscribe(pattern)

            async for message in self._pubsub.listen():
                if message["type"] != "pmessage":
                    continue
                try:
                    notice = json.loads(message["data"])
                except json.JSONDecodeError:
                    logger.warning("Dropping malformed change notice on %s", message["channel"])
                    continue
                if not isinstance(notice, dict):
                    continue
                notice.setdefault("table", message["channel"][len(CHANGE_CHANNEL_PREFIX):])
                yield notice

        finally:
            if self._pubsub:
                await self._pubsub.punsubscribe(pattern)
                await self._pubsub.aclose()
                self._pubsub = None
