"""Change feed connecting committed writes to caches and live clients."""

import asyncio
import logging
from typing import Dict, Iterable, Optional, Set
from uuid import uuid4

from redis.exceptions import RedisError

from ..shared.redis import ChangePublisher, ChangeSubscriber
from .view_cache import ViewCache

logger = logging.getLogger(__name__)


class ChangeFeed:
    """
    Broadcasts table change notices.

    ``publish`` is called after a write has been committed. The notice
    marks affected cached views stale, is queued for every live subscriber
    watching the table and, when Redis is configured, goes out on the
    ``changes:<table>`` channel so other processes see it too. Notices read
    back from Redis carry an ``origin`` so a process skips its own.
    """

    def __init__(
        self,
        cache: ViewCache,
        publisher: Optional[ChangePublisher] = None,
        queue_size: int = 100,
    ):
        self.cache = cache
        self.publisher = publisher
        self.origin = uuid4().hex
        self.queue_size = queue_size
        # queue -> watched tables (None watches everything)
        self._subscribers: Dict[asyncio.Queue, Optional[Set[str]]] = {}

    def subscribe(self, tables: Optional[Iterable[str]] = None) -> asyncio.Queue:
        """Register a live subscriber and return its notice queue."""
        queue: asyncio.Queue = asyncio.Queue(maxsize=self.queue_size)
        self._subscribers[queue] = set(tables) if tables else None
        return queue

    def unsubscribe(self, queue: asyncio.Queue) -> None:
        self._subscribers.pop(queue, None)

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def _deliver(self, notice: dict) -> None:
        table = notice["table"]
        self.cache.invalidate([table])
        for queue, tables in list(self._subscribers.items()):
            if tables is not None and table not in tables:
                continue
            try:
                queue.put_nowait(notice)
            except asyncio.QueueFull:
                # Client is too slow; it refetches on the next notice anyway
                logger.debug("Dropping change notice for a slow subscriber")

    async def publish(
        self,
        table: str,
        operation: str,
        row_id: Optional[object] = None,
    ) -> dict:
        """Announce a committed change to ``table``."""
        notice = {
            "table": table,
            "operation": operation,
            "id": str(row_id) if row_id is not None else None,
            "origin": self.origin,
        }
        self._deliver(notice)

        if self.publisher is not None:
            try:
                await self.publisher.publish_change(table, notice)
            except RedisError as e:
                logger.warning("Failed to publish change notice for %s: %s", table, e)
        return notice

    def receive(self, notice: dict) -> bool:
        """Apply a notice read from Redis. Returns False for our own notices."""
        if notice.get("origin") == self.origin or not notice.get("table"):
            return False
        self._deliver(notice)
        return True

    async def listen(self, subscriber: ChangeSubscriber) -> None:
        """Apply notices from other processes until cancelled."""
        logger.info("[REALTIME] Listening for change notices")
        try:
            async for notice in subscriber.subscribe():
                self.receive(notice)
        except RedisError as e:
            logger.error("[REALTIME] Change listener stopped: %s", e)
