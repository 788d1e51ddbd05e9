"""Redis connection used to share change notices between processes."""

import logging
from typing import Optional

import redis.asyncio as redis
from redis.exceptions import RedisError

from .pubsub import ChangePublisher, ChangeSubscriber

logger = logging.getLogger(__name__)


class RedisClient:
    """Owns one Redis connection pool and builds the change pub/sub on top of it."""

    def __init__(self, url: str):
        self.url = url
        self._redis: Optional[redis.Redis] = None

    async def connect(self) -> bool:
        """
        Open the pool and check the server answers.

        Returns:
            True when Redis is reachable; the pool is closed again otherwise
        """
        # Change notices are small JSON strings
        self._redis = redis.from_url(self.url, encoding="utf-8", decode_responses=True)
        try:
            await self._redis.ping()
        except RedisError as e:
            logger.warning("[WARN] Redis not available: %s", e)
            await self.close()
            return False
        return True

    @property
    def connected(self) -> bool:
        return self._redis is not None

    def publisher(self) -> ChangePublisher:
        return ChangePublisher(self._require())

    def subscriber(self) -> ChangeSubscriber:
        return ChangeSubscriber(self._require())

    def _require(self) -> redis.Redis:
        if self._redis is None:
            raise RuntimeError("Redis client is not connected")
        return self._redis

    async def close(self) -> None:
        if self._redis is not None:
            await self._redis.aclose()
            self._redis = None
