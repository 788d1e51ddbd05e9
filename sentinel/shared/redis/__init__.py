"""Redis client and change-notice pub/sub."""

from .client import RedisClient
from .pubsub import (
    ChangePublisher,
    ChangeSubscriber,
    CHANGE_CHANNEL_PREFIX,
    change_channel,
)

__all__ = [
    "RedisClient",
    "ChangePublisher",
    "ChangeSubscriber",
    "CHANGE_CHANNEL_PREFIX",
    "change_channel",
]
