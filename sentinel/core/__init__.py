"""View aggregation, caching and change propagation."""

from .view_cache import ViewCache
from .changes import ChangeFeed

__all__ = [
    "ViewCache",
    "ChangeFeed",
]
