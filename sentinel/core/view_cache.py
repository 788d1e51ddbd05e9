"""Cache of built view models, invalidated by table change notices."""

import asyncio
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, FrozenSet, Iterable


@dataclass
class _Entry:
    value: Any
    tables: FrozenSet[str]
    stored_at: float
    stale: bool = False


class ViewCache:
    """
    Holds one view model per key.

    An entry is served until a change notice names one of its tables or it
    is older than ``ttl`` seconds; the next ``get`` then rebuilds it with
    the caller's loader. Loader errors propagate and nothing is cached.
    Storing past ``max_entries`` drops stale and expired entries first,
    then the oldest ones.
    """

    def __init__(
        self,
        ttl: float = 30.0,
        max_entries: int = 256,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.ttl = ttl
        self.max_entries = max_entries
        self._clock = clock
        self._entries: Dict[str, _Entry] = {}
        # Bumped on every invalidation of a table
        self._generations: Dict[str, int] = {}
        self._lock = asyncio.Lock()

    def _fresh(self, entry: _Entry) -> bool:
        return not entry.stale and self._clock() - entry.stored_at < self.ttl

    def _generation(self, tables: Iterable[str]) -> tuple:
        return tuple(self._generations.get(table, 0) for table in tables)

    async def get(
        self,
        key: str,
        tables: Iterable[str],
        loader: Callable[[], Awaitable[Any]],
    ) -> Any:
        """Return the cached view for ``key`` or build it with ``loader``."""
        tables = frozenset(tables)
        async with self._lock:
            entry = self._entries.get(key)
            if entry is not None and self._fresh(entry):
                return entry.value
            generation = self._generation(sorted(tables))

        value = await loader()

        async with self._lock:
            # A notice that arrived while loading leaves the result stale
            stale = self._generation(sorted(tables)) != generation
            self._entries[key] = _Entry(value, tables, self._clock(), stale=stale)
            if len(self._entries) > self.max_entries:
                self._prune(keep=key)
        return value

    def _prune(self, keep: str) -> None:
        for key in [k for k, e in self._entries.items() if k != keep and not self._fresh(e)]:
            del self._entries[key]

        excess = len(self._entries) - self.max_entries
        if excess > 0:
            oldest = sorted(
                (k for k in self._entries if k != keep),
                key=lambda k: self._entries[k].stored_at,
            )
            for key in oldest[:excess]:
                del self._entries[key]

    def invalidate(self, tables: Iterable[str]) -> int:
        """Mark every entry built from any of ``tables`` stale.

        Returns the number of entries marked.
        """
        tables = set(tables)
        for table in tables:
            self._generations[table] = self._generations.get(table, 0) + 1

        marked = 0
        for entry in self._entries.values():
            if not entry.stale and entry.tables & tables:
                entry.stale = True
                marked += 1
        return marked

    def discard(self, key: str) -> None:
        self._entries.pop(key, None)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
