import asyncio

import pytest

from sentinel.core import ViewCache


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


class CountingLoader:
    def __init__(self):
        self.calls = 0

    async def __call__(self):
        self.calls += 1
        return {"version": self.calls}


def test_serves_cached_view_until_invalidated():
    async def scenario():
        cache = ViewCache(ttl=30)
        loader = CountingLoader()

        first = await cache.get("cameras", ["camera_metadata"], loader)
        second = await cache.get("cameras", ["camera_metadata"], loader)
        assert first is second
        assert loader.calls == 1

        assert cache.invalidate(["camera_metadata"]) == 1
        third = await cache.get("cameras", ["camera_metadata"], loader)
        assert third == {"version": 2}

    asyncio.run(scenario())


def test_invalidation_only_touches_views_of_that_table():
    async def scenario():
        cache = ViewCache(ttl=30)
        cameras, events = CountingLoader(), CountingLoader()
        await cache.get("cameras", ["camera_metadata"], cameras)
        await cache.get("events", ["special_events"], events)

        assert cache.invalidate(["special_events"]) == 1
        await cache.get("cameras", ["camera_metadata"], cameras)
        await cache.get("events", ["special_events"], events)

        assert cameras.calls == 1
        assert events.calls == 2

    asyncio.run(scenario())


def test_entries_expire_after_ttl():
    async def scenario():
        clock = FakeClock()
        cache = ViewCache(ttl=30, clock=clock)
        loader = CountingLoader()

        await cache.get("dashboard", ["anomalies"], loader)
        clock.now = 29
        await cache.get("dashboard", ["anomalies"], loader)
        assert loader.calls == 1

        clock.now = 31
        await cache.get("dashboard", ["anomalies"], loader)
        assert loader.calls == 2

    asyncio.run(scenario())


def test_change_during_load_leaves_result_stale():
    async def scenario():
        cache = ViewCache(ttl=30)
        calls = []

        async def loader():
            calls.append(1)
            if len(calls) == 1:
                # A write lands while the first build is still running
                cache.invalidate(["anomalies"])
            return len(calls)

        assert await cache.get("action-queue", ["anomalies"], loader) == 1
        assert await cache.get("action-queue", ["anomalies"], loader) == 2
        assert await cache.get("action-queue", ["anomalies"], loader) == 2

    asyncio.run(scenario())


def test_loader_errors_are_not_cached():
    async def scenario():
        cache = ViewCache(ttl=30)

        async def failing():
            raise RuntimeError("database unavailable")

        with pytest.raises(RuntimeError):
            await cache.get("insights", ["ai_insights"], failing)
        assert len(cache) == 0

        assert await cache.get("insights", ["ai_insights"], CountingLoader()) == {"version": 1}

    asyncio.run(scenario())


def test_discard_and_clear():
    async def scenario():
        cache = ViewCache()
        await cache.get("a", ["t"], CountingLoader())
        await cache.get("b", ["t"], CountingLoader())
        cache.discard("a")
        assert len(cache) == 1
        cache.clear()
        assert len(cache) == 0

    asyncio.run(scenario())


def test_cache_is_bounded_and_drops_oldest():
    async def scenario():
        clock = FakeClock()
        cache = ViewCache(ttl=300, max_entries=3, clock=clock)

        for i in range(5):
            clock.now = i
            await cache.get(f"system-logs?severity={i}", ["system_logs"], CountingLoader())

        assert len(cache) == 3
        loader = CountingLoader()
        await cache.get("system-logs?severity=4", ["system_logs"], loader)
        await cache.get("system-logs?severity=0", ["system_logs"], loader)
        assert loader.calls == 1

    asyncio.run(scenario())


def test_stale_entries_are_dropped_before_fresh_ones():
    async def scenario():
        clock = FakeClock()
        cache = ViewCache(ttl=300, max_entries=2, clock=clock)
        events, cameras = CountingLoader(), CountingLoader()

        await cache.get("events", ["special_events"], events)
        clock.now = 1
        await cache.get("cameras", ["camera_metadata"], cameras)
        cache.invalidate(["camera_metadata"])
        clock.now = 2
        await cache.get("timetables", ["timetable_template"], CountingLoader())

        assert len(cache) == 2
        await cache.get("events", ["special_events"], events)
        assert events.calls == 1

    asyncio.run(scenario())
