import asyncio

import pytest

from app.notifications.providers import ManualFeed, PollingFeed, PushFeed
from app.notifications.types import Subscription
from fixtures import eventually

JOBS = [
    {"id": "job-b", "brand_id": "brand-1", "created_at": 2},
    {"id": "job-a", "brand_id": "brand-2", "created_at": 1},
]


async def fetch(brand_id=None):
    return [j for j in JOBS if not brand_id or j["brand_id"] == brand_id]


@pytest.mark.asyncio
async def test_manual_feed_delivers_on_tick():
    feed = ManualFeed(fetch)
    seen = []
    sub = Subscription(seen.append)
    feed.attach(sub)
    assert seen == []
    await feed.tick()
    await feed.tick()
    assert feed.ticks == 2
    assert len(seen) == 2
    assert sub.deliveries == 2
    assert [j["id"] for j in seen[0]] == ["job-b", "job-a"]


@pytest.mark.asyncio
async def test_subscription_brand_filter():
    feed = ManualFeed(fetch)
    seen = []
    feed.attach(Subscription(seen.append, brand_id="brand-2"))
    await feed.tick()
    assert [j["id"] for j in seen[0]] == ["job-a"]


@pytest.mark.asyncio
async def test_unsubscribe_is_idempotent():
    feed = ManualFeed(fetch)
    closed = []
    seen = []
    sub = Subscription(seen.append, on_close=closed.append)
    feed.attach(sub)
    sub.unsubscribe()
    sub.unsubscribe()
    sub()
    assert closed == [sub]
    assert sub.closed
    assert feed.active == 0
    await feed.tick()
    assert seen == []


@pytest.mark.asyncio
async def test_async_listener_is_awaited():
    feed = ManualFeed(fetch)
    seen = []

    async def listener(jobs):
        seen.append(len(jobs))

    feed.attach(Subscription(listener))
    await feed.tick()
    assert seen == [2]


@pytest.mark.asyncio
async def test_failing_listener_does_not_break_others(caplog):
    feed = ManualFeed(fetch)

    def boom(jobs):
        raise RuntimeError("listener blew up")

    seen = []
    bad = Subscription(boom)
    feed.attach(bad)
    feed.attach(Subscription(seen.append))
    with caplog.at_level("WARNING", logger="app.notifications"):
        await feed.tick()
    assert len(seen) == 1
    assert bad.deliveries == 0
    assert "listener blew up" in caplog.text


@pytest.mark.asyncio
async def test_polling_feed_repeats_until_detached():
    feed = PollingFeed(fetch, interval=0.01)
    seen = []
    sub = Subscription(seen.append)
    feed.attach(sub)
    assert await eventually(lambda: len(seen) >= 3)
    sub.unsubscribe()
    assert feed.active == 0
    count = len(seen)
    await eventually(lambda: False, timeout=0.05)
    assert len(seen) == count


@pytest.mark.asyncio
async def test_push_feed_sends_snapshot_then_publishes():
    feed = PushFeed(fetch)
    seen = []
    sub = Subscription(seen.append)
    feed.attach(sub)
    assert await eventually(lambda: len(seen) == 1)
    feed.publish()
    assert await eventually(lambda: len(seen) == 2 and feed.pending == 0)
    sub.unsubscribe()
    feed.publish()
    assert await eventually(lambda: feed.pending == 0)
    assert len(seen) == 2
    feed.close()


@pytest.mark.asyncio
async def test_push_feed_delivers_snapshots_in_publish_order():
    version = 0
    delays = [0, 0.05, 0]

    async def slow_fetch(brand_id=None):
        snapshot = [{"id": f"v{version}"}]
        await asyncio.sleep(delays.pop(0))
        return snapshot

    feed = PushFeed(slow_fetch)
    seen = []
    feed.attach(Subscription(seen.append))
    assert await eventually(lambda: len(seen) == 1)

    version = 1
    feed.publish()
    # let the first fetch start before the list changes again
    await asyncio.sleep(0.01)
    version = 2
    feed.publish()
    assert await eventually(lambda: len(seen) == 3 and feed.pending == 0)
    assert [jobs[0]["id"] for jobs in seen] == ["v0", "v1", "v2"]
    feed.close()


@pytest.mark.asyncio
async def test_push_feed_logs_failed_fetch(caplog):
    async def broken_fetch(brand_id=None):
        raise RuntimeError("remote went away")

    feed = PushFeed(broken_fetch)
    seen = []
    with caplog.at_level("WARNING", logger="app.notifications"):
        feed.attach(Subscription(seen.append))
        assert await eventually(lambda: feed.pending == 0)
    assert seen == []
    assert "remote went away" in caplog.text
    feed.close()
