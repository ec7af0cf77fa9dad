import asyncio
import logging

from app.notifications.providers.base import deliver
from app.notifications.types import JobsFetcher, Subscription

logger = logging.getLogger("app.notifications")


class PushFeed:
    """Delivers a fresh list to every subscriber each time ``publish`` is called.

    Deliveries run as background tasks, one at a time and in the order they
    were scheduled, so a slow fetch can never land after a newer snapshot.
    """

    name = "push"

    def __init__(self, fetch: JobsFetcher) -> None:
        self._fetch = fetch
        self._subs: dict[str, Subscription] = {}
        self._pending: set[asyncio.Task] = set()
        self._lock = asyncio.Lock()

    def attach(self, sub: Subscription) -> None:
        sub.feed = self
        self._subs[sub.id] = sub
        # initial snapshot, like a change-stream's first event
        self._schedule(sub)

    def detach(self, sub: Subscription) -> None:
        self._subs.pop(sub.id, None)

    def publish(self) -> None:
        for sub in list(self._subs.values()):
            self._schedule(sub)

    def _schedule(self, sub: Subscription) -> None:
        task = asyncio.create_task(self._push(sub), name=f"jobs-push-{sub.id}")
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _push(self, sub: Subscription) -> None:
        async with self._lock:
            if sub.feed is not self:
                return
            try:
                jobs = await self._fetch(sub.brand_id)
            except Exception as e:
                logger.warning("jobs-push fetch failed sub=%s reason=%s", sub.id, e)
                return
            # the fetch may have degraded the store and moved this subscriber
            if sub.feed is self:
                await deliver(sub, jobs)

    def close(self) -> None:
        for task in self._pending:
            task.cancel()
        self._pending.clear()
        self._subs.clear()

    @property
    def active(self) -> int:
        return len(self._subs)

    @property
    def pending(self) -> int:
        return len(self._pending)
