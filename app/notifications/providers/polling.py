import asyncio
import logging

from app.notifications.providers.base import deliver
from app.notifications.types import JobsFetcher, Subscription

logger = logging.getLogger("app.notifications")


class PollingFeed:
    """Re-reads the job list on a fixed tick and hands it to each subscriber.

    Updates are visible with bounded staleness (one interval), not on write.
    """

    name = "poll"

    def __init__(self, fetch: JobsFetcher, interval: float = 1.0) -> None:
        self._fetch = fetch
        self.interval = interval
        self._tasks: dict[str, asyncio.Task] = {}

    def attach(self, sub: Subscription) -> None:
        sub.feed = self
        self._tasks[sub.id] = asyncio.create_task(self._run(sub), name=f"jobs-poll-{sub.id}")

    def detach(self, sub: Subscription) -> None:
        task = self._tasks.pop(sub.id, None)
        if task is not None and not task.done():
            task.cancel()

    async def _run(self, sub: Subscription) -> None:
        while not sub.closed and sub.feed is self:
            try:
                jobs = await self._fetch(sub.brand_id)
            except Exception as e:
                logger.warning("jobs-poll fetch failed sub=%s reason=%s", sub.id, e)
            else:
                await deliver(sub, jobs)
            await asyncio.sleep(self.interval)

    def close(self) -> None:
        for task in self._tasks.values():
            task.cancel()
        self._tasks.clear()

    @property
    def active(self) -> int:
        return len(self._tasks)
