from app.notifications.providers.base import deliver
from app.notifications.types import JobsFetcher, Subscription


class ManualFeed:
    """Delivers only when ``tick`` is awaited. Drop-in for PollingFeed in tests and scripts."""

    name = "manual"

    def __init__(self, fetch: JobsFetcher) -> None:
        self._fetch = fetch
        self._subs: dict[str, Subscription] = {}
        self.ticks = 0

    def attach(self, sub: Subscription) -> None:
        sub.feed = self
        self._subs[sub.id] = sub

    def detach(self, sub: Subscription) -> None:
        self._subs.pop(sub.id, None)

    async def tick(self) -> None:
        self.ticks += 1
        for sub in list(self._subs.values()):
            jobs = await self._fetch(sub.brand_id)
            await deliver(sub, jobs)

    def close(self) -> None:
        self._subs.clear()

    @property
    def active(self) -> int:
        return len(self._subs)
