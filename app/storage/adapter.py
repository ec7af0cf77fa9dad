"""Single entry point for job and profile persistence.

The adapter talks to a remote backend when one is configured and reachable.
The first configuration problem or failed call flips it into mock mode for
the rest of its life; from then on every operation is served by the
in-process ``MemoryBackend`` and callers never see a transport error.
"""
import asyncio
import logging
from typing import Any, Callable, Collection, Mapping, Optional
from uuid import uuid4

from app.core.config import Settings
from app.core.errors import ConfigurationError, TransportError
from app.notifications.providers import JobFeed, PollingFeed, PushFeed
from app.notifications.types import JobsFetcher, JobsListener, Subscription
from app.storage.memory import MemoryBackend, now_ms
from app.storage.sql import SqlBackend

logger = logging.getLogger("app.storage")

REMOTE = "remote"
MOCK = "mock"

ModeListener = Callable[[str, Exception], None]


class DataStoreAdapter:
    def __init__(
        self,
        config: Settings,
        remote: Any = None,
        mock: Optional[MemoryBackend] = None,
        poll_feed_factory: Optional[Callable[[JobsFetcher], JobFeed]] = None,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        self.config = config
        self._remote = remote
        self._mock = mock if mock is not None else MemoryBackend()
        self._clock = clock
        self._ready = False
        self._degraded = False
        self._init_lock = asyncio.Lock()
        self._mode_listeners: list[ModeListener] = []
        self._subs: dict[str, Subscription] = {}
        if poll_feed_factory is None:
            poll_feed_factory = lambda fetch: PollingFeed(fetch, interval=config.POLL_INTERVAL_S)
        self.poll_feed: JobFeed = poll_feed_factory(self.list_jobs)
        self.push_feed = PushFeed(self.list_jobs)

    # --- mode -----------------------------------------------------------

    @property
    def mode(self) -> str:
        return MOCK if self._degraded else REMOTE

    @property
    def degraded(self) -> bool:
        return self._degraded

    def on_mode_change(self, callback: ModeListener) -> Callable[[], None]:
        self._mode_listeners.append(callback)

        def remove() -> None:
            if callback in self._mode_listeners:
                self._mode_listeners.remove(callback)

        return remove

    def degrade(self, reason: Exception) -> None:
        """Switch to mock mode for good. Safe to call repeatedly."""
        if self._degraded:
            return
        self._degraded = True
        self._ready = True
        logger.warning("storage: switching to mock mode reason=%s", reason)
        for sub in list(self._subs.values()):
            if sub.feed is self.push_feed:
                self.push_feed.detach(sub)
                self.poll_feed.attach(sub)
        for callback in list(self._mode_listeners):
            try:
                callback(MOCK, reason)
            except Exception as e:
                logger.warning("storage: mode listener failed reason=%s", e)

    async def start(self) -> str:
        await self._ensure_ready()
        return self.mode

    async def _ensure_ready(self) -> None:
        if self._ready:
            return
        async with self._init_lock:
            if self._ready:
                return
            if self._remote is None:
                if not self.config.backend_configured:
                    self.degrade(ConfigurationError("no backend credentials configured"))
                    return
                self._remote = SqlBackend(
                    self.config.BACKEND_URL,
                    self.config.APP_ID,
                    create_schema=self.config.BACKEND_CREATE_SCHEMA,
                )
            try:
                await self._remote.connect()
            except Exception as e:
                self.degrade(TransportError(f"connect failed: {e}"))
                return
            self._ready = True
            logger.info("storage: remote backend ready app_id=%s", self.config.APP_ID)

    async def _call(self, op: str, *args: Any) -> Any:
        await self._ensure_ready()
        if not self._degraded:
            try:
                return await getattr(self._remote, op)(*args)
            except Exception as e:
                self.degrade(TransportError(f"{op} failed: {e}"))
        return await getattr(self._mock, op)(*args)

    def _publish(self) -> None:
        if not self._degraded:
            self.push_feed.publish()

    # --- profiles -------------------------------------------------------

    async def read_profile(self, uid: str) -> Optional[dict]:
        return await self._call("get_profile", uid)

    async def write_profile(self, uid: str, partial: Mapping[str, Any]) -> dict:
        return await self._call("merge_profile", uid, dict(partial))

    # --- jobs -----------------------------------------------------------

    async def create_job(self, fields: Mapping[str, Any]) -> str:
        job = {
            **fields,
            "id": f"job-{uuid4().hex[:12]}",
            "status": "Pending Match",
            "escrow_status": "Unpaid",
            "tailor_id": None,
            "tailor_name": None,
            "created_at": self._clock(),
            "version": 1,
        }
        job_id = await self._call("insert_job", job)
        self._publish()
        return job_id

    async def get_job(self, job_id: str) -> Optional[dict]:
        return await self._call("get_job", job_id)

    async def update_job(
        self,
        job_id: str,
        patch: Mapping[str, Any],
        expect: Optional[Mapping[str, Collection[Any]]] = None,
    ) -> bool:
        """Apply ``patch`` only if every field in ``expect`` currently holds one of the allowed values."""
        applied = await self._call("update_job", job_id, dict(patch), expect)
        if applied:
            self._publish()
        return applied

    async def list_jobs(self, brand_id: Optional[str] = None) -> list[dict]:
        return await self._call("list_jobs", brand_id)

    # --- subscriptions --------------------------------------------------

    def subscribe_jobs(self, listener: JobsListener, brand_id: Optional[str] = None) -> Subscription:
        sub = Subscription(listener, brand_id, on_close=self._forget)
        self._subs[sub.id] = sub
        feed = self.poll_feed if self._degraded else self.push_feed
        feed.attach(sub)
        return sub

    def _forget(self, sub: Subscription) -> None:
        self._subs.pop(sub.id, None)

    @property
    def subscriptions(self) -> int:
        return len(self._subs)

    async def aclose(self) -> None:
        for sub in list(self._subs.values()):
            sub.unsubscribe()
        self.poll_feed.close()
        self.push_feed.close()
        if self._remote is not None:
            await self._remote.close()
