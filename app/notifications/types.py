from typing import Any, Awaitable, Callable, Optional, TYPE_CHECKING
from uuid import uuid4

if TYPE_CHECKING:
    from app.notifications.providers.base import JobFeed

# Receives the full, newest-first job list on every delivery; may be sync or async.
JobsListener = Callable[[list[dict]], Any]
JobsFetcher = Callable[[Optional[str]], Awaitable[list[dict]]]


class Subscription:
    """Handle returned by ``subscribe_jobs``; calling it (or ``unsubscribe``) stops delivery."""

    def __init__(
        self,
        listener: JobsListener,
        brand_id: Optional[str] = None,
        on_close: Optional[Callable[["Subscription"], None]] = None,
    ) -> None:
        self.id = uuid4().hex[:12]
        self.listener = listener
        self.brand_id = brand_id
        self.feed: Optional["JobFeed"] = None
        self.closed = False
        self.deliveries = 0
        self._on_close = on_close

    def unsubscribe(self) -> None:
        if self.closed:
            return
        self.closed = True
        if self.feed is not None:
            self.feed.detach(self)
            self.feed = None
        if self._on_close is not None:
            self._on_close(self)

    __call__ = unsubscribe

    def __repr__(self) -> str:
        feed = getattr(self.feed, "name", None)
        return f"Subscription(id={self.id!r}, brand_id={self.brand_id!r}, feed={feed!r}, closed={self.closed})"
