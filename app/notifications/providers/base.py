import inspect
import logging
from typing import Protocol

from app.notifications.types import Subscription

logger = logging.getLogger("app.notifications")


class JobFeed(Protocol):
    name: str

    def attach(self, sub: Subscription) -> None:
        ...

    def detach(self, sub: Subscription) -> None:
        ...

    def close(self) -> None:
        ...


async def deliver(sub: Subscription, jobs: list[dict]) -> None:
    if sub.closed:
        return
    try:
        result = sub.listener(jobs)
        if inspect.isawaitable(result):
            await result
        sub.deliveries += 1
    except Exception as e:
        logger.warning("jobs-feed listener failed sub=%s reason=%s", sub.id, e)
