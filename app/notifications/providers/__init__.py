from app.notifications.providers.base import JobFeed, deliver
from app.notifications.providers.polling import PollingFeed
from app.notifications.providers.push import PushFeed
from app.notifications.providers.manual import ManualFeed

__all__ = [
    "JobFeed",
    "deliver",
    "PollingFeed",
    "PushFeed",
    "ManualFeed",
]
