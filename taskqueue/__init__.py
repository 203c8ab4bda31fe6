"""Bounded-concurrency asyncio task queue."""

from .config import QueueSettings, settings
from .queue import BoundedTaskQueue, InvalidConfiguration, QueueStats

__all__ = ["QueueSettings", "settings", "BoundedTaskQueue", "InvalidConfiguration", "QueueStats"]
