from __future__ import annotations

from collections import deque
from typing import Deque, List

from .datamodels import Notification

WELCOME = "welcome"
TOPIC_COMPLETED = "topic_completed"


class NotificationQueue:
    """Holds transient messages until the UI picks them up."""

    def __init__(self) -> None:
        self._items: Deque[Notification] = deque()

    def push(self, notification: Notification) -> None:
        self._items.append(notification)

    def drain(self) -> List[Notification]:
        """Return all pending notifications, oldest first, and empty the queue."""
        items = list(self._items)
        self._items.clear()
        return items

    def __len__(self) -> int:
        return len(self._items)
