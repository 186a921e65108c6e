"""Notification queue — collects toast messages until the client drains them."""

import logging
from collections import deque

from agency_admin.application.interfaces import Notifier
from agency_admin.domain.entities import Notification

logger = logging.getLogger(__name__)


class NotificationQueue(Notifier):
    """Bounded in-memory notification surface for one admin workspace.

    The oldest messages are dropped once `max_size` is reached.
    """

    def __init__(self, max_size: int = 100) -> None:
        self._queue: deque[Notification] = deque(maxlen=max_size)

    def notify(self, notification: Notification) -> None:
        level = logging.WARNING if notification.variant == "destructive" else logging.INFO
        logger.log(level, "%s: %s", notification.title, notification.description)
        self._queue.append(notification)

    def drain(self) -> list[Notification]:
        """Return and forget every pending notification, oldest first."""
        pending = list(self._queue)
        self._queue.clear()
        return pending

    def __len__(self) -> int:
        return len(self._queue)
