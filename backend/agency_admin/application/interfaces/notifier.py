"""Notification surface port — where toast-shaped messages are sent."""

from abc import ABC, abstractmethod

from agency_admin.domain.entities import Notification


class Notifier(ABC):
    @abstractmethod
    def notify(self, notification: Notification) -> None:
        """Deliver one user-visible message. Must not raise."""
        ...
