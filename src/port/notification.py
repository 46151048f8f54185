"""Notification port: delivers notices to favorite owners."""

from typing import Protocol

from domain.model.sweep import FavoriteNotice


class NotificationPort(Protocol):

    def notify(self, notice: FavoriteNotice) -> None:
        """Deliver a notice to its owner. Raises on delivery failure."""
        ...
