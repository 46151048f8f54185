"""Notification adapter that records owner notices in the structured log.

Stands in for email/SMS delivery: the log line carries everything a
mailer would need.
"""

import logging

from domain.model.sweep import FavoriteNotice

logger = logging.getLogger(__name__)


class LogNotificationAdapter:

    def notify(self, notice: FavoriteNotice) -> None:
        logger.info("Notification sent to user about old favorites", extra={
            "ownerId": notice.owner_id,
            "ownerEmail": notice.owner_email,
            "favoritesCount": notice.favorite_count,
            "oldestFavoriteDays": notice.oldest_favorite_age_days,
            "notice": notice.message,
        })
