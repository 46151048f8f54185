"""Retention service: trashes favorites older than a threshold.

Runs as a scheduled batch job (see worker/cleanup.py). Steps:
    1. Find active favorites of any owner created before now - threshold_days
    2. Group them by owner; stop here on dry run
    3. Ask for confirmation unless forced
    4. Optionally notify each affected owner
    5. Soft-delete every candidate inside one transaction, tolerating
       per-record failures
"""

import logging
from collections import defaultdict
from datetime import datetime, timedelta, timezone
from typing import Callable

from domain.model.errors import InfrastructureError, RecordWriteError
from domain.model.favorite import Favorite
from domain.model.sweep import FavoriteNotice, SweepReport
from port.favorite_repository import FavoriteRepository
from port.notification import NotificationPort
from port.user_repository import UserRepository

logger = logging.getLogger(__name__)

DEFAULT_THRESHOLD_DAYS = 30

ConfirmCallback = Callable[[SweepReport], bool]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class RetentionSweeper:
    """Batch job that moves old favorites to the trash.

    Args:
        repo: Favorites storage.
        users: Resolves owners for notifications. Optional when notify is never used.
        notifier: Delivers owner notices. Optional when notify is never used.
        confirm: Asked before mutating unless force=True. Without it,
            a non-forced sweep is cancelled.
        clock: Returns the current aware datetime.
    """

    def __init__(
        self,
        repo: FavoriteRepository,
        users: UserRepository | None = None,
        notifier: NotificationPort | None = None,
        confirm: ConfirmCallback | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.repo = repo
        self.users = users
        self.notifier = notifier
        self.confirm = confirm
        self.clock = clock

    def sweep(
        self,
        threshold_days: int = DEFAULT_THRESHOLD_DAYS,
        dry_run: bool = False,
        notify: bool = False,
        force: bool = False,
    ) -> SweepReport:
        if threshold_days < 0:
            raise ValueError("threshold_days must be >= 0")

        now = self.clock()
        cutoff = now - timedelta(days=threshold_days)
        candidates = self.repo.find_older_than(cutoff)

        report = SweepReport(cutoff=cutoff, dry_run=dry_run, total_checked=len(candidates))
        if not candidates:
            logger.info("No old favorites found to clean up", extra={"cutoff": cutoff.isoformat()})
            return report

        by_owner = _group_by_owner(candidates)
        report.candidates = candidates
        report.owner_counts = {owner_id: len(favs) for owner_id, favs in by_owner.items()}
        report.affected_owners = len(by_owner)

        logger.info("Old favorites found", extra={
            "count": len(candidates),
            "affectedOwners": report.affected_owners,
            "thresholdDays": threshold_days,
        })

        if dry_run:
            return report

        if not force and not (self.confirm and self.confirm(report)):
            report.cancelled = True
            logger.info("Favorites cleanup cancelled")
            return report

        if notify:
            self._notify_owners(by_owner, threshold_days, now, report)

        self._trash_all(candidates, report)
        if report.aborted and report.notified_owners:
            report.notified_before_abort = list(report.notified_owners)
            logger.warning("Owners were notified but the cleanup was rolled back", extra={
                "ownerIds": report.notified_before_abort,
            })
            report.errors.append(
                f"Notified {len(report.notified_before_abort)} owners but nothing was trashed: "
                f"{', '.join(report.notified_before_abort)}"
            )

        logger.info("Favorites cleanup completed", extra=report.to_log_extra())
        return report

    # ── steps ────────────────────────────────────────────────

    def _notify_owners(
        self,
        by_owner: dict[str, list[Favorite]],
        threshold_days: int,
        now: datetime,
        report: SweepReport,
    ) -> None:
        if self.users is None or self.notifier is None:
            raise RuntimeError("notify requires a user repository and a notifier")

        for owner_id, favorites in by_owner.items():
            user = self.users.get_by_id(owner_id)
            if user is None:
                logger.warning("Owner not found, skipping notification", extra={"ownerId": owner_id})
                report.skipped_owners.append(owner_id)
                continue

            count = len(favorites)
            # candidates arrive oldest first
            notice = FavoriteNotice(
                owner_id=owner_id,
                favorite_count=count,
                oldest_favorite_age_days=favorites[0].age_days(now),
                message=f"You have {count} favorites that were created more than {threshold_days} days ago",
                owner_email=user.email,
                owner_name=user.name,
            )
            try:
                self.notifier.notify(notice)
            except Exception as e:
                logger.error("Failed to notify owner", extra={"ownerId": owner_id, "error": str(e)})
                report.errors.append(f"Failed to notify owner {owner_id}: {e}")
                continue
            report.notified_owners.append(owner_id)

    def _trash_all(self, candidates: list[Favorite], report: SweepReport) -> None:
        deleted = 0
        errors: list[str] = []
        try:
            with self.repo.transaction():
                for favorite in candidates:
                    try:
                        trashed = self.repo.soft_delete(favorite.owner_id, favorite.id)
                    except RecordWriteError as e:
                        errors.append(f"Failed to delete favorite ID {favorite.id}: {e.reason}")
                        logger.error("Failed to clean up old favorite", extra={
                            "favoriteId": favorite.id, "error": e.reason,
                        })
                        continue
                    if not trashed:
                        errors.append(f"Failed to delete favorite ID {favorite.id}: no longer active")
                        continue
                    deleted += 1
                    logger.info("Cleaned up old favorite", extra={
                        "favoriteId": favorite.id,
                        "word": favorite.word,
                        "ownerId": favorite.owner_id,
                        "createdAt": favorite.created_at.isoformat(),
                    })
        except InfrastructureError as e:
            logger.error("Favorites cleanup transaction failed", extra={"error": str(e)})
            report.aborted = True
            report.deleted_count = 0
            report.errors.append(f"Database transaction failed: {e}")
            return

        report.deleted_count = deleted
        report.errors.extend(errors)


def _group_by_owner(favorites: list[Favorite]) -> dict[str, list[Favorite]]:
    """Group favorites by owner, preserving order inside each group."""
    grouped: dict[str, list[Favorite]] = defaultdict(list)
    for favorite in favorites:
        grouped[favorite.owner_id].append(favorite)
    return dict(grouped)
