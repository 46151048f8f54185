"""Retention sweep domain models."""

from dataclasses import dataclass, field
from datetime import datetime

from domain.model.favorite import Favorite


@dataclass(frozen=True)
class FavoriteNotice:
    """Notification payload sent to an owner before their old favorites are trashed."""
    owner_id: str
    favorite_count: int
    oldest_favorite_age_days: int
    message: str
    owner_email: str | None = None
    owner_name: str | None = None


@dataclass
class SweepReport:
    """Result of a retention sweep run.

    candidates holds every favorite older than the cutoff, oldest first,
    and owner_counts the same set grouped by owner. Owners are notified
    before the trash transaction runs; notified_before_abort lists the ones
    told about a cleanup that was then rolled back.
    """
    cutoff: datetime
    total_checked: int = 0
    deleted_count: int = 0
    affected_owners: int = 0
    errors: list[str] = field(default_factory=list)
    dry_run: bool = False
    cancelled: bool = False
    aborted: bool = False
    candidates: list[Favorite] = field(default_factory=list)
    owner_counts: dict[str, int] = field(default_factory=dict)
    notified_owners: list[str] = field(default_factory=list)
    skipped_owners: list[str] = field(default_factory=list)
    notified_before_abort: list[str] = field(default_factory=list)

    def to_log_extra(self) -> dict:
        return {
            "totalChecked": self.total_checked,
            "deletedCount": self.deleted_count,
            "affectedOwners": self.affected_owners,
            "errorCount": len(self.errors),
            "cutoff": self.cutoff.isoformat(),
            "dryRun": self.dry_run,
            "cancelled": self.cancelled,
            "aborted": self.aborted,
            "notifiedOwners": len(self.notified_owners),
            "notifiedBeforeAbort": len(self.notified_before_abort),
        }
