"""Scheduled cleanup: move favorites older than N days to the trash.

Usage:
    python src/worker/cleanup.py --days 30 --dry-run
    favorites-cleanup --days 45 --notify --force

Exit codes:
    0  completed, nothing to do, or cancelled
    1  MongoDB unavailable or the cleanup transaction aborted
"""

import argparse
import sys
import logging
from pathlib import Path

from dotenv import load_dotenv

# Connection settings are read at import time
load_dotenv()

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from adapter.mongodb.connection import get_mongodb_client, DATABASE_NAME
from adapter.mongodb.favorite_repository import MongoFavoriteRepository
from adapter.mongodb.user_repository import MongoUserRepository
from adapter.notification.log_notifier import LogNotificationAdapter
from domain.model.sweep import SweepReport
from services.retention_service import DEFAULT_THRESHOLD_DAYS, RetentionSweeper
from utils.logging import setup_structured_logging

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Move favorites older than N days to the trash")
    parser.add_argument(
        "--days", type=int, default=DEFAULT_THRESHOLD_DAYS,
        help=f"Age threshold in days (default: {DEFAULT_THRESHOLD_DAYS})",
    )
    parser.add_argument("--dry-run", action="store_true", help="Show what would be trashed without changing anything")
    parser.add_argument("--notify", action="store_true", help="Notify owners before trashing their favorites")
    parser.add_argument("--force", action="store_true", help="Skip the confirmation prompt")
    return parser


def print_candidates(report: SweepReport) -> None:
    print(f"{'ID':<34} {'Word':<24} {'Owner':<26} {'Created At'}")
    for favorite in report.candidates:
        print(f"{favorite.id:<34} {favorite.word[:24]:<24} {favorite.owner_id:<26} "
              f"{favorite.created_at:%Y-%m-%d %H:%M:%S}")


def print_owner_summary(report: SweepReport) -> None:
    print("By owner:")
    for owner_id, count in sorted(report.owner_counts.items(), key=lambda item: (-item[1], item[0])):
        print(f"  Owner {owner_id}: {count} favorites")


def prompt_confirm(report: SweepReport) -> bool:
    """Interactive y/N prompt; anything but yes cancels."""
    print_candidates(report)
    print_owner_summary(report)
    try:
        answer = input(f"Trash {report.total_checked} favorites of {report.affected_owners} users? [y/N] ")
    except EOFError:
        return False
    return answer.strip().lower() in ("y", "yes")


def print_summary(report: SweepReport) -> None:
    print(f"Cutoff: {report.cutoff:%Y-%m-%d %H:%M:%S} UTC")
    if report.total_checked == 0:
        print("No old favorites found.")
        return

    print(f"Found {report.total_checked} favorites from {report.affected_owners} users.")
    if report.dry_run:
        print("Dry run: nothing was changed.")
        print_candidates(report)
        print_owner_summary(report)
        return
    if report.cancelled:
        print("Cleanup cancelled.")
        return
    if report.aborted:
        print("Cleanup aborted: the transaction was rolled back.")
    else:
        print(f"Moved {report.deleted_count} favorites to the trash.")
    if report.notified_before_abort:
        print(f"Notified {len(report.notified_before_abort)} users, but none of their favorites were trashed.")
    elif report.notified_owners:
        print(f"Notified {len(report.notified_owners)} users.")
    for error in report.errors:
        print(f"  error: {error}")


def run(args: argparse.Namespace, sweeper: RetentionSweeper) -> int:
    report = sweeper.sweep(
        threshold_days=args.days,
        dry_run=args.dry_run,
        notify=args.notify,
        force=args.force,
    )
    print_summary(report)
    return 1 if report.aborted else 0


def main(argv: list[str] | None = None) -> int:
    """Entry point for the favorites-cleanup command."""
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.days < 0:
        parser.error("--days must be zero or positive")

    setup_structured_logging()

    client = get_mongodb_client()
    if client is None:
        logger.error("Cannot run cleanup: MongoDB connection failed")
        return 1
    db = client[DATABASE_NAME]

    sweeper = RetentionSweeper(
        MongoFavoriteRepository(db),
        users=MongoUserRepository(db),
        notifier=LogNotificationAdapter(),
        confirm=prompt_confirm,
    )
    return run(args, sweeper)


if __name__ == "__main__":
    sys.exit(main())
