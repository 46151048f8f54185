"""Unit tests for RetentionSweeper."""

import sys
import unittest
import uuid
from datetime import datetime, timedelta, timezone
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from adapter.fake.favorite_repository import FakeFavoriteRepository
from adapter.fake.notifier import FakeNotifier
from adapter.fake.user_repository import FakeUserRepository
from domain.model.favorite import Favorite
from services.retention_service import RetentionSweeper

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


class RetentionTestCase(unittest.TestCase):

    def setUp(self):
        self.repo = FakeFavoriteRepository()
        self.users = FakeUserRepository()
        self.notifier = FakeNotifier()
        self.alice = self.users.create('alice@example.com', 'hash', 'Alice')
        self.bob = self.users.create('bob@example.com', 'hash', 'Bob')

    def _favorite(self, owner_id: str, word: str, age_days: int, trashed: bool = False) -> Favorite:
        created = NOW - timedelta(days=age_days)
        favorite = Favorite(
            id=str(uuid.uuid4()),
            owner_id=owner_id,
            word=word,
            note=None,
            created_at=created,
            updated_at=created,
            deleted_at=NOW if trashed else None,
        )
        return self.repo.add(favorite)

    def _sweeper(self, confirm=None) -> RetentionSweeper:
        return RetentionSweeper(
            self.repo, users=self.users, notifier=self.notifier, confirm=confirm, clock=lambda: NOW,
        )


class TestCandidateSelection(RetentionTestCase):

    def setUp(self):
        super().setUp()
        self.young = self._favorite(self.alice.id, 'young', 5)
        self.old = self._favorite(self.alice.id, 'old', 35)
        self.older = self._favorite(self.bob.id, 'older', 45)
        self.already_trashed = self._favorite(self.bob.id, 'binned', 90, trashed=True)

    def test_dry_run_reports_without_mutating(self):
        report = self._sweeper().sweep(threshold_days=30, dry_run=True)

        self.assertTrue(report.dry_run)
        self.assertEqual(report.total_checked, 2)
        self.assertEqual(report.affected_owners, 2)
        self.assertEqual(report.deleted_count, 0)
        # Oldest first
        self.assertEqual([f.word for f in report.candidates], ['older', 'old'])
        self.assertEqual(report.owner_counts, {self.alice.id: 1, self.bob.id: 1})
        self.assertEqual(report.cutoff, NOW - timedelta(days=30))
        self.assertFalse(self.repo.store[self.old.id].is_trashed)
        self.assertEqual(self.repo.commits, 0)

    def test_forced_sweep_trashes_only_old_active_favorites(self):
        report = self._sweeper().sweep(threshold_days=30, force=True)

        self.assertEqual(report.deleted_count, 2)
        self.assertEqual(report.errors, [])
        self.assertTrue(self.repo.store[self.old.id].is_trashed)
        self.assertTrue(self.repo.store[self.older.id].is_trashed)
        self.assertFalse(self.repo.store[self.young.id].is_trashed)
        self.assertEqual(self.repo.commits, 1)

    def test_threshold_moves_cutoff(self):
        report = self._sweeper().sweep(threshold_days=40, dry_run=True)

        self.assertEqual([f.word for f in report.candidates], ['older'])

    def test_zero_threshold_selects_everything_active(self):
        report = self._sweeper().sweep(threshold_days=0, dry_run=True)

        self.assertEqual(report.total_checked, 3)

    def test_negative_threshold_rejected(self):
        with self.assertRaises(ValueError):
            self._sweeper().sweep(threshold_days=-1)

    def test_declined_confirmation_cancels(self):
        prompts = []

        def decline(report):
            prompts.append(report.total_checked)
            return False

        report = self._sweeper(confirm=decline).sweep(threshold_days=30)

        self.assertEqual(prompts, [2])
        self.assertTrue(report.cancelled)
        self.assertEqual(report.deleted_count, 0)
        self.assertFalse(self.repo.store[self.old.id].is_trashed)

    def test_missing_confirmation_cancels_unforced_sweep(self):
        report = self._sweeper().sweep(threshold_days=30)

        self.assertTrue(report.cancelled)
        self.assertEqual(self.repo.commits, 0)

    def test_accepted_confirmation_proceeds(self):
        report = self._sweeper(confirm=lambda report: True).sweep(threshold_days=30)

        self.assertFalse(report.cancelled)
        self.assertEqual(report.deleted_count, 2)


class TestNothingToDo(RetentionTestCase):

    def test_no_candidates(self):
        self._favorite(self.alice.id, 'fresh', 1)

        report = self._sweeper().sweep(threshold_days=30, force=True)

        self.assertEqual(report.total_checked, 0)
        self.assertEqual(report.deleted_count, 0)
        self.assertEqual(report.affected_owners, 0)
        self.assertEqual(self.repo.commits, 0)


class TestPartialFailures(RetentionTestCase):

    def test_one_failing_record_does_not_stop_the_rest(self):
        first = self._favorite(self.alice.id, 'one', 50)
        failing = self._favorite(self.alice.id, 'two', 40)
        third = self._favorite(self.bob.id, 'three', 35)
        self.repo.failing_ids = {failing.id}

        report = self._sweeper().sweep(threshold_days=30, force=True)

        self.assertEqual(report.deleted_count, 2)
        self.assertEqual(len(report.errors), 1)
        self.assertIn(failing.id, report.errors[0])
        self.assertTrue(self.repo.store[first.id].is_trashed)
        self.assertTrue(self.repo.store[third.id].is_trashed)
        self.assertFalse(self.repo.store[failing.id].is_trashed)
        self.assertFalse(report.aborted)

    def test_transaction_failure_reports_zero_deleted(self):
        old = self._favorite(self.alice.id, 'old', 35)
        self.repo.fail_transaction = True

        report = self._sweeper().sweep(threshold_days=30, force=True)

        self.assertTrue(report.aborted)
        self.assertEqual(report.deleted_count, 0)
        self.assertTrue(report.errors[0].startswith('Database transaction failed'))
        self.assertFalse(self.repo.store[old.id].is_trashed)
        self.assertEqual(self.repo.rollbacks, 1)


class TestNotifications(RetentionTestCase):

    def test_each_owner_notified_once_with_oldest_age(self):
        self._favorite(self.alice.id, 'a1', 50)
        self._favorite(self.alice.id, 'a2', 35)
        self._favorite(self.bob.id, 'b1', 40)

        report = self._sweeper().sweep(threshold_days=30, notify=True, force=True)

        notices = {n.owner_id: n for n in self.notifier.sent}
        self.assertEqual(set(notices), {self.alice.id, self.bob.id})
        self.assertEqual(notices[self.alice.id].favorite_count, 2)
        self.assertEqual(notices[self.alice.id].oldest_favorite_age_days, 50)
        self.assertEqual(notices[self.alice.id].owner_email, 'alice@example.com')
        self.assertEqual(
            notices[self.alice.id].message,
            'You have 2 favorites that were created more than 30 days ago',
        )
        self.assertEqual(notices[self.bob.id].oldest_favorite_age_days, 40)
        self.assertEqual(report.deleted_count, 3)

    def test_unknown_owner_is_skipped_but_still_swept(self):
        orphan = self._favorite('ghost-user', 'lonely', 60)
        self._favorite(self.alice.id, 'a1', 40)

        report = self._sweeper().sweep(threshold_days=30, notify=True, force=True)

        self.assertEqual(report.skipped_owners, ['ghost-user'])
        self.assertEqual([n.owner_id for n in self.notifier.sent], [self.alice.id])
        self.assertTrue(self.repo.store[orphan.id].is_trashed)
        self.assertEqual(report.deleted_count, 2)

    def test_notifier_failure_is_recorded(self):
        self._favorite(self.alice.id, 'a1', 40)
        self.notifier.failing_owner_ids = {self.alice.id}

        report = self._sweeper().sweep(threshold_days=30, notify=True, force=True)

        self.assertEqual(report.notified_owners, [])
        self.assertIn(self.alice.id, report.errors[0])
        self.assertEqual(report.deleted_count, 1)

    def test_rolled_back_sweep_records_notified_owners(self):
        old = self._favorite(self.alice.id, 'a1', 40)
        self.repo.fail_transaction = True

        report = self._sweeper().sweep(threshold_days=30, notify=True, force=True)

        self.assertTrue(report.aborted)
        self.assertEqual(report.notified_before_abort, [self.alice.id])
        self.assertEqual(report.errors[-1], f'Notified 1 owners but nothing was trashed: {self.alice.id}')
        self.assertFalse(self.repo.store[old.id].is_trashed)

    def test_completed_sweep_has_no_notified_before_abort(self):
        self._favorite(self.alice.id, 'a1', 40)

        report = self._sweeper().sweep(threshold_days=30, notify=True, force=True)

        self.assertEqual(report.notified_owners, [self.alice.id])
        self.assertEqual(report.notified_before_abort, [])

    def test_dry_run_sends_no_notifications(self):
        self._favorite(self.alice.id, 'a1', 40)

        self._sweeper().sweep(threshold_days=30, notify=True, dry_run=True)

        self.assertEqual(self.notifier.sent, [])

    def test_notify_without_notifier_raises(self):
        self._favorite(self.alice.id, 'a1', 40)
        sweeper = RetentionSweeper(self.repo, clock=lambda: NOW)

        with self.assertRaises(RuntimeError):
            sweeper.sweep(threshold_days=30, notify=True, force=True)


if __name__ == '__main__':
    unittest.main()
