"""Tests for the favorites-cleanup command."""

import io
import sys
import unittest
import uuid
from contextlib import redirect_stdout
from datetime import datetime, timedelta, timezone
from pathlib import Path
from unittest.mock import patch

sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from adapter.fake.favorite_repository import FakeFavoriteRepository
from adapter.fake.notifier import FakeNotifier
from adapter.fake.user_repository import FakeUserRepository
from domain.model.favorite import Favorite
from services.retention_service import RetentionSweeper
from worker import cleanup

NOW = datetime(2024, 6, 1, tzinfo=timezone.utc)


class TestCleanupCli(unittest.TestCase):

    def setUp(self):
        self.repo = FakeFavoriteRepository()
        self.users = FakeUserRepository()
        owner = self.users.create('ada@example.com', 'hash', 'Ada')
        created = NOW - timedelta(days=45)
        self.old = self.repo.add(Favorite(
            id=str(uuid.uuid4()), owner_id=owner.id, word='ancient', note=None,
            created_at=created, updated_at=created,
        ))

    def _run(self, argv: list[str], confirm=None) -> tuple[int, str]:
        args = cleanup.build_parser().parse_args(argv)
        sweeper = RetentionSweeper(
            self.repo, users=self.users, notifier=FakeNotifier(), confirm=confirm, clock=lambda: NOW,
        )
        out = io.StringIO()
        with redirect_stdout(out):
            code = cleanup.run(args, sweeper)
        return code, out.getvalue()

    def test_defaults(self):
        args = cleanup.build_parser().parse_args([])

        self.assertEqual(args.days, 30)
        self.assertFalse(args.dry_run)
        self.assertFalse(args.notify)
        self.assertFalse(args.force)

    def test_dry_run_prints_candidates(self):
        code, output = self._run(['--dry-run'])

        self.assertEqual(code, 0)
        self.assertIn('Dry run', output)
        self.assertIn('ancient', output)
        self.assertFalse(self.repo.store[self.old.id].is_trashed)

    def test_dry_run_prints_owner_summary(self):
        created = NOW - timedelta(days=40)
        other = self.users.create('grace@example.com', 'hash', 'Grace')
        for word in ('dusty', 'faded'):
            self.repo.add(Favorite(
                id=str(uuid.uuid4()), owner_id=other.id, word=word, note=None,
                created_at=created, updated_at=created,
            ))

        _, output = self._run(['--dry-run'])

        self.assertIn('By owner:', output)
        self.assertIn(f'Owner {other.id}: 2 favorites', output)
        self.assertIn(f'Owner {self.old.owner_id}: 1 favorites', output)
        # larger groups first
        self.assertLess(output.index(f'Owner {other.id}'), output.index(f'Owner {self.old.owner_id}'))

    def test_prompt_shows_owner_summary(self):
        with patch('builtins.input', return_value='n'):
            _, output = self._run([], confirm=cleanup.prompt_confirm)

        self.assertIn(f'Owner {self.old.owner_id}: 1 favorites', output)

    def test_force_trashes(self):
        code, output = self._run(['--force', '--notify'])

        self.assertEqual(code, 0)
        self.assertIn('Moved 1 favorites to the trash.', output)
        self.assertTrue(self.repo.store[self.old.id].is_trashed)

    def test_nothing_to_do(self):
        code, output = self._run(['--days', '60', '--force'])

        self.assertEqual(code, 0)
        self.assertIn('No old favorites found.', output)

    def test_declined_prompt_cancels(self):
        with patch('builtins.input', return_value='n'):
            code, output = self._run([], confirm=cleanup.prompt_confirm)

        self.assertEqual(code, 0)
        self.assertIn('Cleanup cancelled.', output)
        self.assertFalse(self.repo.store[self.old.id].is_trashed)

    def test_accepted_prompt_proceeds(self):
        with patch('builtins.input', return_value='yes'):
            code, _ = self._run([], confirm=cleanup.prompt_confirm)

        self.assertEqual(code, 0)
        self.assertTrue(self.repo.store[self.old.id].is_trashed)

    def test_aborted_transaction_exits_1(self):
        self.repo.fail_transaction = True

        code, output = self._run(['--force'])

        self.assertEqual(code, 1)
        self.assertIn('aborted', output)

    def test_aborted_after_notify_says_nothing_was_trashed(self):
        self.repo.fail_transaction = True

        code, output = self._run(['--force', '--notify'])

        self.assertEqual(code, 1)
        self.assertIn('Notified 1 users, but none of their favorites were trashed.', output)

    @patch('worker.cleanup.get_mongodb_client', return_value=None)
    def test_mongo_unavailable_exits_1(self, _):
        self.assertEqual(cleanup.main(['--force']), 1)

    def test_negative_days_rejected(self):
        with redirect_stdout(io.StringIO()), self.assertRaises(SystemExit) as ctx:
            cleanup.main(['--days', '-1'])
        self.assertEqual(ctx.exception.code, 2)


if __name__ == '__main__':
    unittest.main()
