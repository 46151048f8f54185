"""In-memory implementation of FavoriteRepository for testing."""

import copy
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Iterator

from domain.model.errors import InfrastructureError, RecordWriteError
from domain.model.favorite import BatchResult, Favorite


class FakeFavoriteRepository:
    """Dict-backed favorites store.

    Fault injection:
        failing_ids: soft_delete/restore/purge on these ids raise RecordWriteError.
        fail_transaction: transaction() raises InfrastructureError on commit
            and rolls the store back to its state on entry.
    """

    def __init__(self):
        self.store: dict[str, Favorite] = {}
        self.failing_ids: set[str] = set()
        self.fail_transaction = False
        self.commits = 0
        self.rollbacks = 0

    # ── helpers ──────────────────────────────────────────────

    def add(self, favorite: Favorite) -> Favorite:
        """Insert a prebuilt favorite (test setup with custom timestamps)."""
        self.store[favorite.id] = favorite
        return favorite.copy()

    def _owned(self, owner_id: str, favorite_id: str) -> Favorite | None:
        favorite = self.store.get(favorite_id)
        if favorite is None or not favorite.is_owned_by(owner_id):
            return None
        return favorite

    def _check_writable(self, favorite_id: str) -> None:
        if favorite_id in self.failing_ids:
            raise RecordWriteError(favorite_id, "simulated write failure")

    # ── write operations ─────────────────────────────────────

    def create(self, owner_id: str, word: str, note: str | None = None) -> Favorite:
        favorite = Favorite.create(owner_id=owner_id, word=word, note=note)
        return self.add(favorite)

    def update_note(self, owner_id: str, favorite_id: str, note: str | None) -> Favorite | None:
        favorite = self._owned(owner_id, favorite_id)
        if favorite is None or favorite.is_trashed:
            return None
        self._check_writable(favorite_id)
        favorite.note = note
        favorite.updated_at = datetime.now(timezone.utc)
        return favorite.copy()

    def soft_delete(self, owner_id: str, favorite_id: str) -> bool:
        favorite = self._owned(owner_id, favorite_id)
        if favorite is None or favorite.is_trashed:
            return False
        self._check_writable(favorite_id)
        now = datetime.now(timezone.utc)
        favorite.deleted_at = now
        favorite.updated_at = now
        return True

    def restore(self, owner_id: str, favorite_id: str) -> Favorite | None:
        favorite = self._owned(owner_id, favorite_id)
        if favorite is None or not favorite.is_trashed:
            return None
        self._check_writable(favorite_id)
        favorite.deleted_at = None
        favorite.updated_at = datetime.now(timezone.utc)
        return favorite.copy()

    def purge(self, owner_id: str, favorite_id: str) -> bool:
        favorite = self._owned(owner_id, favorite_id)
        if favorite is None or not favorite.is_trashed:
            return False
        self._check_writable(favorite_id)
        del self.store[favorite_id]
        return True

    def restore_all(self, owner_id: str) -> BatchResult:
        result = BatchResult()
        for favorite in self.list_trashed(owner_id):
            try:
                if self.restore(owner_id, favorite.id):
                    result.count += 1
            except RecordWriteError as e:
                result.errors.append(f"Failed to restore favorite ID {favorite.id}: {e.reason}")
        return result

    def purge_all(self, owner_id: str) -> BatchResult:
        result = BatchResult()
        for favorite in self.list_trashed(owner_id):
            try:
                if self.purge(owner_id, favorite.id):
                    result.count += 1
            except RecordWriteError as e:
                result.errors.append(f"Failed to purge favorite ID {favorite.id}: {e.reason}")
        return result

    # ── read operations ──────────────────────────────────────

    def list_active(self, owner_id: str) -> list[Favorite]:
        results = [f for f in self.store.values() if f.owner_id == owner_id and not f.is_trashed]
        return [f.copy() for f in sorted(results, key=lambda f: f.created_at, reverse=True)]

    def find_active_by_id(self, owner_id: str, favorite_id: str) -> Favorite | None:
        favorite = self._owned(owner_id, favorite_id)
        if favorite is None or favorite.is_trashed:
            return None
        return favorite.copy()

    def list_trashed(self, owner_id: str) -> list[Favorite]:
        results = [f for f in self.store.values() if f.owner_id == owner_id and f.is_trashed]
        return [f.copy() for f in sorted(results, key=lambda f: f.deleted_at, reverse=True)]

    def find_older_than(self, cutoff: datetime) -> list[Favorite]:
        results = [f for f in self.store.values() if not f.is_trashed and f.created_at < cutoff]
        return [f.copy() for f in sorted(results, key=lambda f: f.created_at)]

    # ── transactions ─────────────────────────────────────────

    @contextmanager
    def transaction(self) -> Iterator[None]:
        snapshot = copy.deepcopy(self.store)
        try:
            yield
            if self.fail_transaction:
                raise InfrastructureError("simulated transaction failure")
        except BaseException:
            self.store = snapshot
            self.rollbacks += 1
            raise
        self.commits += 1
