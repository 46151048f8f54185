"""Port for favorite data access."""

from contextlib import AbstractContextManager
from datetime import datetime
from typing import Protocol

from domain.model.favorite import BatchResult, Favorite


class FavoriteRepository(Protocol):
    """Protocol for favorite persistence (CRUD + soft-delete lifecycle).

    Every owner-facing operation is scoped by an explicit owner_id; the
    repository never infers identity. A record owned by someone else is
    indistinguishable from a missing one: None / False is returned.

    Write failures on a single record raise RecordWriteError; a lost
    connection or a failed transaction raises InfrastructureError.
    """

    def create(self, owner_id: str, word: str, note: str | None = None) -> Favorite:
        """Persist a new active favorite and return it."""
        ...

    def list_active(self, owner_id: str) -> list[Favorite]:
        """Active favorites of the owner, newest first (created_at desc)."""
        ...

    def find_active_by_id(self, owner_id: str, favorite_id: str) -> Favorite | None:
        ...

    def update_note(self, owner_id: str, favorite_id: str, note: str | None) -> Favorite | None:
        """Replace the note of an active favorite. Returns the updated favorite."""
        ...

    def soft_delete(self, owner_id: str, favorite_id: str) -> bool:
        """Move an active favorite to the trash. False if no such active favorite."""
        ...

    def list_trashed(self, owner_id: str) -> list[Favorite]:
        """Trashed favorites of the owner, most recently trashed first (deleted_at desc)."""
        ...

    def restore(self, owner_id: str, favorite_id: str) -> Favorite | None:
        """Bring a trashed favorite back to active."""
        ...

    def purge(self, owner_id: str, favorite_id: str) -> bool:
        """Permanently remove a trashed favorite."""
        ...

    def restore_all(self, owner_id: str) -> BatchResult:
        """Restore every trashed favorite of the owner, one record at a time.

        A RecordWriteError on one record is collected in the result and the
        rest are still restored.
        """
        ...

    def purge_all(self, owner_id: str) -> BatchResult:
        """Permanently remove every trashed favorite of the owner, one record at a time."""
        ...

    def find_older_than(self, cutoff: datetime) -> list[Favorite]:
        """Active favorites of any owner created before cutoff, oldest first."""
        ...

    def transaction(self) -> AbstractContextManager[None]:
        """Scope a compound operation.

        Commits on normal exit even if individual record writes inside it
        failed and were handled by the caller. Raises InfrastructureError
        (after rolling back) when the transaction itself cannot begin or commit.
        """
        ...
