"""Favorite domain models."""

import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum

from domain.model.errors import ValidationError
from domain.model.word_definition import WordDefinition

MAX_WORD_LENGTH = 255


class FavoriteState(str, Enum):
    ACTIVE = 'active'
    TRASHED = 'trashed'


@dataclass
class Favorite:
    """A word saved by a user, with an optional personal note.

    Lifecycle: ACTIVE (deleted_at is None) -> TRASHED (deleted_at set)
    -> ACTIVE again on restore, or destroyed on purge.
    """

    id: str
    owner_id: str
    word: str
    note: str | None
    created_at: datetime
    updated_at: datetime
    deleted_at: datetime | None = None

    @staticmethod
    def create(owner_id: str, word: str, note: str | None = None) -> 'Favorite':
        """Factory method: validates the word and stamps timestamps."""
        word = (word or '').strip()
        if not word:
            raise ValidationError("The word field is required.", field="word")
        if len(word) > MAX_WORD_LENGTH:
            raise ValidationError(f"The word field must not be greater than {MAX_WORD_LENGTH} characters.", field="word")
        now = datetime.now(timezone.utc)
        return Favorite(
            id=str(uuid.uuid4()),
            owner_id=owner_id,
            word=word,
            note=note,
            created_at=now,
            updated_at=now,
        )

    @property
    def state(self) -> FavoriteState:
        return FavoriteState.ACTIVE if self.deleted_at is None else FavoriteState.TRASHED

    @property
    def is_trashed(self) -> bool:
        return self.deleted_at is not None

    def is_owned_by(self, owner_id: str) -> bool:
        return self.owner_id == owner_id

    def age_days(self, now: datetime | None = None) -> int:
        """Whole days elapsed since creation."""
        now = now or datetime.now(timezone.utc)
        return (now - self.created_at).days

    def copy(self) -> 'Favorite':
        return replace(self)


@dataclass
class EnrichedFavorite:
    """A favorite joined with live definition data for display.

    word_details is response shaping only and is never persisted.
    """
    favorite: Favorite
    word_details: WordDefinition | None = None



@dataclass
class BatchResult:
    """Outcome of a restore-all / purge-all run.

    Each record is applied on its own; errors holds one entry per record
    that failed and was left untouched.
    """
    count: int = 0
    errors: list[str] = field(default_factory=list)
