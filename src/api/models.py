"""Pydantic models for API request/response."""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field

from domain.model.favorite import MAX_WORD_LENGTH, EnrichedFavorite, Favorite
from domain.model.word_definition import WordDefinition


class WordDefinitionResponse(BaseModel):
    """Normalized definitions for one word, keyed by part of speech."""
    word: str
    phonetics: list[str] = Field(default_factory=list, description="Phonetic spellings that have audio")
    partOfSpeech: list[str] = Field(default_factory=list, description="Parts of speech in first-seen order")
    definitions: dict[str, list[str]] = Field(default_factory=dict)
    examples: dict[str, list[str]] = Field(default_factory=dict)
    synonyms: dict[str, list[str]] = Field(default_factory=dict)

    @classmethod
    def from_domain(cls, definition: WordDefinition) -> 'WordDefinitionResponse':
        return cls(**definition.to_dict())


class DictionarySearchResponse(BaseModel):
    """Response envelope for word search."""
    status_code: int
    message: str
    data: list[WordDefinitionResponse] = Field(default_factory=list)


class DictionaryErrorResponse(BaseModel):
    """Response envelope when the upstream dictionary fails."""
    status_code: int = 500
    message: str = "Failed to fetch dictionary data"
    error: str


class FavoriteCreateRequest(BaseModel):
    """Request model for saving a favorite."""
    word: str = Field(..., min_length=1, max_length=MAX_WORD_LENGTH, description="Word to save")
    note: Optional[str] = Field(None, description="Personal note")


class FavoriteUpdateRequest(BaseModel):
    """Request model for updating a favorite's note."""
    note: Optional[str] = Field(None, description="Personal note (null clears it)")


class FavoriteResponse(BaseModel):
    """Response model for a favorite, optionally joined with live definitions."""
    id: str
    word: str
    note: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    deleted_at: Optional[datetime] = None
    word_details: Optional[WordDefinitionResponse] = Field(
        None, description="Live definition data; absent when the lookup failed",
    )

    @classmethod
    def from_domain(
        cls, favorite: Favorite, word_details: WordDefinition | None = None,
    ) -> 'FavoriteResponse':
        return cls(
            id=favorite.id,
            word=favorite.word,
            note=favorite.note,
            created_at=favorite.created_at,
            updated_at=favorite.updated_at,
            deleted_at=favorite.deleted_at,
            word_details=WordDefinitionResponse.from_domain(word_details) if word_details else None,
        )

    @classmethod
    def from_enriched(cls, enriched: EnrichedFavorite) -> 'FavoriteResponse':
        return cls.from_domain(enriched.favorite, enriched.word_details)


class FavoriteEnvelope(BaseModel):
    """Response envelope for single-favorite operations."""
    success: bool = True
    message: str
    data: Optional[FavoriteResponse] = None


class FavoriteListEnvelope(BaseModel):
    """Response envelope for favorite listings."""
    success: bool = True
    message: str
    data: list[FavoriteResponse] = Field(default_factory=list)


class BatchEnvelope(BaseModel):
    """Response envelope for restore-all / purge-all."""
    success: bool = True
    message: str
    count: int
    errors: list[str] = Field(default_factory=list, description="One entry per record left untouched")


class MessageEnvelope(BaseModel):
    success: bool = True
    message: str


class UserResponse(BaseModel):
    """Authenticated user as exposed by the API (never includes the password hash)."""
    id: str = Field(..., description="User ID (MongoDB _id)")
    email: str = Field(..., description="User email")
    name: str = Field(..., description="Display name")
    created_at: datetime = Field(..., description="Account creation timestamp")
    updated_at: datetime = Field(..., description="Last update timestamp")
    last_login: Optional[datetime] = Field(None, description="Last login timestamp")


class AuthResponse(BaseModel):
    """Response model for authentication."""
    token: str
    user: dict[str, Any]
