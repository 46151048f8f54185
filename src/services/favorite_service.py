"""Favorite lifecycle service: owner-scoped state transitions over favorites.

State machine:
    ACTIVE  --trash-->   TRASHED
    TRASHED --restore--> ACTIVE
    TRASHED --purge-->   (destroyed)

Anything else (restoring an active favorite, purging a purged one, touching
another owner's favorite) behaves like a missing record: None / False.
"""

import asyncio
import logging
import os

from domain.model.favorite import BatchResult, EnrichedFavorite, Favorite
from domain.model.word_definition import LookupOutcome
from port.favorite_repository import FavoriteRepository
from services.dictionary_service import DictionaryLookupService

logger = logging.getLogger(__name__)

# Upper bound on dictionary lookups in flight while enriching one listing
MAX_CONCURRENT_LOOKUPS = int(os.getenv("MAX_CONCURRENT_LOOKUPS", "8"))


class FavoriteLifecycleManager:
    """Owner-scoped favorites operations with best-effort definition enrichment."""

    def __init__(
        self,
        repo: FavoriteRepository,
        dictionary: DictionaryLookupService,
        max_concurrent_lookups: int = MAX_CONCURRENT_LOOKUPS,
    ):
        self.repo = repo
        self.dictionary = dictionary
        self.max_concurrent_lookups = max(1, max_concurrent_lookups)

    # ── enrichment ───────────────────────────────────────────

    async def _enrich(self, favorites: list[Favorite]) -> list[EnrichedFavorite]:
        """Attach live definitions; a failed lookup leaves word_details empty."""
        semaphore = asyncio.Semaphore(self.max_concurrent_lookups)

        async def bounded_lookup(word: str) -> LookupOutcome:
            async with semaphore:
                return await self.dictionary.lookup(word)

        outcomes = await asyncio.gather(
            *(bounded_lookup(f.word) for f in favorites),
            return_exceptions=True,
        )
        enriched = []
        for favorite, outcome in zip(favorites, outcomes):
            if isinstance(outcome, BaseException):
                logger.warning("Failed to fetch word details for favorite", extra={
                    "favoriteId": favorite.id, "word": favorite.word, "error": str(outcome),
                })
                outcome = None
            details = outcome.definition if outcome is not None and outcome.is_found else None
            enriched.append(EnrichedFavorite(favorite=favorite, word_details=details))
        return enriched

    # ── queries ──────────────────────────────────────────────

    async def search(self, word: str) -> LookupOutcome:
        return await self.dictionary.lookup(word)

    async def list_active(self, owner_id: str) -> list[EnrichedFavorite]:
        return await self._enrich(self.repo.list_active(owner_id))

    async def list_trashed(self, owner_id: str) -> list[EnrichedFavorite]:
        return await self._enrich(self.repo.list_trashed(owner_id))

    def get(self, owner_id: str, favorite_id: str) -> Favorite | None:
        return self.repo.find_active_by_id(owner_id, favorite_id)

    # ── transitions ──────────────────────────────────────────

    async def save(self, owner_id: str, word: str, note: str | None = None) -> EnrichedFavorite:
        """Create an active favorite; the lookup only shapes the response.

        Raises:
            ValidationError: If the word is blank or too long.
        """
        favorite = self.repo.create(owner_id, word, note)
        logger.info("Favorite saved", extra={"favoriteId": favorite.id, "ownerId": owner_id})
        [enriched] = await self._enrich([favorite])
        return enriched

    def update_note(self, owner_id: str, favorite_id: str, note: str | None) -> Favorite | None:
        favorite = self.repo.update_note(owner_id, favorite_id, note)
        if favorite is None:
            logger.info("Favorite not found for update", extra={"favoriteId": favorite_id, "ownerId": owner_id})
        return favorite

    def trash(self, owner_id: str, favorite_id: str) -> bool:
        return self.repo.soft_delete(owner_id, favorite_id)

    def restore(self, owner_id: str, favorite_id: str) -> Favorite | None:
        return self.repo.restore(owner_id, favorite_id)

    def purge(self, owner_id: str, favorite_id: str) -> bool:
        return self.repo.purge(owner_id, favorite_id)

    def restore_all(self, owner_id: str) -> BatchResult:
        """Restore every trashed favorite; failed records stay trashed and are reported.

        Raises:
            InfrastructureError: If the enclosing transaction fails. Nothing is restored then.
        """
        with self.repo.transaction():
            result = self.repo.restore_all(owner_id)
        logger.info("Trashed favorites restored", extra={
            "ownerId": owner_id, "count": result.count, "errorCount": len(result.errors),
        })
        return result

    def purge_all(self, owner_id: str) -> BatchResult:
        with self.repo.transaction():
            result = self.repo.purge_all(owner_id)
        logger.info("Trashed favorites purged", extra={
            "ownerId": owner_id, "count": result.count, "errorCount": len(result.errors),
        })
        return result
