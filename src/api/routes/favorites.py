"""Favorites API routes.

Every route is scoped to the authenticated caller. Favorites owned by
someone else answer exactly like missing ones (404).

Endpoints:
- GET /favorites: List active favorites with live definitions
- GET /favorites/search?word=: Look a word up (same envelope as /dictionary/search)
- POST /favorites: Save a word
- PUT /favorites/{id}: Update the note of an active favorite
- DELETE /favorites/{id}: Move a favorite to the trash
- GET /favorites/trashed: List trashed favorites with live definitions
- GET /favorites/{id}: Get one active favorite
- POST /favorites/{id}/restore: Restore a trashed favorite
- DELETE /favorites/{id}/force: Permanently delete a trashed favorite
- POST /favorites/restore-all: Restore every trashed favorite
- DELETE /favorites/force-delete-all: Permanently delete every trashed favorite
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status

from api.dependencies import get_favorite_manager
from api.models import (
    BatchEnvelope,
    FavoriteCreateRequest,
    FavoriteEnvelope,
    FavoriteListEnvelope,
    FavoriteResponse,
    FavoriteUpdateRequest,
    MessageEnvelope,
    UserResponse,
)
from api.routes.dictionary import lookup_response
from api.security import get_current_user_required
from domain.model.errors import InfrastructureError, RecordWriteError
from domain.model.favorite import MAX_WORD_LENGTH
from services.favorite_service import FavoriteLifecycleManager

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/favorites", tags=["favorites"])


def _not_found(detail: str = "Favorite not found or access denied") -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


def _storage_error(e: Exception) -> HTTPException:
    if isinstance(e, InfrastructureError):
        return HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))


# Static paths are registered before /{favorite_id} routes


@router.get("", response_model=FavoriteListEnvelope)
async def list_favorites(
    current_user: UserResponse = Depends(get_current_user_required),
    manager: FavoriteLifecycleManager = Depends(get_favorite_manager),
):
    """List the caller's active favorites, newest first."""
    try:
        favorites = await manager.list_active(current_user.id)
    except (InfrastructureError, RecordWriteError) as e:
        raise _storage_error(e)

    logger.info("Favorites fetched", extra={"count": len(favorites), "user_id": current_user.id})

    return FavoriteListEnvelope(
        message="Favorites fetched successfully",
        data=[FavoriteResponse.from_enriched(f) for f in favorites],
    )


@router.get("/search")
async def search_word(
    word: str = Query(..., min_length=1, max_length=MAX_WORD_LENGTH, description="Word to look up"),
    current_user: UserResponse = Depends(get_current_user_required),
    manager: FavoriteLifecycleManager = Depends(get_favorite_manager),
):
    """Look up a word before saving it."""
    return lookup_response(await manager.search(word))


@router.post("", response_model=FavoriteEnvelope, status_code=status.HTTP_201_CREATED)
async def create_favorite(
    request: FavoriteCreateRequest,
    current_user: UserResponse = Depends(get_current_user_required),
    manager: FavoriteLifecycleManager = Depends(get_favorite_manager),
):
    """Save a word; the favorite is stored even if the definition lookup fails."""
    try:
        enriched = await manager.save(current_user.id, request.word, request.note)
    except (InfrastructureError, RecordWriteError) as e:
        raise _storage_error(e)

    logger.info("Favorite created", extra={
        "favorite_id": enriched.favorite.id,
        "word": enriched.favorite.word,
        "user_id": current_user.id,
    })

    return FavoriteEnvelope(
        message="Favorite created successfully",
        data=FavoriteResponse.from_enriched(enriched),
    )


@router.get("/trashed", response_model=FavoriteListEnvelope)
async def list_trashed(
    current_user: UserResponse = Depends(get_current_user_required),
    manager: FavoriteLifecycleManager = Depends(get_favorite_manager),
):
    """List the caller's trashed favorites, most recently trashed first."""
    try:
        favorites = await manager.list_trashed(current_user.id)
    except (InfrastructureError, RecordWriteError) as e:
        raise _storage_error(e)

    return FavoriteListEnvelope(
        message="Trashed favorites fetched successfully",
        data=[FavoriteResponse.from_enriched(f) for f in favorites],
    )


@router.post("/restore-all", response_model=BatchEnvelope)
async def restore_all(
    current_user: UserResponse = Depends(get_current_user_required),
    manager: FavoriteLifecycleManager = Depends(get_favorite_manager),
):
    """Restore every trashed favorite of the caller."""
    try:
        result = manager.restore_all(current_user.id)
    except InfrastructureError as e:
        raise _storage_error(e)
    return BatchEnvelope(
        message=f"Successfully restored {result.count} favorites",
        count=result.count,
        errors=result.errors,
    )


@router.delete("/force-delete-all", response_model=BatchEnvelope)
async def force_delete_all(
    current_user: UserResponse = Depends(get_current_user_required),
    manager: FavoriteLifecycleManager = Depends(get_favorite_manager),
):
    """Permanently delete every trashed favorite of the caller."""
    try:
        result = manager.purge_all(current_user.id)
    except InfrastructureError as e:
        raise _storage_error(e)
    return BatchEnvelope(
        message=f"Successfully permanently deleted {result.count} favorites",
        count=result.count,
        errors=result.errors,
    )


@router.get("/{favorite_id}", response_model=FavoriteEnvelope)
async def get_favorite(
    favorite_id: str,
    current_user: UserResponse = Depends(get_current_user_required),
    manager: FavoriteLifecycleManager = Depends(get_favorite_manager),
):
    try:
        favorite = manager.get(current_user.id, favorite_id)
    except InfrastructureError as e:
        raise _storage_error(e)
    if favorite is None:
        raise _not_found()

    return FavoriteEnvelope(
        message="Favorite fetched successfully",
        data=FavoriteResponse.from_domain(favorite),
    )


@router.put("/{favorite_id}", response_model=FavoriteEnvelope)
async def update_favorite(
    favorite_id: str,
    request: FavoriteUpdateRequest,
    current_user: UserResponse = Depends(get_current_user_required),
    manager: FavoriteLifecycleManager = Depends(get_favorite_manager),
):
    """Update the note of an active favorite."""
    try:
        favorite = manager.update_note(current_user.id, favorite_id, request.note)
    except (InfrastructureError, RecordWriteError) as e:
        raise _storage_error(e)
    if favorite is None:
        raise _not_found()

    return FavoriteEnvelope(
        message="Favorite updated successfully",
        data=FavoriteResponse.from_domain(favorite),
    )


@router.delete("/{favorite_id}", response_model=MessageEnvelope)
async def delete_favorite(
    favorite_id: str,
    current_user: UserResponse = Depends(get_current_user_required),
    manager: FavoriteLifecycleManager = Depends(get_favorite_manager),
):
    """Move an active favorite to the trash."""
    try:
        trashed = manager.trash(current_user.id, favorite_id)
    except (InfrastructureError, RecordWriteError) as e:
        raise _storage_error(e)
    if not trashed:
        raise _not_found()

    logger.info("Favorite trashed", extra={"favorite_id": favorite_id, "user_id": current_user.id})

    return MessageEnvelope(message="Favorite moved to trash successfully")


@router.post("/{favorite_id}/restore", response_model=FavoriteEnvelope)
async def restore_favorite(
    favorite_id: str,
    current_user: UserResponse = Depends(get_current_user_required),
    manager: FavoriteLifecycleManager = Depends(get_favorite_manager),
):
    """Restore a trashed favorite."""
    try:
        favorite = manager.restore(current_user.id, favorite_id)
    except (InfrastructureError, RecordWriteError) as e:
        raise _storage_error(e)
    if favorite is None:
        raise _not_found("Trashed favorite not found or access denied")

    return FavoriteEnvelope(
        message="Favorite restored successfully",
        data=FavoriteResponse.from_domain(favorite),
    )


@router.delete("/{favorite_id}/force", response_model=MessageEnvelope)
async def force_delete_favorite(
    favorite_id: str,
    current_user: UserResponse = Depends(get_current_user_required),
    manager: FavoriteLifecycleManager = Depends(get_favorite_manager),
):
    """Permanently delete a trashed favorite."""
    try:
        purged = manager.purge(current_user.id, favorite_id)
    except (InfrastructureError, RecordWriteError) as e:
        raise _storage_error(e)
    if not purged:
        raise _not_found("Trashed favorite not found or access denied")

    logger.info("Favorite purged", extra={"favorite_id": favorite_id, "user_id": current_user.id})

    return MessageEnvelope(message="Favorite permanently deleted")
