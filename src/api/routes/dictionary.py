"""Dictionary API routes for word definitions.

Every search is a live call to the Free Dictionary API; results are
normalized into one definition record per word.

Endpoints:
- GET /dictionary/search?q=word: Search for a word's definitions
"""

import logging

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from api.dependencies import get_lookup_service
from api.models import (
    DictionaryErrorResponse,
    DictionarySearchResponse,
    UserResponse,
    WordDefinitionResponse,
)
from api.security import get_current_user_required
from domain.model.favorite import MAX_WORD_LENGTH
from domain.model.word_definition import LookupOutcome, LookupStatus
from services.dictionary_service import DictionaryLookupService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/dictionary", tags=["dictionary"])


def lookup_response(outcome: LookupOutcome) -> JSONResponse:
    """Render a lookup outcome as the search envelope.

    The body's status_code always matches the HTTP status.
    """
    if outcome.status is LookupStatus.FOUND:
        body = DictionarySearchResponse(
            status_code=200,
            message="Definitions found",
            data=[WordDefinitionResponse.from_domain(outcome.definition)],
        )
        return JSONResponse(status_code=200, content=body.model_dump())

    if outcome.status is LookupStatus.NOT_FOUND:
        body = DictionarySearchResponse(status_code=404, message="No definitions found", data=[])
        return JSONResponse(status_code=404, content=body.model_dump())

    body = DictionaryErrorResponse(error=outcome.error or "Unknown upstream error")
    return JSONResponse(status_code=500, content=body.model_dump())


@router.get(
    "/search",
    response_model=DictionarySearchResponse,
    responses={404: {"model": DictionarySearchResponse}, 500: {"model": DictionaryErrorResponse}},
)
async def search(
    q: str = Query(..., min_length=1, max_length=MAX_WORD_LENGTH, description="Word to look up"),
    current_user: UserResponse = Depends(get_current_user_required),
    lookup: DictionaryLookupService = Depends(get_lookup_service),
):
    """Search for a word's definitions."""
    outcome = await lookup.lookup(q)

    logger.info("Dictionary search", extra={
        "word": q,
        "status": outcome.status.value,
        "user_id": current_user.id,
    })

    return lookup_response(outcome)
