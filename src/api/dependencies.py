from fastapi import Depends, HTTPException

from adapter.external.free_dictionary import FreeDictionaryAdapter
from adapter.mongodb.connection import get_mongodb_client, DATABASE_NAME
from adapter.mongodb.favorite_repository import MongoFavoriteRepository
from adapter.mongodb.user_repository import MongoUserRepository
from port.dictionary import DictionaryPort
from port.favorite_repository import FavoriteRepository
from port.user_repository import UserRepository
from services.dictionary_service import DictionaryLookupService
from services.favorite_service import FavoriteLifecycleManager


def _get_db():
    """Get MongoDB database, raising 503 if unavailable."""
    client = get_mongodb_client()
    if client is None:
        raise HTTPException(status_code=503, detail="Database unavailable")
    return client[DATABASE_NAME]


def get_user_repo() -> UserRepository:
    return MongoUserRepository(_get_db())


def get_favorite_repo() -> FavoriteRepository:
    return MongoFavoriteRepository(_get_db())


# One instance per process; closed by the app lifespan
_dictionary = FreeDictionaryAdapter()


def get_dictionary_port() -> DictionaryPort:
    return _dictionary


async def close_dictionary() -> None:
    await _dictionary.aclose()


def get_lookup_service(
    dictionary: DictionaryPort = Depends(get_dictionary_port),
) -> DictionaryLookupService:
    return DictionaryLookupService(dictionary)


def get_favorite_manager(
    repo: FavoriteRepository = Depends(get_favorite_repo),
    lookup: DictionaryLookupService = Depends(get_lookup_service),
) -> FavoriteLifecycleManager:
    return FavoriteLifecycleManager(repo, lookup)
