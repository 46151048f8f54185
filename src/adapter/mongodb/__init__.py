"""MongoDB adapters."""

FAVORITES_COLLECTION_NAME = 'favorites'
USERS_COLLECTION_NAME = 'users'
