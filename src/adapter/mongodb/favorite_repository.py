"""MongoDB implementation of FavoriteRepository."""

import os
from contextlib import contextmanager
from datetime import datetime, timezone
from logging import getLogger
from typing import Any, Callable, Iterator

from pymongo import ReturnDocument
from pymongo.client_session import ClientSession
from pymongo.database import Database
from pymongo.errors import ConnectionFailure, PyMongoError

from adapter.mongodb import FAVORITES_COLLECTION_NAME
from domain.model.errors import InfrastructureError, RecordWriteError
from domain.model.favorite import BatchResult, Favorite

logger = getLogger(__name__)

# Multi-document transactions need a replica set; standalone servers must turn this off
USE_TRANSACTIONS = os.getenv('MONGODB_USE_TRANSACTIONS', 'true').lower() not in ('0', 'false', 'no')

_ACTIVE = {'deleted_at': None}
_TRASHED = {'deleted_at': {'$ne': None}}


class MongoFavoriteRepository:
    def __init__(self, db: Database, use_transactions: bool = USE_TRANSACTIONS):
        self.collection = db[FAVORITES_COLLECTION_NAME]
        self.use_transactions = use_transactions
        self._session: ClientSession | None = None
        # writes that succeeded in the open transaction, in order
        self._journal: list[Callable[[], Any]] | None = None

    # ── indexes ──────────────────────────────────────────────

    def ensure_indexes(self) -> bool:
        """Create indexes for favorites collection."""
        from adapter.mongodb.indexes import create_index_safe

        try:
            create_index_safe(
                self.collection, [('owner_id', 1), ('deleted_at', 1), ('created_at', -1)],
                'idx_fav_owner_state_created',
            )
            create_index_safe(self.collection, [('owner_id', 1), ('deleted_at', -1)], 'idx_fav_owner_deleted')
            create_index_safe(self.collection, [('created_at', 1)], 'idx_fav_created_at')
            return True
        except Exception as e:
            logger.error("Failed to create favorites indexes", extra={"error": str(e)})
            return False

    # ── mapping ──────────────────────────────────────────────

    def _to_domain(self, doc: dict) -> Favorite:
        return Favorite(
            id=doc['_id'],
            owner_id=doc['owner_id'],
            word=doc['word'],
            note=doc.get('note'),
            created_at=doc['created_at'],
            updated_at=doc['updated_at'],
            deleted_at=doc.get('deleted_at'),
        )

    def _infra_failed(self, action: str, e: PyMongoError, **context) -> InfrastructureError:
        logger.error(f"Failed to {action}", extra={**context, "error": str(e)})
        return InfrastructureError(f"Failed to {action}: {e}")

    def _write_failed(self, action: str, favorite_id: str, e: PyMongoError) -> Exception:
        logger.error(f"Failed to {action}", extra={"favoriteId": favorite_id, "error": str(e)})
        if isinstance(e, ConnectionFailure):
            return InfrastructureError(f"Failed to {action}: {e}")
        return RecordWriteError(favorite_id, str(e))

    # ── write operations ─────────────────────────────────────

    def _write(self, action: str, favorite_id: str, op: Callable[[], Any]) -> Any:
        """Run one single-record write.

        `op` reads self._session when called so it can be replayed after a
        transaction restart.
        """
        try:
            result = op()
        except PyMongoError as e:
            error = self._write_failed(action, favorite_id, e)
            if self._session is not None and isinstance(error, RecordWriteError):
                self._restart_transaction()
            raise error from e
        if self._journal is not None:
            self._journal.append(op)
        return result

    def create(self, owner_id: str, word: str, note: str | None = None) -> Favorite:
        favorite = Favorite.create(owner_id=owner_id, word=word, note=note)
        doc = {
            '_id': favorite.id,
            'owner_id': favorite.owner_id,
            'word': favorite.word,
            'note': favorite.note,
            'created_at': favorite.created_at,
            'updated_at': favorite.updated_at,
            'deleted_at': None,
        }
        self._write(
            "create favorite", favorite.id,
            lambda: self.collection.insert_one(doc, session=self._session),
        )
        logger.info("Favorite created", extra={"favoriteId": favorite.id, "ownerId": owner_id})
        return favorite

    def update_note(self, owner_id: str, favorite_id: str, note: str | None) -> Favorite | None:
        query = {'_id': favorite_id, 'owner_id': owner_id, **_ACTIVE}
        update = {'$set': {'note': note, 'updated_at': datetime.now(timezone.utc)}}
        doc = self._write(
            "update favorite note", favorite_id,
            lambda: self.collection.find_one_and_update(
                query, update, return_document=ReturnDocument.AFTER, session=self._session,
            ),
        )
        return self._to_domain(doc) if doc else None

    def soft_delete(self, owner_id: str, favorite_id: str) -> bool:
        now = datetime.now(timezone.utc)
        query = {'_id': favorite_id, 'owner_id': owner_id, **_ACTIVE}
        update = {'$set': {'deleted_at': now, 'updated_at': now}}
        result = self._write(
            "trash favorite", favorite_id,
            lambda: self.collection.update_one(query, update, session=self._session),
        )
        if result.modified_count == 0:
            return False
        logger.info("Favorite trashed", extra={"favoriteId": favorite_id, "ownerId": owner_id})
        return True

    def restore(self, owner_id: str, favorite_id: str) -> Favorite | None:
        query = {'_id': favorite_id, 'owner_id': owner_id, **_TRASHED}
        update = {'$set': {'deleted_at': None, 'updated_at': datetime.now(timezone.utc)}}
        doc = self._write(
            "restore favorite", favorite_id,
            lambda: self.collection.find_one_and_update(
                query, update, return_document=ReturnDocument.AFTER, session=self._session,
            ),
        )
        if not doc:
            return None
        logger.info("Favorite restored", extra={"favoriteId": favorite_id, "ownerId": owner_id})
        return self._to_domain(doc)

    def purge(self, owner_id: str, favorite_id: str) -> bool:
        query = {'_id': favorite_id, 'owner_id': owner_id, **_TRASHED}
        result = self._write(
            "purge favorite", favorite_id,
            lambda: self.collection.delete_one(query, session=self._session),
        )
        if result.deleted_count == 0:
            return False
        logger.info("Favorite purged", extra={"favoriteId": favorite_id, "ownerId": owner_id})
        return True

    def restore_all(self, owner_id: str) -> BatchResult:
        result = BatchResult()
        for favorite in self.list_trashed(owner_id):
            try:
                if self.restore(owner_id, favorite.id):
                    result.count += 1
            except RecordWriteError as e:
                result.errors.append(f"Failed to restore favorite ID {favorite.id}: {e.reason}")
        logger.info("Favorites restored", extra={
            "ownerId": owner_id, "count": result.count, "errorCount": len(result.errors),
        })
        return result

    def purge_all(self, owner_id: str) -> BatchResult:
        result = BatchResult()
        for favorite in self.list_trashed(owner_id):
            try:
                if self.purge(owner_id, favorite.id):
                    result.count += 1
            except RecordWriteError as e:
                result.errors.append(f"Failed to purge favorite ID {favorite.id}: {e.reason}")
        logger.info("Favorites purged", extra={
            "ownerId": owner_id, "count": result.count, "errorCount": len(result.errors),
        })
        return result

    # ── read operations ──────────────────────────────────────

    def list_active(self, owner_id: str) -> list[Favorite]:
        try:
            cursor = self.collection.find(
                {'owner_id': owner_id, **_ACTIVE}, session=self._session,
            ).sort('created_at', -1)
            return [self._to_domain(doc) for doc in cursor]
        except PyMongoError as e:
            raise self._infra_failed("list favorites", e, ownerId=owner_id) from e

    def find_active_by_id(self, owner_id: str, favorite_id: str) -> Favorite | None:
        try:
            doc = self.collection.find_one(
                {'_id': favorite_id, 'owner_id': owner_id, **_ACTIVE}, session=self._session,
            )
        except PyMongoError as e:
            raise self._infra_failed("get favorite", e, favoriteId=favorite_id) from e
        return self._to_domain(doc) if doc else None

    def list_trashed(self, owner_id: str) -> list[Favorite]:
        try:
            cursor = self.collection.find(
                {'owner_id': owner_id, **_TRASHED}, session=self._session,
            ).sort('deleted_at', -1)
            return [self._to_domain(doc) for doc in cursor]
        except PyMongoError as e:
            raise self._infra_failed("list trashed favorites", e, ownerId=owner_id) from e

    def find_older_than(self, cutoff: datetime) -> list[Favorite]:
        try:
            cursor = self.collection.find(
                {'created_at': {'$lt': cutoff}, **_ACTIVE}, session=self._session,
            ).sort('created_at', 1)
            return [self._to_domain(doc) for doc in cursor]
        except PyMongoError as e:
            raise self._infra_failed("find old favorites", e, cutoff=cutoff.isoformat()) from e

    # ── transactions ─────────────────────────────────────────

    @contextmanager
    def transaction(self) -> Iterator[None]:
        """Run the enclosed writes in one multi-document transaction.

        Writes made through this repository inside the block share the session.
        The server aborts a transaction as soon as one write in it fails, so a
        RecordWriteError raised inside the block first restarts the transaction
        and replays the writes that already succeeded. Callers can catch it and
        carry on with the next record. Only session, replay or commit failures
        (and lost connections) abort the whole block as InfrastructureError.
        """
        if not self.use_transactions:
            yield
            return

        client = self.collection.database.client
        try:
            session = client.start_session()
        except PyMongoError as e:
            logger.error("Failed to start session", extra={"error": str(e)})
            raise InfrastructureError(f"Failed to start session: {e}") from e
        try:
            session.start_transaction()
        except PyMongoError as e:
            session.end_session()
            logger.error("Failed to start transaction", extra={"error": str(e)})
            raise InfrastructureError(f"Failed to start transaction: {e}") from e

        try:
            self._session = session
            self._journal = []
            try:
                yield
            except BaseException:
                self._abort(session)
                raise
            try:
                session.commit_transaction()
            except PyMongoError as e:
                logger.error("Transaction commit failed", extra={"error": str(e)})
                raise InfrastructureError(f"Transaction commit failed: {e}") from e
        finally:
            self._session = None
            self._journal = None
            session.end_session()

    def _restart_transaction(self) -> None:
        """Abort the failed transaction and replay the journaled writes in a new one."""
        session = self._session
        self._abort(session)
        logger.info("Restarting transaction after a record failure", extra={"replayedWrites": len(self._journal)})
        try:
            session.start_transaction()
            for op in self._journal:
                op()
        except PyMongoError as e:
            logger.error("Transaction replay failed", extra={"error": str(e)})
            raise InfrastructureError(f"Transaction replay failed: {e}") from e

    def _abort(self, session: ClientSession) -> None:
        try:
            session.abort_transaction()
        except PyMongoError as e:
            # keep the original error
            logger.warning("Transaction abort failed", extra={"error": str(e)})
