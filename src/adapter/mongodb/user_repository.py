"""MongoDB implementation of UserRepository.

Users are keyed by an integer `_id` drawn from a per-collection sequence in
the counters collection. Email uniqueness is enforced by a unique index.
"""

from datetime import datetime, timezone
from logging import getLogger
from bson.errors import InvalidDocument
from pymongo import ReturnDocument
from pymongo.database import Database
from pymongo.errors import PyMongoError
from adapter.mongodb.connection import COUNTERS_COLLECTION_NAME, USERS_COLLECTION_NAME
from domain.model.errors import BackendError
from domain.model.user import User, UserFields

logger = getLogger(__name__)

# bson raises OverflowError for ints outside int64, outside the PyMongoError tree
STORE_ERRORS = (PyMongoError, InvalidDocument, OverflowError)


class MongoUserRepository:
    def __init__(self, db: Database):
        self.collection = db[USERS_COLLECTION_NAME]
        self.counters = db[COUNTERS_COLLECTION_NAME]

    def ensure_indexes(self) -> bool:
        """Create indexes for users collection."""
        from adapter.mongodb.indexes import create_index_safe

        try:
            create_index_safe(self.collection, [('email', 1)], 'idx_users_email', unique=True)
            create_index_safe(self.collection, [('created_at', -1)], 'idx_users_created_at')
            return True
        except PyMongoError as e:
            logger.error("Failed to create users indexes", extra={"error": str(e)})
            return False

    def _to_domain(self, doc: dict) -> User:
        return User(
            id=doc['_id'],
            first_name=doc['first_name'],
            last_name=doc['last_name'],
            email=doc['email'],
            password=doc['password'],
            created_at=doc['created_at'],
        )

    @staticmethod
    def _to_document(fields: UserFields) -> dict:
        return {
            'first_name': fields.first_name,
            'last_name': fields.last_name,
            'email': fields.email,
            'password': fields.password,
        }

    def _next_id(self) -> int:
        counter = self.counters.find_one_and_update(
            {'_id': USERS_COLLECTION_NAME},
            {'$inc': {'seq': 1}},
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )
        return counter['seq']

    # ── write operations ─────────────────────────────────────

    def create(self, fields: UserFields) -> User:
        try:
            user_doc = {
                '_id': self._next_id(),
                **self._to_document(fields),
                'created_at': datetime.now(timezone.utc),
            }
            self.collection.insert_one(user_doc)
        except STORE_ERRORS as e:
            logger.error("Failed to create user", extra={"email": fields.email, "error": str(e)})
            raise BackendError(str(e)) from e

        logger.info("User created", extra={"userId": user_doc['_id'], "email": fields.email})
        return self._to_domain(user_doc)

    def update(self, user_id: int, fields: UserFields) -> User:
        try:
            doc = self.collection.find_one_and_update(
                {'_id': user_id},
                {'$set': self._to_document(fields)},
                return_document=ReturnDocument.AFTER,
            )
        except STORE_ERRORS as e:
            logger.error("Failed to update user", extra={"userId": user_id, "error": str(e)})
            raise BackendError(str(e)) from e

        if doc is None:
            raise BackendError("Record to update not found.")
        return self._to_domain(doc)

    def delete(self, user_id: int) -> None:
        try:
            result = self.collection.delete_one({'_id': user_id})
        except STORE_ERRORS as e:
            logger.error("Failed to delete user", extra={"userId": user_id, "error": str(e)})
            raise BackendError(str(e)) from e

        if result.deleted_count == 0:
            raise BackendError("Record to delete does not exist.")

    # ── read operations ──────────────────────────────────────

    def find_many(self) -> list[User]:
        try:
            return [self._to_domain(doc) for doc in self.collection.find({}).sort('_id', 1)]
        except STORE_ERRORS as e:
            logger.error("Failed to list users", extra={"error": str(e)})
            raise BackendError(str(e)) from e

    def find_by_id(self, user_id: int) -> User | None:
        return self._find_one({'_id': user_id})

    def find_by_email(self, email: str) -> User | None:
        return self._find_one({'email': email})

    def _find_one(self, query: dict) -> User | None:
        try:
            doc = self.collection.find_one(query)
        except STORE_ERRORS as e:
            logger.error("Failed to get user", extra={"query": query, "error": str(e)})
            raise BackendError(str(e)) from e
        return self._to_domain(doc) if doc else None
