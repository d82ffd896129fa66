"""MongoDB implementation of UserRepository."""

import re
import uuid
from datetime import datetime, timezone
from logging import getLogger

from pymongo import ASCENDING, DESCENDING, ReturnDocument
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError, PyMongoError

from adapter.mongodb import USERS_COLLECTION_NAME
from domain.model.errors import StoreError, UserExistsError
from domain.model.user import Role, User, UserQuery

logger = getLogger(__name__)

# Reads that serve the API never carry the hash
_WITHOUT_PASSWORD = {'password_hash': 0}


class MongoUserRepository:
    def __init__(self, db: Database):
        self.collection = db[USERS_COLLECTION_NAME]

    def ensure_indexes(self) -> bool:
        """Create indexes for users collection."""
        from adapter.mongodb.indexes import USERS_INDEXES, ensure_indexes

        return ensure_indexes(self.collection, USERS_INDEXES)

    def _to_domain(self, doc: dict) -> User:
        """Convert MongoDB document to User domain model."""
        return User(
            id=doc['_id'],
            name=doc['name'],
            email=doc['email'],
            created_at=doc['created_at'],
            updated_at=doc['updated_at'],
            role=Role(doc.get('role', Role.USER.value)),
            password_hash=doc.get('password_hash'),
        )

    # ── write operations ─────────────────────────────────────

    def create(self, name: str, email: str, password_hash: str, role: Role = Role.USER) -> User:
        """Insert a new user document and return the User."""
        user_id = uuid.uuid4().hex
        now = datetime.now(timezone.utc)
        user_doc = {
            '_id': user_id,
            'name': name,
            'email': email,
            'password_hash': password_hash,
            'role': role.value,
            'created_at': now,
            'updated_at': now,
        }
        try:
            self.collection.insert_one(user_doc)
        except DuplicateKeyError:
            logger.warning("User creation failed: email already exists", extra={"email": email})
            raise UserExistsError()
        except PyMongoError as e:
            logger.error("Failed to create user", extra={"email": email, "error": str(e)})
            raise StoreError() from e

        logger.info("User created", extra={"userId": user_id, "email": email})
        return self._to_domain(user_doc)

    def update(self, user_id: str, fields: dict) -> User | None:
        """Set fields on a user and return the updated User (without hash)."""
        changes = dict(fields)
        changes['updated_at'] = datetime.now(timezone.utc)
        try:
            doc = self.collection.find_one_and_update(
                {'_id': user_id},
                {'$set': changes},
                projection=_WITHOUT_PASSWORD,
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError as e:
            logger.error("Failed to update user", extra={"userId": user_id, "error": str(e)})
            raise StoreError() from e
        return self._to_domain(doc) if doc else None

    def delete(self, user_id: str) -> bool:
        """Delete a user by ID. Return True if a document was removed."""
        try:
            result = self.collection.delete_one({'_id': user_id})
        except PyMongoError as e:
            logger.error("Failed to delete user", extra={"userId": user_id, "error": str(e)})
            raise StoreError() from e
        return result.deleted_count > 0

    # ── read operations ──────────────────────────────────────

    def get_by_email(self, email: str) -> User | None:
        """Find a user by email, including the password hash for verification."""
        try:
            doc = self.collection.find_one({'email': email})
        except PyMongoError as e:
            logger.error("Failed to get user by email", extra={"email": email, "error": str(e)})
            raise StoreError() from e
        return self._to_domain(doc) if doc else None

    def get_by_id(self, user_id: str) -> User | None:
        """Find a user by ID. The password hash is never loaded."""
        try:
            doc = self.collection.find_one({'_id': user_id}, _WITHOUT_PASSWORD)
        except PyMongoError as e:
            logger.error("Failed to get user by ID", extra={"userId": user_id, "error": str(e)})
            raise StoreError() from e
        return self._to_domain(doc) if doc else None

    def find_many(self, query: UserQuery) -> list[User]:
        """Return one page of users matching role and search filters."""
        mongo_filter: dict = {}
        if query.role:
            mongo_filter['role'] = query.role.value
        if query.search:
            pattern = re.escape(query.search)
            mongo_filter['$or'] = [
                {'name': {'$regex': pattern, '$options': 'i'}},
                {'email': {'$regex': pattern, '$options': 'i'}},
            ]

        direction = DESCENDING if query.descending else ASCENDING
        try:
            cursor = (
                self.collection.find(mongo_filter, _WITHOUT_PASSWORD)
                .sort(query.sort_field, direction)
                .skip(query.skip)
                .limit(query.page_size)
            )
            return [self._to_domain(doc) for doc in cursor]
        except PyMongoError as e:
            logger.error("Failed to list users", extra={"error": str(e)})
            raise StoreError() from e
