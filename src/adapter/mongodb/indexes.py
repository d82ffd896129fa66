"""MongoDB index management.

Index specs for every collection, plus creation that survives renamed or
re-keyed indexes left behind by earlier deployments.
"""

from logging import getLogger

from pymongo import ASCENDING, DESCENDING
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

logger = getLogger(__name__)

# (keys, name, options)
USERS_INDEXES = [
    ([('email', ASCENDING)], 'idx_users_email', {'unique': True}),
    ([('created_at', DESCENDING)], 'idx_users_created_at', {}),
    ([('role', ASCENDING)], 'idx_users_role', {}),
]


def create_index_safe(collection: Collection, keys: list, name: str, **kwargs) -> bool:
    """Create an index, replacing any index that conflicts with it.

    A conflict is either the same name with a different key spec, or the
    same key spec under a different name.
    """
    try:
        collection.create_index(keys, name=name, **kwargs)
        return True
    except PyMongoError as e:
        if "already exists" not in str(e) and "Conflict" not in str(e):
            raise

    wanted = dict(keys)
    for existing_name, info in collection.index_information().items():
        if existing_name == '_id_':
            continue
        same_name = existing_name == name
        same_keys = dict(info.get('key', [])) == wanted
        if same_name != same_keys:
            logger.warning("Dropping conflicting index", extra={"index": existing_name})
            collection.drop_index(existing_name)
            collection.create_index(keys, name=name, **kwargs)
            logger.info("Recreated index", extra={"index": name})
            return True

    logger.error("Failed to resolve index conflict", extra={"index": name})
    return False


def ensure_indexes(collection: Collection, specs: list) -> bool:
    """Create every index in specs on collection. Return False on any failure."""
    try:
        return all(create_index_safe(collection, keys, name, **options) for keys, name, options in specs)
    except PyMongoError as e:
        logger.error("Failed to create indexes", extra={"collection": collection.name, "error": str(e)})
        return False


def ensure_all_indexes(db) -> bool:
    """Ensure indexes for all collections. Called at app startup."""
    from adapter.mongodb.user_repository import MongoUserRepository

    return MongoUserRepository(db).ensure_indexes()
