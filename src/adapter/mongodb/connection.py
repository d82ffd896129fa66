"""Process-wide MongoDB client for the user store.

The client is created lazily, pinged before reuse, and shared by every
request; pymongo pools connections internally.
"""

import os
import logging
from pymongo import MongoClient
from pymongo.database import Database
from pymongo.errors import ConnectionFailure, PyMongoError

logger = logging.getLogger(__name__)

logging.getLogger('pymongo').setLevel(logging.WARNING)

MONGO_URL = os.getenv('MONGO_URL')
DATABASE_NAME = os.getenv('MONGODB_DATABASE', 'userbase')
USERS_COLLECTION_NAME = 'users'

CLIENT_OPTIONS = {
    'serverSelectionTimeoutMS': 5000,
    'connectTimeoutMS': 5000,
    'socketTimeoutMS': 30000,
    'maxPoolSize': 10,
    'minPoolSize': 0,
    'maxIdleTimeMS': 30000,
    'waitQueueTimeoutMS': 10000,
    'retryWrites': True,
    'retryReads': True,
}

_client_cache: MongoClient | None = None
_connection_attempted = False
_connection_failed = False


def reset_client():
    """Forget the cached client and any earlier failure."""
    global _client_cache, _connection_attempted, _connection_failed
    _client_cache = None
    _connection_attempted = False
    _connection_failed = False


def _cached_client_alive() -> bool:
    global _client_cache
    if _client_cache is None:
        return False
    try:
        _client_cache.admin.command('ping')
        return True
    except PyMongoError:
        _client_cache = None
        logger.debug("[MONGODB] Cached client failed ping, reconnecting")
        return False


def get_mongodb_client() -> MongoClient | None:
    """Return a healthy client, or None when MongoDB is unreachable.

    A missing MONGO_URL or a failed first connection is treated as a
    configuration problem and is not retried until reset_client().
    """
    global _client_cache, _connection_attempted, _connection_failed

    if _cached_client_alive():
        return _client_cache
    if _connection_failed:
        return None
    if not MONGO_URL:
        logger.error("[MONGODB] MONGO_URL not configured")
        _connection_failed = True
        return None

    try:
        client = MongoClient(MONGO_URL, **CLIENT_OPTIONS)
        client.admin.command('ping')
    except (ConnectionFailure, PyMongoError) as e:
        if not _connection_attempted:
            logger.error("[MONGODB] Initial connection failed", extra={"error": str(e)[:200]})
            _connection_failed = True
        return None

    if not _connection_attempted:
        logger.info("[MONGODB] Connected", extra={"database": DATABASE_NAME})
    _connection_attempted = True
    _client_cache = client
    return client


def get_database() -> Database | None:
    """The users database, or None when MongoDB is unreachable."""
    client = get_mongodb_client()
    return client[DATABASE_NAME] if client is not None else None
