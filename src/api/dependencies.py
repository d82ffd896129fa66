import os
from functools import lru_cache

from fastapi import HTTPException

from adapter.mongodb.connection import get_database
from adapter.mongodb.user_repository import MongoUserRepository
from port.user_repository import UserRepository
from services.token_service import TokenService


def _get_db():
    """Get MongoDB database, raising 503 if unavailable."""
    db = get_database()
    if db is None:
        raise HTTPException(status_code=503, detail="Database unavailable")
    return db


def get_user_repo() -> UserRepository:
    return MongoUserRepository(_get_db())


@lru_cache(maxsize=1)
def get_token_service() -> TokenService:
    """Process-wide TokenService built once from JWT_SECRET_KEY."""
    return TokenService(os.getenv("JWT_SECRET_KEY", ""))
