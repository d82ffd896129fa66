"""User management business logic: list, get, update, delete.

Every single-user operation follows the same order: reject malformed ids as
not found, apply the self-or-admin rule, then touch the store.
"""

import logging

from domain.model.errors import AccessDeniedError, NotFoundError
from domain.model.user import User, UserQuery, UserUpdate
from port.user_repository import UserRepository
from services.validation import is_valid_user_id

logger = logging.getLogger(__name__)


def _authorize(actor: User, user_id: str) -> None:
    if not is_valid_user_id(user_id):
        raise NotFoundError()
    if not actor.can_act_on(user_id):
        logger.warning("Access denied", extra={"actorId": actor.id, "userId": user_id})
        raise AccessDeniedError()


def list_users(repo: UserRepository, query: UserQuery) -> list[User]:
    return repo.find_many(query)


def get_user(repo: UserRepository, actor: User, user_id: str) -> User:
    """Fetch one user. Raises NotFoundError or AccessDeniedError."""
    _authorize(actor, user_id)
    user = repo.get_by_id(user_id)
    if not user:
        raise NotFoundError()
    return user


def update_user(repo: UserRepository, actor: User, user_id: str, update: UserUpdate) -> User:
    """Apply an allow-listed update. Only admins may change a role."""
    _authorize(actor, user_id)
    if update.role is not None and not actor.is_admin:
        raise AccessDeniedError("Only admins can change roles")

    user = repo.update(user_id, update.to_fields())
    if not user:
        raise NotFoundError()

    logger.info("User updated", extra={
        "actorId": actor.id,
        "userId": user_id,
        "fields": sorted(update.to_fields()),
    })
    return user


def delete_user(repo: UserRepository, actor: User, user_id: str) -> str:
    """Delete a user and return the confirmation message for the actor."""
    _authorize(actor, user_id)
    if not repo.delete(user_id):
        raise NotFoundError()

    logger.info("User deleted", extra={"actorId": actor.id, "userId": user_id})
    if actor.id == user_id:
        return "Your account has been deleted"
    return "User deleted successfully"
