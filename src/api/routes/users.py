"""User management routes.

- GET    /api/users            list users (any authenticated caller)
- GET    /api/users/{user_id}  self or admin
- PUT    /api/users/{user_id}  self or admin; role changes admin only
- DELETE /api/users/{user_id}  self or admin
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query

from api.dependencies import get_user_repo
from api.models import (
    MessageResponse,
    UpdateUserResponse,
    UserEnvelope,
    UserListResponse,
    UserResponse,
    UserUpdateRequest,
)
from api.security import get_current_user, get_current_user_required
from domain.model.user import User
from port.user_repository import UserRepository
from services import user_service
from services.validation import validate_list_query, validate_update

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("", response_model=UserListResponse)
async def list_users(
    role: Optional[str] = Query(None, description="Exact role filter: user or admin"),
    page: Optional[str] = Query(None, description="Page number, starting at 1"),
    search: Optional[str] = Query(None, description="Substring of name or email"),
    sort: Optional[str] = Query(None, description="Sort field, prefix with '-' for descending"),
    current_user: Optional[User] = Depends(get_current_user),
    repo: UserRepository = Depends(get_user_repo),
):
    """List users. Query parameters are validated before the store is queried."""
    query = validate_list_query(role=role, page=page, search=search, sort=sort)
    users = user_service.list_users(repo, query)

    logger.info("Users listed", extra={
        "actorId": current_user.id if current_user else None,
        "page": query.page,
        "count": len(users),
    })
    return UserListResponse(users=[UserResponse.from_domain(u) for u in users])


@router.get("/{user_id}", response_model=UserEnvelope)
async def get_user(
    user_id: str,
    current_user: User = Depends(get_current_user_required),
    repo: UserRepository = Depends(get_user_repo),
):
    user = user_service.get_user(repo, current_user, user_id)
    return UserEnvelope(user=UserResponse.from_domain(user))


@router.put("/{user_id}", response_model=UpdateUserResponse)
async def update_user(
    user_id: str,
    request: UserUpdateRequest,
    current_user: User = Depends(get_current_user_required),
    repo: UserRepository = Depends(get_user_repo),
):
    """Update name and, for admins, role. Password changes are rejected with 400."""
    changes = request.model_dump(exclude_unset=True)
    update = validate_update(
        name=changes.get("name"),
        role=changes.get("role"),
        password=changes.get("password"),
    )
    user = user_service.update_user(repo, current_user, user_id, update)
    return UpdateUserResponse(message="User updated successfully", user=UserResponse.from_domain(user))


@router.delete("/{user_id}", response_model=MessageResponse)
async def delete_user(
    user_id: str,
    current_user: User = Depends(get_current_user_required),
    repo: UserRepository = Depends(get_user_repo),
):
    message = user_service.delete_user(repo, current_user, user_id)
    return MessageResponse(message=message)
