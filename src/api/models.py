"""Pydantic models for API request/response."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from domain.model.user import Role, User


class RegisterRequest(BaseModel):
    """Request model for sign-up. Presence and format are checked by the auth service."""
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    role: Optional[str] = None


class LoginRequest(BaseModel):
    """Request model for sign-in."""
    email: Optional[str] = None
    password: Optional[str] = None


class UserUpdateRequest(BaseModel):
    """Allow-listed update fields. Anything else, `_id` included, is dropped.

    `password` is accepted only so that it can be rejected explicitly.
    """
    model_config = ConfigDict(extra="ignore")

    name: Optional[str] = None
    role: Optional[str] = None
    password: Optional[str] = None


class UserResponse(BaseModel):
    """Public view of a user. Never includes the password hash."""
    id: str = Field(..., description="User ID")
    name: str
    email: str
    role: Role
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(cls, user: User) -> "UserResponse":
        return cls(
            id=user.id,
            name=user.name,
            email=user.email,
            role=user.role,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )


class MessageResponse(BaseModel):
    message: str


class RegisterResponse(BaseModel):
    message: str
    userId: str


class LoginResponse(BaseModel):
    message: str
    token: str
    user: UserResponse


class UserEnvelope(BaseModel):
    user: UserResponse


class UpdateUserResponse(BaseModel):
    message: str
    user: UserResponse


class UserListResponse(BaseModel):
    users: list[UserResponse]
