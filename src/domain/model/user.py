from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class Role(str, Enum):
    """Roles a user account can hold."""
    USER = 'user'
    ADMIN = 'admin'


@dataclass
class User:
    """Domain model representing a user."""
    id: str
    name: str
    email: str
    created_at: datetime
    updated_at: datetime
    role: Role = Role.USER
    password_hash: str | None = None

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    def can_act_on(self, user_id: str) -> bool:
        """Self-or-admin rule: the account itself, or any admin."""
        return self.is_admin or self.id == user_id


@dataclass(frozen=True)
class UserUpdate:
    """Allow-listed changes for an existing user. None means unchanged."""
    name: str | None = None
    role: Role | None = None

    def to_fields(self) -> dict:
        fields = {}
        if self.name is not None:
            fields['name'] = self.name
        if self.role is not None:
            fields['role'] = self.role.value
        return fields


@dataclass(frozen=True)
class UserQuery:
    """Validated listing parameters."""
    role: Role | None = None
    search: str | None = None
    sort_field: str = 'created_at'
    descending: bool = False
    page: int = 1
    page_size: int = 20

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.page_size
