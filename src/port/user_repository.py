from typing import Protocol

from domain.model.user import Role, User, UserQuery


class UserRepository(Protocol):
    """Protocol defining the interface for user data access.

    Implementations raise UserExistsError when a write would duplicate an
    email, and StoreError for any other storage failure.
    """
    def create(self, name: str, email: str, password_hash: str, role: Role = Role.USER) -> User:
        """Create a new user and return it."""
        ...

    def get_by_email(self, email: str) -> User | None:
        """Find a user by (normalized) email. Return User or None if not found."""
        ...

    def get_by_id(self, user_id: str) -> User | None:
        """Find a user by ID. Return User or None if not found."""
        ...

    def find_many(self, query: UserQuery) -> list[User]:
        """Return one page of users matching the query."""
        ...

    def update(self, user_id: str, fields: dict) -> User | None:
        """Apply fields to a user. Return the updated User or None if not found."""
        ...

    def delete(self, user_id: str) -> bool:
        """Delete a user. Return True if a record was removed."""
        ...
