"""In-memory implementation of UserRepository for testing."""

import uuid
from dataclasses import replace
from datetime import datetime, timezone

from domain.model.errors import UserExistsError
from domain.model.user import Role, User, UserQuery


def _public(user: User) -> User:
    return replace(user, password_hash=None)


class FakeUserRepository:
    def __init__(self):
        self.store: dict[str, User] = {}

    # ── write operations ─────────────────────────────────────

    def create(self, name: str, email: str, password_hash: str, role: Role = Role.USER) -> User:
        if any(u.email == email for u in self.store.values()):
            raise UserExistsError()

        user_id = uuid.uuid4().hex
        now = datetime.now(timezone.utc)

        user = User(
            id=user_id,
            name=name,
            email=email,
            created_at=now,
            updated_at=now,
            role=role,
            password_hash=password_hash,
        )
        self.store[user_id] = user
        return replace(user)

    def update(self, user_id: str, fields: dict) -> User | None:
        user = self.store.get(user_id)
        if not user:
            return None

        if 'name' in fields:
            user.name = fields['name']
        if 'role' in fields:
            user.role = Role(fields['role'])
        user.updated_at = datetime.now(timezone.utc)
        return _public(user)

    def delete(self, user_id: str) -> bool:
        return self.store.pop(user_id, None) is not None

    # ── read operations ──────────────────────────────────────

    def get_by_email(self, email: str) -> User | None:
        for user in self.store.values():
            if user.email == email:
                return replace(user)
        return None

    def get_by_id(self, user_id: str) -> User | None:
        user = self.store.get(user_id)
        return _public(user) if user else None

    def find_many(self, query: UserQuery) -> list[User]:
        users = list(self.store.values())
        if query.role:
            users = [u for u in users if u.role == query.role]
        if query.search:
            needle = query.search.lower()
            users = [u for u in users if needle in u.name.lower() or needle in u.email.lower()]

        def sort_key(user: User):
            value = getattr(user, query.sort_field)
            return value.value if isinstance(value, Role) else value

        users.sort(key=sort_key, reverse=query.descending)
        return [_public(u) for u in users[query.skip:query.skip + query.page_size]]
