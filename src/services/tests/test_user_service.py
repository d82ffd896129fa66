"""Unit tests for user_service: self-or-admin rules and not-found handling."""

import unittest
from unittest.mock import MagicMock

from adapter.fake.user_repository import FakeUserRepository
from domain.model.errors import AccessDeniedError, NotFoundError
from domain.model.user import Role, UserUpdate
from services.user_service import delete_user, get_user, list_users, update_user
from services.validation import validate_list_query

MISSING_ID = "f" * 32


class UserServiceTestCase(unittest.TestCase):

    def setUp(self):
        self.repo = FakeUserRepository()
        self.alice = self.repo.create("Alice", "alice@example.com", "hash-a")
        self.bob = self.repo.create("Bob", "bob@example.com", "hash-b")
        self.admin = self.repo.create("Admin", "admin@example.com", "hash-c", role=Role.ADMIN)


class TestGetUser(UserServiceTestCase):

    def test_self_access(self):
        user = get_user(self.repo, self.alice, self.alice.id)
        self.assertEqual(user.email, "alice@example.com")
        self.assertIsNone(user.password_hash)

    def test_admin_access(self):
        user = get_user(self.repo, self.admin, self.bob.id)
        self.assertEqual(user.id, self.bob.id)

    def test_other_user_denied(self):
        with self.assertRaises(AccessDeniedError):
            get_user(self.repo, self.alice, self.bob.id)

    def test_missing_user(self):
        with self.assertRaises(NotFoundError):
            get_user(self.repo, self.admin, MISSING_ID)

    def test_malformed_id_is_not_found_and_skips_store(self):
        repo = MagicMock()
        for user_id in ["<script>alert(1)</script>", "123", "x" * 100]:
            with self.subTest(user_id=user_id):
                with self.assertRaises(NotFoundError):
                    get_user(repo, self.admin, user_id)
        repo.get_by_id.assert_not_called()


class TestUpdateUser(UserServiceTestCase):

    def test_self_rename(self):
        user = update_user(self.repo, self.alice, self.alice.id, UserUpdate(name="Alicia"))
        self.assertEqual(user.name, "Alicia")
        self.assertEqual(self.repo.store[self.alice.id].name, "Alicia")

    def test_non_admin_cannot_change_role(self):
        with self.assertRaises(AccessDeniedError) as ctx:
            update_user(self.repo, self.alice, self.alice.id, UserUpdate(role=Role.ADMIN))
        self.assertEqual(ctx.exception.message, "Only admins can change roles")
        self.assertEqual(self.repo.store[self.alice.id].role, Role.USER)

    def test_admin_promotes_user(self):
        user = update_user(self.repo, self.admin, self.bob.id, UserUpdate(role=Role.ADMIN))
        self.assertEqual(user.role, Role.ADMIN)

    def test_other_user_denied(self):
        with self.assertRaises(AccessDeniedError):
            update_user(self.repo, self.alice, self.bob.id, UserUpdate(name="Hacked"))
        self.assertEqual(self.repo.store[self.bob.id].name, "Bob")

    def test_missing_user(self):
        with self.assertRaises(NotFoundError):
            update_user(self.repo, self.admin, MISSING_ID, UserUpdate(name="Ghost"))

    def test_update_keeps_password_hash(self):
        update_user(self.repo, self.alice, self.alice.id, UserUpdate(name="Alicia"))
        self.assertEqual(self.repo.store[self.alice.id].password_hash, "hash-a")


class TestDeleteUser(UserServiceTestCase):

    def test_self_delete_message(self):
        message = delete_user(self.repo, self.alice, self.alice.id)
        self.assertEqual(message, "Your account has been deleted")
        self.assertNotIn(self.alice.id, self.repo.store)

    def test_admin_delete_message(self):
        message = delete_user(self.repo, self.admin, self.bob.id)
        self.assertEqual(message, "User deleted successfully")

    def test_other_user_denied(self):
        with self.assertRaises(AccessDeniedError):
            delete_user(self.repo, self.alice, self.bob.id)
        self.assertIn(self.bob.id, self.repo.store)

    def test_deleting_twice_is_not_found_both_times(self):
        for _ in range(2):
            with self.assertRaises(NotFoundError):
                delete_user(self.repo, self.admin, MISSING_ID)


class TestListUsers(UserServiceTestCase):

    def test_role_filter(self):
        users = list_users(self.repo, validate_list_query(role="admin"))
        self.assertEqual([u.id for u in users], [self.admin.id])

    def test_search_and_sort(self):
        users = list_users(self.repo, validate_list_query(search="EXAMPLE", sort="-name"))
        self.assertEqual([u.name for u in users], ["Bob", "Alice", "Admin"])
        self.assertTrue(all(u.password_hash is None for u in users))


if __name__ == '__main__':
    unittest.main()
