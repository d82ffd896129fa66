"""Unit tests for auth_service module."""

import unittest
from unittest.mock import MagicMock, patch

from adapter.fake.user_repository import FakeUserRepository
from domain.model.errors import (
    InvalidCredentialsError,
    InvalidRoleError,
    UserExistsError,
    ValidationError,
)
from domain.model.user import Role
from services import auth_service
from services.auth_service import authenticate, hash_password, register, verify_password

PRODUCTION_ROUNDS = auth_service.BCRYPT_ROUNDS


class AuthServiceTestCase(unittest.TestCase):

    def setUp(self):
        # Minimum bcrypt cost keeps the suite fast
        patcher = patch.object(auth_service, 'BCRYPT_ROUNDS', 4)
        patcher.start()
        self.addCleanup(patcher.stop)
        auth_service._dummy_hash.cache_clear()
        self.repo = FakeUserRepository()


class TestPasswordHashing(AuthServiceTestCase):

    def test_hash_is_salted_and_verifiable(self):
        first = hash_password("Abcdef1!")
        second = hash_password("Abcdef1!")

        self.assertNotEqual(first, second)
        self.assertNotIn("Abcdef1!", first)
        self.assertTrue(verify_password("Abcdef1!", first))
        self.assertFalse(verify_password("Abcdef1?", first))

    def test_production_cost_factor(self):
        self.assertGreaterEqual(PRODUCTION_ROUNDS, 10)

    def test_input_over_72_bytes_never_matches(self):
        hashed = hash_password("Abcdef1!")

        self.assertFalse(verify_password("x" * 80, hashed))
        self.assertFalse(verify_password("\u00e9" * 40, hashed))


class TestRegister(AuthServiceTestCase):

    def test_register_success(self):
        user = register(self.repo, "A", "a@b.com", "Abcdef1!")

        self.assertEqual(user.name, "A")
        self.assertEqual(user.email, "a@b.com")
        self.assertEqual(user.role, Role.USER)
        self.assertIn(user.id, self.repo.store)
        self.assertTrue(verify_password("Abcdef1!", self.repo.store[user.id].password_hash))

    def test_register_with_role(self):
        user = register(self.repo, "Admin", "admin@b.com", "Abcdef1!", role="admin")
        self.assertEqual(user.role, Role.ADMIN)

    def test_register_invalid_role(self):
        with self.assertRaises(InvalidRoleError):
            register(self.repo, "A", "a@b.com", "Abcdef1!", role="owner")
        self.assertEqual(self.repo.store, {})

    def test_duplicate_email_case_insensitive(self):
        register(self.repo, "A", "a@b.com", "Abcdef1!")

        with self.assertRaises(UserExistsError) as ctx:
            register(self.repo, "A2", " A@B.COM ", "Abcdef1!")

        self.assertEqual(ctx.exception.message, "User already exists")
        self.assertEqual(len(self.repo.store), 1)

    def test_weak_password_never_reaches_store(self):
        repo = MagicMock()
        with self.assertRaises(ValidationError):
            register(repo, "A", "a@b.com", "abcdefgh")
        repo.get_by_email.assert_not_called()
        repo.create.assert_not_called()

    def test_missing_fields_never_reach_store(self):
        repo = MagicMock()
        with self.assertRaises(ValidationError) as ctx:
            register(repo, None, None, None)
        self.assertEqual(ctx.exception.message, "Name is required, Email is required, Password is required")
        repo.get_by_email.assert_not_called()

    def test_race_on_create_surfaces_as_user_exists(self):
        repo = MagicMock()
        repo.get_by_email.return_value = None
        repo.create.side_effect = UserExistsError()

        with self.assertRaises(UserExistsError):
            register(repo, "A", "a@b.com", "Abcdef1!")


class TestAuthenticate(AuthServiceTestCase):

    def setUp(self):
        super().setUp()
        self.user = register(self.repo, "A", "a@b.com", "Abcdef1!")

    def test_authenticate_success(self):
        user = authenticate(self.repo, "a@b.com", "Abcdef1!")
        self.assertEqual(user.id, self.user.id)

    def test_authenticate_normalizes_email(self):
        user = authenticate(self.repo, "  A@b.com ", "Abcdef1!")
        self.assertEqual(user.id, self.user.id)

    def test_wrong_password_and_unknown_email_fail_identically(self):
        with self.assertRaises(InvalidCredentialsError) as wrong_password:
            authenticate(self.repo, "a@b.com", "Wrong-pass1!")
        with self.assertRaises(InvalidCredentialsError) as unknown_email:
            authenticate(self.repo, "nobody@b.com", "Abcdef1!")

        self.assertEqual(wrong_password.exception.message, unknown_email.exception.message)
        self.assertEqual(wrong_password.exception.message, "Invalid credentials")

    def test_unknown_email_still_runs_bcrypt(self):
        with patch.object(auth_service, 'verify_password', return_value=False) as mock_verify:
            with self.assertRaises(InvalidCredentialsError):
                authenticate(self.repo, "nobody@b.com", "Abcdef1!")
        mock_verify.assert_called_once()

    def test_malformed_email_is_validation_error(self):
        with self.assertRaises(ValidationError):
            authenticate(self.repo, "a..b@c.com", "Abcdef1!")


if __name__ == '__main__':
    unittest.main()
