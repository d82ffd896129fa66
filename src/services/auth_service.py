"""Auth service: registration and authentication business logic.

Pure business logic with no HTTP dependencies.
Raises domain errors that the API layer maps to HTTP status codes.
"""

import logging
from functools import lru_cache

import bcrypt

from domain.model.errors import InvalidCredentialsError, UserExistsError
from domain.model.user import User
from port.user_repository import UserRepository
from services.validation import MAX_PASSWORD_BYTES, validate_login, validate_registration

logger = logging.getLogger(__name__)

BCRYPT_ROUNDS = 12


def hash_password(password: str) -> str:
    salt = bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    """Check plain against hashed. Input bcrypt cannot hash never matches."""
    encoded = plain.encode("utf-8")
    if len(encoded) > MAX_PASSWORD_BYTES:
        return False
    return bcrypt.checkpw(encoded, hashed.encode("utf-8"))


@lru_cache(maxsize=1)
def _dummy_hash() -> str:
    return hash_password("Dummy-password-1!")


def register(
    repo: UserRepository,
    name: str | None,
    email: str | None,
    password: str | None,
    role: str | None = None,
) -> User:
    """Register a new user.

    Returns the created User domain object.

    Raises:
        ValidationError: missing fields or malformed name/email/password
        InvalidRoleError: role is not one of the known roles
        UserExistsError: email already registered
    """
    name, email, parsed_role = validate_registration(name, email, password, role)

    if repo.get_by_email(email):
        logger.info("Registration rejected: email taken", extra={"email": email})
        raise UserExistsError()

    # A concurrent sign-up can still win the race; the unique index turns
    # that into UserExistsError from repo.create.
    user = repo.create(
        name=name,
        email=email,
        password_hash=hash_password(password),
        role=parsed_role,
    )
    logger.info("User registered", extra={"userId": user.id, "email": email, "role": user.role.value})
    return user


def authenticate(repo: UserRepository, email: str | None, password: str | None) -> User:
    """Authenticate a user by email and password.

    Returns the authenticated User domain object.
    An unknown email and a wrong password fail identically, and both run a
    bcrypt comparison.

    Raises:
        ValidationError: missing or malformed email/password
        InvalidCredentialsError: invalid credentials (deliberately vague)
    """
    email = validate_login(email, password)

    user = repo.get_by_email(email)
    if not user or not user.password_hash:
        verify_password(password, _dummy_hash())
        logger.info("Login failed", extra={"email": email})
        raise InvalidCredentialsError()

    if not verify_password(password, user.password_hash):
        logger.info("Login failed", extra={"email": email})
        raise InvalidCredentialsError()

    logger.info("User logged in", extra={"userId": user.id, "email": email})
    return user
