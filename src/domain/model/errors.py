"""Domain-level exceptions.

Services raise these errors to express business rule violations.
The API layer maps each kind to an HTTP status code and a ``{"message"}`` body.
"""


class DomainError(Exception):
    """Base class for all domain errors."""

    default_message = "Server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(DomainError):
    """Input violates a business validation rule."""

    default_message = "Invalid input"

    @classmethod
    def from_messages(cls, messages: list[str]) -> "ValidationError":
        """Join every collected message, dropping repeats but keeping order."""
        return cls(", ".join(dict.fromkeys(messages)))


class InvalidRoleError(ValidationError):
    """Role is not one of the known roles."""

    default_message = "Invalid role specified"


class InvalidQueryError(ValidationError):
    """Listing query parameter is malformed or unsafe."""

    default_message = "Invalid input"


class DuplicateError(DomainError):
    """Entity with the same unique key already exists."""


class UserExistsError(DuplicateError):
    """An account with this email is already registered."""

    default_message = "User already exists"


class AuthenticationError(DomainError):
    """Caller could not be authenticated."""


class InvalidCredentialsError(AuthenticationError):
    """Unknown email or wrong password. Same message for both."""

    default_message = "Invalid credentials"


class NoTokenError(AuthenticationError):
    """Request carries no bearer token."""

    default_message = "Not authorized, no token provided"


class TokenInvalidError(AuthenticationError):
    """Bearer token has a bad signature, bad structure or is expired."""

    default_message = "Invalid token, authentication failed"


class PermissionDeniedError(DomainError):
    """Caller lacks permission for the requested action."""

    default_message = "Access denied"


class AccessDeniedError(PermissionDeniedError):
    """Actor is neither the resource owner nor an admin."""


class NotFoundError(DomainError):
    """Requested entity does not exist."""

    default_message = "User not found"


class StoreError(DomainError):
    """Credential store failed unexpectedly."""
