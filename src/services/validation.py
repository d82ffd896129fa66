"""Input validation for auth and user management.

Pure functions over untrusted input. Nothing here touches the store; every
check runs before a repository call is made.
"""

import math
import re

from domain.model.errors import InvalidQueryError, InvalidRoleError, ValidationError
from domain.model.user import Role, UserQuery, UserUpdate

MAX_NAME_LENGTH = 255
MAX_EMAIL_LENGTH = 255
MIN_PASSWORD_LENGTH = 8
# bcrypt only accepts up to 72 bytes of input
MAX_PASSWORD_BYTES = 72
PASSWORD_SYMBOLS = "@$!%*?&"
PAGE_SIZE = 20
# skip = (page - 1) * PAGE_SIZE must fit in a BSON int64
MAX_PAGE = (2 ** 63 - 1) // PAGE_SIZE
SORTABLE_FIELDS = ("name", "email", "role", "created_at")

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
EMOJI_RE = re.compile(
    "[\U0001F300-\U0001FAFF\U0001F1E6-\U0001F1FF\u2600-\u27BF]"
)
PASSWORD_RE = re.compile(
    r"^(?=.*[a-z])(?=.*[A-Z])(?=.*[0-9])(?=.*[@$!%*?&])[A-Za-z0-9@$!%*?&]{8,}$"
)
SCRIPT_TAG_RE = re.compile(r"<script>|</script>", re.IGNORECASE)
USER_ID_RE = re.compile(r"^[0-9a-f]{32}$")
UNSAFE_SEARCH_RE = re.compile(r"[<>;]")

INVALID_EMAIL = "Please enter a valid email address"
EMAIL_TOO_LONG = "Email must be at most 255 characters long"
NAME_TOO_LONG = "Name must be at most 255 characters long"
PASSWORD_TOO_SHORT = "Password must be at least 8 characters long"
PASSWORD_TOO_LONG = "Password must be at most 72 bytes long"
PASSWORD_TOO_WEAK = (
    "Password must have at least one uppercase letter, one lowercase letter, "
    "one number, and one special character."
)


def normalize_email(email: str) -> str:
    """Trim and case-fold an email the way it is stored."""
    return email.strip().lower()


def _email_errors(email: str) -> list[str]:
    errors = []
    trimmed = email.strip()
    if not EMAIL_RE.match(trimmed):
        errors.append(INVALID_EMAIL)
    if len(trimmed) > MAX_EMAIL_LENGTH:
        errors.append(EMAIL_TOO_LONG)
    if EMOJI_RE.search(email):
        errors.append(INVALID_EMAIL)
    if ".." in email:
        errors.append(INVALID_EMAIL)
    return errors


def _name_errors(name: str) -> list[str]:
    trimmed = name.strip()
    if not trimmed:
        return ["Name is required"]
    if len(trimmed) > MAX_NAME_LENGTH:
        return [NAME_TOO_LONG]
    return []


def password_errors(password: str) -> list[str]:
    errors = []
    if len(password) < MIN_PASSWORD_LENGTH:
        errors.append(PASSWORD_TOO_SHORT)
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        errors.append(PASSWORD_TOO_LONG)
    if not PASSWORD_RE.match(password):
        errors.append(PASSWORD_TOO_WEAK)
    return errors


def parse_role(role: str | None, default: Role | None = None) -> Role | None:
    """Map a raw role string to Role. Raises InvalidRoleError for unknown roles."""
    if role is None:
        return default
    try:
        return Role(role)
    except ValueError:
        raise InvalidRoleError()


def validate_registration(
    name: str | None,
    email: str | None,
    password: str | None,
    role: str | None = None,
) -> tuple[str, str, Role]:
    """Validate a sign-up payload.

    Returns:
        (name, email, role) with name trimmed and email normalized

    Raises:
        ValidationError: listing every missing field, or every format problem
        InvalidRoleError: role is not one of the known roles
    """
    missing = []
    if not name:
        missing.append("Name is required")
    if not email:
        missing.append("Email is required")
    if not password:
        missing.append("Password is required")
    if missing:
        raise ValidationError.from_messages(missing)

    parsed_role = parse_role(role, default=Role.USER)

    errors = _name_errors(name) + _email_errors(email) + password_errors(password)
    if errors:
        raise ValidationError.from_messages(errors)

    return name.strip(), normalize_email(email), parsed_role


def validate_login(email: str | None, password: str | None) -> str:
    """Validate a sign-in payload and return the normalized email."""
    errors = []
    if not email:
        errors.append("Email is required")
    if not password:
        errors.append("Password is required")
    if email:
        errors.extend(_email_errors(email))
    if errors:
        raise ValidationError.from_messages(errors)
    return normalize_email(email)


def validate_update(
    name: str | None = None,
    role: str | None = None,
    password: str | None = None,
) -> UserUpdate:
    """Build an allow-listed update. Credential changes are not accepted here."""
    if password is not None:
        raise ValidationError("Password update not allowed")
    if name is None and role is None:
        raise ValidationError("No updatable fields provided")

    if name is not None:
        errors = _name_errors(name)
        if errors:
            raise ValidationError.from_messages(errors)
        name = name.strip()

    return UserUpdate(name=name, role=parse_role(role))


def _parse_page(page: str) -> int:
    """Any finite number from 1 to MAX_PAGE, floored: "2", "1.5" and "1e2" all parse."""
    try:
        number = int(page)
    except ValueError:
        try:
            value = float(page)
        except ValueError:
            raise InvalidQueryError("Invalid page number")
        if not math.isfinite(value):
            raise InvalidQueryError("Invalid page number")
        number = math.floor(value)
    if not 1 <= number <= MAX_PAGE:
        raise InvalidQueryError("Invalid page number")
    return number


def validate_list_query(
    role: str | None = None,
    page: str | None = None,
    search: str | None = None,
    sort: str | None = None,
) -> UserQuery:
    """Validate listing query parameters.

    Raises:
        InvalidQueryError: bad page number, unsafe search text, unknown role
            filter or unknown sort field
    """
    page_number = 1
    if page is not None:
        page_number = _parse_page(page)

    if search is not None and UNSAFE_SEARCH_RE.search(search):
        raise InvalidQueryError("Invalid input")

    role_filter = None
    if role:
        try:
            role_filter = Role(role)
        except ValueError:
            raise InvalidQueryError("Invalid role filter")

    sort_field, descending = "created_at", False
    if sort:
        descending = sort.startswith("-")
        sort_field = sort.lstrip("-")
        if sort_field not in SORTABLE_FIELDS:
            raise InvalidQueryError("Invalid sort field")

    return UserQuery(
        role=role_filter,
        search=(search.strip() or None) if search else None,
        sort_field=sort_field,
        descending=descending,
        page=page_number,
        page_size=PAGE_SIZE,
    )


def is_valid_user_id(user_id: str) -> bool:
    """True when user_id is safe to hand to the store.

    Malformed identifiers are reported as not found by callers, so the
    response never reveals the identifier format.
    """
    if SCRIPT_TAG_RE.search(user_id):
        return False
    return bool(USER_ID_RE.match(user_id))
