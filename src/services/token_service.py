"""Signed bearer tokens (HS256 JWT) carrying a user id and role.

Tokens are stateless: there is no refresh and no revocation list, so a token
stays valid until it expires even after sign-out.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt

from domain.model.errors import TokenInvalidError
from domain.model.user import Role

logger = logging.getLogger(__name__)

JWT_ALGORITHM = "HS256"
TOKEN_LIFETIME = timedelta(hours=1)


@dataclass(frozen=True)
class TokenClaims:
    subject_id: str
    role: Role
    issued_at: datetime
    expires_at: datetime


class TokenService:
    """Issues and verifies access tokens with a fixed server-side secret."""

    def __init__(self, secret_key: str, lifetime: timedelta = TOKEN_LIFETIME):
        if not secret_key:
            raise ValueError(
                "JWT_SECRET_KEY environment variable is required. "
                "Generate a secure key with: openssl rand -hex 32"
            )
        self._secret_key = secret_key
        self.lifetime = lifetime

    def issue(self, user_id: str, role: Role, issued_at: datetime | None = None) -> str:
        """Create a token for user_id valid for `lifetime` from issued_at (default now)."""
        issued_at = issued_at or datetime.now(timezone.utc)
        payload = {
            "sub": user_id,
            "role": role.value,
            "iat": issued_at,
            "exp": issued_at + self.lifetime,
        }
        return jwt.encode(payload, self._secret_key, algorithm=JWT_ALGORITHM)

    def verify(self, token: str) -> TokenClaims:
        """Decode and check a token.

        Expiry is inclusive: a token is still accepted at exactly its `exp` second.

        Raises:
            TokenInvalidError: bad signature, malformed token or expired
        """
        try:
            payload = jwt.decode(token, self._secret_key, algorithms=[JWT_ALGORITHM])
        except JWTError as e:
            logger.debug(f"JWT verification failed: {e}")
            raise TokenInvalidError()

        user_id = payload.get("sub")
        if not isinstance(user_id, str) or not user_id:
            raise TokenInvalidError()
        try:
            role = Role(payload.get("role"))
            issued_at = datetime.fromtimestamp(payload["iat"], tz=timezone.utc)
            expires_at = datetime.fromtimestamp(payload["exp"], tz=timezone.utc)
        except (KeyError, TypeError, ValueError):
            raise TokenInvalidError()

        return TokenClaims(
            subject_id=user_id,
            role=role,
            issued_at=issued_at,
            expires_at=expires_at,
        )
