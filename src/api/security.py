"""Access control dependencies: bearer token extraction, verification and user loading."""

import logging
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from api.dependencies import get_token_service, get_user_repo
from domain.model.errors import NoTokenError, TokenInvalidError
from domain.model.user import User
from port.user_repository import UserRepository
from services.token_service import TokenClaims, TokenService

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


def get_token_claims(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    tokens: TokenService = Depends(get_token_service),
) -> TokenClaims:
    """Verify the bearer token. Raises NoTokenError or TokenInvalidError (401)."""
    if not credentials or not credentials.credentials:
        raise NoTokenError()
    return tokens.verify(credentials.credentials)


def get_current_user(
    claims: TokenClaims = Depends(get_token_claims),
    user_repo: UserRepository = Depends(get_user_repo),
) -> Optional[User]:
    """Load the acting user for a valid token.

    A deleted account is tolerated here and yields None; routes that check
    ownership use get_current_user_required instead.
    """
    user = user_repo.get_by_id(claims.subject_id)
    if not user:
        logger.info("Token subject no longer exists", extra={"userId": claims.subject_id})
    return user


def get_current_user_required(
    user: Optional[User] = Depends(get_current_user),
) -> User:
    """Acting user for ownership-checked routes. Raises TokenInvalidError if the account is gone."""
    if user is None:
        raise TokenInvalidError()
    return user
