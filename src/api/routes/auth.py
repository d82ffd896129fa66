"""Authentication routes (sign-up, sign-in, sign-out)."""

import logging
import os

from fastapi import APIRouter, Depends, Response, status

from api.dependencies import get_token_service, get_user_repo
from api.models import (
    LoginRequest,
    LoginResponse,
    MessageResponse,
    RegisterRequest,
    RegisterResponse,
    UserResponse,
)
from api.security import get_token_claims
from port.user_repository import UserRepository
from services import auth_service
from services.token_service import TokenClaims, TokenService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])

AUTH_COOKIE_NAME = "jwt"
COOKIE_SECURE = os.getenv("COOKIE_SECURE", "false").lower() == "true"


@router.post("/signup", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
async def signup(request: RegisterRequest, repo: UserRepository = Depends(get_user_repo)):
    """Register a new user.

    Raises:
        ValidationError / InvalidRoleError / UserExistsError: mapped to 400
    """
    user = auth_service.register(
        repo,
        name=request.name,
        email=request.email,
        password=request.password,
        role=request.role,
    )
    return RegisterResponse(message="User registered successfully", userId=user.id)


@router.post("/signin", response_model=LoginResponse)
async def signin(
    request: LoginRequest,
    response: Response,
    repo: UserRepository = Depends(get_user_repo),
    tokens: TokenService = Depends(get_token_service),
):
    """Verify credentials, return a bearer token and set it as an httpOnly cookie.

    Raises:
        ValidationError: 400
        InvalidCredentialsError: 401, same message for unknown email and wrong password
    """
    user = auth_service.authenticate(repo, request.email, request.password)
    token = tokens.issue(user.id, user.role)

    response.set_cookie(
        AUTH_COOKIE_NAME,
        token,
        max_age=int(tokens.lifetime.total_seconds()),
        httponly=True,
        samesite="strict",
        secure=COOKIE_SECURE,
    )
    return LoginResponse(message="Login successful", token=token, user=UserResponse.from_domain(user))


@router.get("/signout", response_model=MessageResponse)
async def signout(response: Response, claims: TokenClaims = Depends(get_token_claims)):
    """Sign out by telling the client to drop its token.

    Tokens are stateless, so the token itself stays valid until it expires.
    """
    response.delete_cookie(AUTH_COOKIE_NAME, httponly=True, samesite="strict", secure=COOKIE_SECURE)
    logger.info("User signed out", extra={"userId": claims.subject_id})
    return MessageResponse(message="User signed out successfully")
