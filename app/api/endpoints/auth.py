import logging

from fastapi import APIRouter, Depends, Request, Response
from redis.asyncio import Redis
from starlette import status

from app.core.deps import get_redis, get_token_payload
from app.core.limiter import LOGIN_LIMIT, REGISTER_LIMIT, limiter
from app.core.validation import require_json_object
from app.schemas.user import AuthResponse, LoginRequest, RefreshTokenRequest, RegisterRequest, TokenResponse
from app.services.auth_service import AuthService

# Initialize logger for security and audit events
logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/auth",
    tags=["auth"],
    dependencies=[Depends(require_json_object)],
)


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(REGISTER_LIMIT)
async def signup(
    request: Request,
    user_data: RegisterRequest,
    auth_service: AuthService = Depends()
):
    """
    User registration. Limited to 5 attempts per hour per IP.
    """
    return await auth_service.register(user_data.model_dump())


@router.post("/login", response_model=AuthResponse)
@limiter.limit(LOGIN_LIMIT)
async def login(
    request: Request,
    login_data: LoginRequest,
    auth_service: AuthService = Depends()
):
    """
    Authenticate user and return JWT tokens.
    """
    return await auth_service.login(
        email=login_data.email,
        password=login_data.password
    )


@router.post("/refresh", response_model=TokenResponse)
async def refresh_token(
    payload: RefreshTokenRequest,
    auth_service: AuthService = Depends()
):
    """
    Issue a new access token using a valid refresh token.
    """
    return await auth_service.refresh_access_token(payload.refresh_token)


logout_router = APIRouter(prefix="/auth", tags=["auth"])


@logout_router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(
    token_payload: dict = Depends(get_token_payload),
    redis: Redis = Depends(get_redis),
    auth_service: AuthService = Depends()
):
    """
    Revoke the presented access token.
    """
    await auth_service.logout(redis, token_payload)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
