import logging
from pathlib import Path

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from redis.asyncio import Redis
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.exceptions import AuthenticationFailed, NotAuthorized
from app.core.logging import bind_user
from app.core.roles import UserRole
from app.core.security import decode_token
from app.crud.cart import CartCRUD
from app.crud.item import ItemCRUD
from app.crud.user import UserCRUD
from app.db.sessions import get_async_session
from app.models import User
from app.services.auth_service import blocklist_key
from app.services.cart_service import CartService
from app.services.item_service import ItemService
from app.storage.base import ImageStorage
from app.storage.local_storage import LocalImageStorage


# Initialize logger for security events
logger = logging.getLogger(__name__)

# HTTPBearer is used for "Authorization: Bearer <token>" headers
oauth2_scheme = HTTPBearer(auto_error=False)

ITEM_IMAGES_PUBLIC_PATH = "/storage/items"

# Create ONE Redis client (connection pool)
redis_client = Redis.from_url(
    settings.redis_url,
    decode_responses=True,  # returns str instead of bytes
)

_image_storage: ImageStorage | None = None


async def get_redis() -> Redis:
    return redis_client


async def get_token_payload(
    token: HTTPAuthorizationCredentials = Depends(oauth2_scheme),
    redis: Redis = Depends(get_redis),
) -> dict:
    """
    Decode the bearer access token and reject it if it was logged out.
    """
    if not token:
        raise AuthenticationFailed("Not authenticated")

    payload = decode_token(token.credentials, expected_type="access")

    if await redis.exists(blocklist_key(payload.get("jti", ""))):
        logger.warning(f"Blocked token presented for user {payload.get('sub')}")
        raise AuthenticationFailed("Token has been revoked")

    return payload


async def get_current_user(
    payload: dict = Depends(get_token_payload),
    session: AsyncSession = Depends(get_async_session),
) -> User:
    """
    Dependency that authenticates requests using a JWT.
    """
    try:
        user_id = int(payload["sub"])
    except ValueError:
        raise AuthenticationFailed("Invalid user identifier format")

    user = await UserCRUD(session).get_by_id(user_id)

    if not user:
        logger.warning(f"Auth Failure: User {user_id} not found in database.")
        raise AuthenticationFailed("User not found")

    if not user.is_active:
        raise NotAuthorized("User account disabled")

    bind_user(user.id)
    return user


# ROLE BASED ACCESS CONTROL (SUB DEPENDENCIES OF GET CURRENT USER)

def get_current_admin(current_user: User = Depends(get_current_user)) -> User:
    """Require admin role"""
    if current_user.role != UserRole.ADMIN:
        raise NotAuthorized("Admin access required")
    return current_user


# SERVICE DEPENDENCIES

def get_image_storage() -> ImageStorage:
    global _image_storage

    if _image_storage is None:
        if settings.storage == "s3":
            from app.storage.s3_storage import S3ImageStorage

            _image_storage = S3ImageStorage()
        else:
            _image_storage = LocalImageStorage(
                Path(settings.storage_root) / "items", ITEM_IMAGES_PUBLIC_PATH
            )
    return _image_storage


def get_item_service(
    db: AsyncSession = Depends(get_async_session),
    image_storage: ImageStorage = Depends(get_image_storage),
) -> ItemService:
    return ItemService(ItemCRUD(db), image_storage)


def get_cart_service(db: AsyncSession = Depends(get_async_session)) -> CartService:
    return CartService(CartCRUD(db))
