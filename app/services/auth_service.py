import logging
from datetime import datetime, timezone

from fastapi import Depends
from redis.asyncio import Redis
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import AuthenticationFailed, BadRequestError, PasswordVerificationError
from app.core.roles import UserRole
from app.core.security import (
    create_access_token,
    create_refresh_token,
    decode_token,
    hash_password,
    verify_password,
)
from app.crud.user import UserCRUD
from app.db.sessions import get_async_session

# Initialize logger for tracking auth events
logger = logging.getLogger(__name__)

BLOCKLIST_PREFIX = "blocklist:"


def blocklist_key(jti: str) -> str:
    return f"{BLOCKLIST_PREFIX}{jti}"


class AuthService:
    def __init__(self, session: AsyncSession = Depends(get_async_session)):
        self.user_crud = UserCRUD(session=session)

    async def register(self, user_in: dict) -> dict:
        email = user_in["email"].lower()

        if await self.user_crud.get_by_email(email):
            logger.warning(f"Registration failed: User {email} already exists.")
            raise BadRequestError("A user with this email is already registered.")

        user_data = {
            "name": user_in["name"],
            "email": email,
            "hashed_password": hash_password(user_in["password"]),
            "role": UserRole.USER,
        }

        try:
            new_user = await self.user_crud.create_user(user_data)
            await self.user_crud.session.commit()
            await self.user_crud.session.refresh(new_user)
        except Exception as e:
            await self.user_crud.session.rollback()
            logger.error(f"Database error during registration: {str(e)}")
            raise

        logger.info(f"User registered successfully: {new_user.id}")

        return {
            "user": new_user,
            "access_token": create_access_token(new_user),
            "refresh_token": create_refresh_token(new_user),
            "token_type": "bearer",
        }

    async def login(self, email: str, password: str) -> dict:
        """
        Validates user credentials and issues tokens.
        """
        email = email.lower()
        user = await self.user_crud.get_by_email(email)

        # Same error for unknown email and wrong password
        if not user or not verify_password(password, user.hashed_password):
            logger.warning(f"Login failed: Invalid credentials for {email}")
            raise PasswordVerificationError("Invalid email or password.")

        if not user.is_active:
            logger.warning(f"Login blocked: Account disabled for {email}")
            raise AuthenticationFailed("User account is inactive. Please contact support.")

        logger.info(f"Login successful: User {user.id}")

        return {
            "access_token": create_access_token(user),
            "refresh_token": create_refresh_token(user),
            "token_type": "bearer",
            "user": user,
        }

    async def refresh_access_token(self, refresh_token: str) -> dict:
        """
        Validates a refresh token and issues a new access token.
        """
        payload = decode_token(refresh_token, expected_type="refresh")

        try:
            user_id = int(payload["sub"])
        except ValueError:
            raise AuthenticationFailed("Invalid user identifier format")

        user = await self.user_crud.get_by_id(user_id)
        if not user or not user.is_active:
            logger.warning(f"Refresh failed: User {user_id} not found or inactive")
            raise AuthenticationFailed("User not found or inactive")

        logger.info(f"Access token refreshed for user: {user.id}")
        return {
            "access_token": create_access_token(user),
            "token_type": "bearer",
        }

    async def logout(self, redis: Redis, token_payload: dict) -> None:
        """Block the presented access token until it would have expired."""
        expires_at = datetime.fromtimestamp(token_payload["exp"], tz=timezone.utc)
        ttl = int((expires_at - datetime.now(timezone.utc)).total_seconds())

        if ttl > 0:
            await redis.set(blocklist_key(token_payload["jti"]), "1", ex=ttl)

        logger.info(f"User {token_payload['sub']} logged out")
