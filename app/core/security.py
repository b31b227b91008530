import logging
import uuid
import bcrypt
from app.core.exceptions import AuthenticationFailed, PasswordVerificationError
from datetime import datetime, timedelta, timezone
from jose import JWTError, jwt
from app.core.config import settings


# Initialize logger for tracking token generation events
logger = logging.getLogger(__name__)


# ----- JWT --------

def _build_token(user, token_type: str, expires_delta: timedelta) -> str:
    now = datetime.now(timezone.utc)

    # user.id is an int; JWT "sub" must be a string
    payload = {
        "sub": str(user.id),
        "type": token_type,
        "role": user.role.value,
        "jti": uuid.uuid4().hex,
        "iat": now,
        "exp": now + expires_delta,
    }

    return jwt.encode(payload, settings.secret_key, algorithm=settings.jwt_algorithm)


def create_access_token(user) -> str:
    """
    Generates a short-lived JWT Access Token.

    Payload:
    - sub: The user id
    - type: "access"
    - role: The role of the user
    - jti: Unique token id, used by the logout block list
    - exp: Expiration timestamp
    """
    token = _build_token(
        user, "access", timedelta(minutes=settings.access_token_expire_minutes)
    )
    logger.debug(f"JWT: Access token created for user {user.id}")
    return token


def create_refresh_token(user) -> str:
    """
    Generates a long-lived JWT Refresh Token.
    Used to obtain a new access token without re-entering credentials.
    """
    token = _build_token(
        user, "refresh", timedelta(days=settings.refresh_token_expire_days)
    )
    logger.debug(f"JWT: Refresh token created for user {user.id}")
    return token


def decode_token(token: str, expected_type: str = "access") -> dict:
    """Decode and verify a JWT, rejecting tokens of the wrong type."""
    try:
        payload = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.jwt_algorithm],
            options={"leeway": 30},
        )
    except JWTError:
        logger.warning("JWT Decode Failed")
        raise AuthenticationFailed("Token is invalid or has expired")

    if payload.get("type") != expected_type:
        raise AuthenticationFailed("Invalid token type")

    if not payload.get("sub"):
        raise AuthenticationFailed("Invalid authentication token")

    return payload


# --- HASHING BCRYPT ---

MAX_BYTE_LENGTH = 72

def hash_password(password: str) -> str:
    """Hashes a plain-text password using native Bcrypt."""

    # Byte length, not character length (multi-byte chars count more)
    if len(password.encode("utf-8")) > MAX_BYTE_LENGTH:
        logger.warning("Password hashing failed: Input exceeds 72-byte limit.")
        raise PasswordVerificationError("Password too long")

    return bcrypt.hashpw(
        password.encode("utf-8"),
        bcrypt.gensalt()
    ).decode("utf-8")

def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verifies a plain-text password against a stored hash."""
    try:
        return bcrypt.checkpw(
            plain_password.encode("utf-8"),
            hashed_password.encode("utf-8")
        )
    except ValueError:
        logger.error("Password verification failed: stored hash is malformed")
        return False
