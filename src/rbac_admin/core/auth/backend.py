"""Authentication backend for JWT and password handling.

Tokens are issued by the identity service; this module verifies them
and hashes passwords for accounts created through the admin API.
"""

import secrets
from datetime import UTC, datetime, timedelta
from typing import Any
from uuid import UUID

from jose import JWTError, jwt
from passlib.context import CryptContext

from rbac_admin.config import settings
from rbac_admin.core.auth.schemas import TokenData
from rbac_admin.core.constants import ACCESS_TOKEN_JTI_LENGTH, BCRYPT_ROUNDS


pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=BCRYPT_ROUNDS,
)


# ============================================================
# Password Utilities
# ============================================================


def hash_password(password: str) -> str:
    """Hash a password using bcrypt."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its bcrypt hash."""
    return pwd_context.verify(plain_password, hashed_password)


# ============================================================
# JWT Token Utilities
# ============================================================


def create_access_token(
    user_id: UUID,
    expires_delta: timedelta | None = None,
    additional_claims: dict[str, Any] | None = None,
) -> str:
    """Create a signed access token for ``user_id``.

    Args:
        user_id: The user's UUID
        expires_delta: Optional custom expiration time
        additional_claims: Optional extra claims to include

    Returns:
        Encoded JWT access token
    """
    now = datetime.now(UTC)
    expire = now + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )

    to_encode: dict[str, Any] = {
        "sub": str(user_id),
        "exp": expire,
        "type": "access",
        "iat": now,
        "jti": secrets.token_urlsafe(ACCESS_TOKEN_JTI_LENGTH),
    }
    if additional_claims:
        to_encode.update(additional_claims)

    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> TokenData | None:
    """Decode and validate a JWT token.

    Returns:
        TokenData if valid, None if invalid or expired
    """
    try:
        payload = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.jwt_algorithm],
        )

        user_id = payload.get("sub")
        exp = payload.get("exp")
        if not user_id or exp is None:
            return None

        return TokenData(
            user_id=UUID(user_id),
            exp=datetime.fromtimestamp(exp, tz=UTC),
            type=payload.get("type", "access"),
            jti=payload.get("jti"),
        )

    except (JWTError, ValueError):
        return None
