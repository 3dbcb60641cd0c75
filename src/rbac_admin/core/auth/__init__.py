"""Authentication: token verification, current user and session state."""

from rbac_admin.core.auth.backend import (
    create_access_token,
    decode_token,
    hash_password,
    verify_password,
)
from rbac_admin.core.auth.schemas import TokenData


__all__ = [
    "TokenData",
    "create_access_token",
    "decode_token",
    "hash_password",
    "verify_password",
]
