"""
# Security Utilities

Password hashing (bcrypt) and JWT issuing/verification (python-jose).

Tokens carry the claims `user_id`, `email`, `role` and `username` together with the configured
issuer and an expiry of `JWT_EXPIRES_MINUTES`.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import bcrypt
from fastapi import status
from jose import ExpiredSignatureError, JWTError, jwt

from campushub.config import settings
from campushub.utils.exceptions import AppError


def get_password_hash(password: str) -> str:
    """Hash a password with `BCRYPT_ROUNDS` rounds."""
    # Bcrypt has a 72 byte limit
    password_bytes = password.encode("utf-8")[:72]
    hashed = bcrypt.hashpw(password_bytes, bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS))
    return hashed.decode("utf-8")


def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    if not hashed_password:
        return False
    password_bytes = plain_password.encode("utf-8")[:72]
    return bcrypt.checkpw(password_bytes, hashed_password.encode("utf-8"))


def _secret_key() -> str:
    return settings.SECRET_KEY.get_secret_value()


def create_access_token(user: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    """
    Sign a token for a user document.

    Args:
        user: User document (or dict with `_id`/`id`, `email`, `role`, `username`).
        expires_delta: Override for the configured lifetime.
    """
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=settings.JWT_EXPIRES_MINUTES))
    to_encode = {
        "user_id": str(user.get("_id", user.get("id"))),
        "email": user.get("email"),
        "role": user.get("role"),
        "username": user.get("username"),
        "iss": settings.JWT_ISSUER,
        "exp": expire,
    }
    return jwt.encode(to_encode, _secret_key(), algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> Dict[str, Any]:
    """
    Verify signature, expiry and issuer.

    Raises:
        AppError(401): "Token expired, Please Login Again" or "Invalid token".
    """
    try:
        return jwt.decode(token, _secret_key(), algorithms=[settings.ALGORITHM], issuer=settings.JWT_ISSUER)
    except ExpiredSignatureError:
        raise AppError("Token expired, Please Login Again", status.HTTP_401_UNAUTHORIZED)
    except JWTError:
        raise AppError("Invalid token", status.HTTP_401_UNAUTHORIZED)
