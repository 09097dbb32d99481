"""
Tests for password hashing and JWT issuing/verification.
"""
from datetime import timedelta

import pytest
from jose import jwt

from campushub.config import settings
from campushub.utils.exceptions import AppError
from campushub.utils.security_utils import (
    create_access_token,
    decode_access_token,
    get_password_hash,
    verify_password,
)


def test_password_hash_round_trip():
    hashed = get_password_hash("correct horse battery")

    assert hashed != "correct horse battery"
    assert verify_password("correct horse battery", hashed)
    assert not verify_password("wrong password", hashed)


def test_verify_password_without_hash():
    assert not verify_password("anything", None)


def test_token_carries_user_claims():
    user = {"_id": "64b7f0c2a1b2c3d4e5f60718", "email": "a@school.edu", "role": "officer", "username": "alice"}

    payload = decode_access_token(create_access_token(user))

    assert payload["user_id"] == user["_id"]
    assert payload["email"] == "a@school.edu"
    assert payload["role"] == "officer"
    assert payload["username"] == "alice"
    assert payload["iss"] == settings.JWT_ISSUER


def test_expired_token_rejected():
    token = create_access_token({"_id": "x", "role": "admin"}, expires_delta=timedelta(seconds=-5))

    with pytest.raises(AppError) as exc_info:
        decode_access_token(token)

    assert exc_info.value.status_code == 401
    assert exc_info.value.message == "Token expired, Please Login Again"


def test_token_signed_with_other_key_rejected():
    token = jwt.encode({"user_id": "x", "iss": settings.JWT_ISSUER}, "some-other-key", algorithm="HS256")

    with pytest.raises(AppError) as exc_info:
        decode_access_token(token)

    assert exc_info.value.status_code == 401
    assert exc_info.value.message == "Invalid token"


def test_token_from_other_issuer_rejected():
    token = jwt.encode(
        {"user_id": "x", "iss": "someone-else"},
        settings.SECRET_KEY.get_secret_value(),
        algorithm=settings.ALGORITHM,
    )

    with pytest.raises(AppError) as exc_info:
        decode_access_token(token)

    assert exc_info.value.message == "Invalid token"
