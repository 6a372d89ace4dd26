"""Tests for password hashing and token helpers."""

from datetime import timedelta

import jwt
import pytest
from pydantic import ValidationError

from core import (
    ACCESS_TOKEN_TYPE,
    create_access_token,
    decode_token,
    hash_password,
    needs_rehash,
    settings,
    verify_password,
)
from core.config import DEVELOPMENT_JWT_SECRET_KEY, Settings


def test_hash_password_round_trip():
    password_hash = hash_password("secreto123")

    assert password_hash != "secreto123"
    assert password_hash.startswith("$argon2")
    assert verify_password("secreto123", password_hash)
    assert not verify_password("otra-clave", password_hash)


def test_verify_password_rejects_malformed_hash():
    assert verify_password("secreto123", "not-a-hash") is False
    assert needs_rehash("not-a-hash") is False


def test_fresh_hash_does_not_need_rehash():
    assert needs_rehash(hash_password("secreto123")) is False


def test_access_token_carries_subject_and_extra_claims():
    token = create_access_token("42", extra_claims={"email": "ana@example.com"})

    claims = decode_token(token)

    assert claims["sub"] == "42"
    assert claims["email"] == "ana@example.com"
    assert claims["type"] == ACCESS_TOKEN_TYPE
    assert claims["exp"] > claims["iat"]


def test_extra_claims_cannot_override_reserved_claims():
    token = create_access_token("42", extra_claims={"sub": "1", "type": "refresh"})

    claims = decode_token(token)

    assert claims["sub"] == "42"
    assert claims["type"] == ACCESS_TOKEN_TYPE


def test_decode_token_rejects_expired_token():
    token = create_access_token("42", expires_delta=timedelta(seconds=-5))

    with pytest.raises(ValueError):
        decode_token(token)


def test_decode_token_rejects_foreign_signature():
    token = jwt.encode(
        {"sub": "42", "type": ACCESS_TOKEN_TYPE},
        settings.jwt_secret_key + "-other",
        algorithm=settings.jwt_algorithm,
    )

    with pytest.raises(ValueError):
        decode_token(token)


def test_default_signing_key_is_long_enough_for_hs256():
    assert len(DEVELOPMENT_JWT_SECRET_KEY.encode()) >= 32


def test_deployed_settings_require_a_signing_key():
    with pytest.raises(ValidationError):
        Settings(app_env="production", jwt_secret_key=DEVELOPMENT_JWT_SECRET_KEY)

    configured = Settings(app_env="production", jwt_secret_key="x" * 48)
    assert configured.jwt_secret_key == "x" * 48
