"""Bearer token issuance and verification against stored users."""

from __future__ import annotations

from typing import NoReturn

from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from core import ACCESS_TOKEN_TYPE, create_access_token, decode_token
from models import User

UNAUTHORIZED_DETAIL = "No autorizado"


def _raise_unauthorized() -> NoReturn:
    raise HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=UNAUTHORIZED_DETAIL,
        headers={"WWW-Authenticate": "Bearer"},
    )


def issue_access_token(user: User) -> str:
    if user.id is None:
        raise ValueError("User record missing identifier")
    return create_access_token(str(user.id), extra_claims={"email": user.email})


def extract_user_id(token: str) -> int:
    """Return the user id carried by a valid access token or raise 401."""
    try:
        payload = decode_token(token)
    except ValueError:
        _raise_unauthorized()

    if payload.get("type") != ACCESS_TOKEN_TYPE:
        _raise_unauthorized()

    sub_raw = payload.get("sub")
    if isinstance(sub_raw, int):
        return sub_raw
    if isinstance(sub_raw, str) and sub_raw.isdigit():
        return int(sub_raw)
    _raise_unauthorized()


async def resolve_token_user(session: AsyncSession, token: str) -> User:
    user = await session.get(User, extract_user_id(token))
    if user is None:
        _raise_unauthorized()
    return user
