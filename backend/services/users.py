"""User directory: read-only lookups returning the public projection."""

from __future__ import annotations

from typing import Any, NoReturn, cast

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import ColumnElement

from models import User
from .schemas import UserProfileResponse, UserPublicResponse

USER_NOT_FOUND_DETAIL = "Usuario no encontrado"


def _eq(column: Any, value: Any) -> ColumnElement[bool]:
    return cast(ColumnElement[bool], column == value)


def _raise_user_not_found() -> NoReturn:
    raise HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=USER_NOT_FOUND_DETAIL,
    )


def _public_projection_query() -> Any:
    return select(
        User.id,
        User.first_name,
        User.last_name,
        User.alias,
        User.birth_date,
        User.email,
    )


async def find_user_by_id(session: AsyncSession, user_id: int) -> UserPublicResponse:
    result = await session.execute(
        _public_projection_query().where(_eq(User.id, user_id)).limit(1)
    )
    row = result.first()
    if row is None:
        _raise_user_not_found()
    return UserPublicResponse.model_validate(dict(row._mapping))


async def find_user_by_alias(session: AsyncSession, alias: str) -> UserPublicResponse:
    if not alias:
        _raise_user_not_found()
    result = await session.execute(
        _public_projection_query().where(_eq(User.alias, alias)).limit(1)
    )
    row = result.first()
    if row is None:
        _raise_user_not_found()
    return UserPublicResponse.model_validate(dict(row._mapping))


async def get_profile(session: AsyncSession, user_id: int) -> UserProfileResponse:
    user = await find_user_by_id(session, user_id)
    return UserProfileResponse(**user.model_dump())


__all__ = [
    "USER_NOT_FOUND_DETAIL",
    "find_user_by_id",
    "find_user_by_alias",
    "get_profile",
]
