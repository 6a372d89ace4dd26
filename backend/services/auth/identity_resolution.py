"""Identity normalization and credential checks."""

from __future__ import annotations

from typing import Any, cast

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import ColumnElement

from core import verify_password
from models import User


def _eq(column: Any, value: Any) -> ColumnElement[bool]:
    return cast(ColumnElement[bool], column == value)


def normalize_email(value: str) -> str:
    return value.strip().lower()


def normalize_alias(value: str) -> str:
    return value.strip()


async def registration_conflict_exists(
    session: AsyncSession,
    *,
    normalized_email: str,
    alias: str,
) -> bool:
    """Return True when the email or the alias already belongs to someone."""
    lowered_email_column = cast(Any, func.lower(cast(Any, User.email)))
    existing = await session.execute(
        select(User.id)
        .where(
            or_(
                _eq(lowered_email_column, normalized_email),
                _eq(User.alias, alias),
            )
        )
        .limit(1)
    )
    return existing.scalar_one_or_none() is not None


async def resolve_login_user(
    session: AsyncSession,
    *,
    email: str,
    password: str,
) -> User | None:
    lowered_email_column = cast(Any, func.lower(cast(Any, User.email)))
    result = await session.execute(
        select(User).where(_eq(lowered_email_column, normalize_email(email))).limit(1)
    )
    user = result.scalar_one_or_none()
    if user is None or not verify_password(password, user.password_hash):
        return None
    return user
