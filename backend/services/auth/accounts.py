"""Registration and login flows."""

from __future__ import annotations

import logging
from datetime import date
from typing import NoReturn

from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from core import hash_password, needs_rehash
from db.errors import is_unique_violation
from models import User
from services.schemas import AuthResponse, public_user
from .identity_resolution import (
    normalize_alias,
    normalize_email,
    registration_conflict_exists,
    resolve_login_user,
)
from .tokens import issue_access_token

REGISTRATION_CONFLICT_DETAIL = "Email o alias ya están en uso"
INVALID_CREDENTIALS_DETAIL = "Credenciales inválidas"

logger = logging.getLogger(__name__)


def _raise_registration_conflict(cause: Exception | None = None) -> NoReturn:
    raise HTTPException(
        status_code=status.HTTP_409_CONFLICT,
        detail=REGISTRATION_CONFLICT_DETAIL,
    ) from cause


async def register_account(
    session: AsyncSession,
    *,
    email: str,
    password: str,
    first_name: str,
    last_name: str,
    alias: str,
    birth_date: date,
) -> AuthResponse:
    normalized_email = normalize_email(email)
    normalized_alias = normalize_alias(alias)
    if await registration_conflict_exists(
        session,
        normalized_email=normalized_email,
        alias=normalized_alias,
    ):
        _raise_registration_conflict()

    user = User(
        email=normalized_email,
        alias=normalized_alias,
        password_hash=hash_password(password),
        first_name=first_name.strip(),
        last_name=last_name.strip(),
        birth_date=birth_date,
    )
    session.add(user)
    try:
        await session.commit()
    except IntegrityError as exc:
        await session.rollback()
        if is_unique_violation(exc):
            _raise_registration_conflict(exc)
        raise
    await session.refresh(user)

    logger.info("User registered", extra={"user_id": user.id})
    return AuthResponse(access_token=issue_access_token(user), user=public_user(user))


async def login(session: AsyncSession, *, email: str, password: str) -> AuthResponse:
    user = await resolve_login_user(session, email=email, password=password)
    if user is None:
        logger.info("Rejected login attempt")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=INVALID_CREDENTIALS_DETAIL,
        )

    if needs_rehash(user.password_hash):
        user.password_hash = hash_password(password)
        session.add(user)
        await session.commit()
        await session.refresh(user)

    return AuthResponse(access_token=issue_access_token(user), user=public_user(user))
