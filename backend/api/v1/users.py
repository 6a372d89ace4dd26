"""User directory endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from api.deps import get_current_user, get_db, require_user_id
from models import User
from services.schemas import UserProfileResponse, UserPublicResponse
from services.users import find_user_by_alias, find_user_by_id, get_profile

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/profile", response_model=UserProfileResponse)
async def read_profile(
    session: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> UserProfileResponse:
    return await get_profile(session, require_user_id(current_user))


@router.get("/alias/{alias}", response_model=UserPublicResponse)
async def read_user_by_alias(
    alias: str,
    session: AsyncSession = Depends(get_db),
    _current_user: User = Depends(get_current_user),
) -> UserPublicResponse:
    return await find_user_by_alias(session, alias)


@router.get("/{user_id}", response_model=UserPublicResponse)
async def read_user(
    user_id: int,
    session: AsyncSession = Depends(get_db),
    _current_user: User = Depends(get_current_user),
) -> UserPublicResponse:
    return await find_user_by_id(session, user_id)
