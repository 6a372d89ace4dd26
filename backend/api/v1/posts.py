"""Post creation, retrieval and like endpoints."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Response, status
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from api.deps import get_current_user, get_db, require_user_id
from models import User
from services import likes as likes_service
from services import posts as posts_service
from services.realtime import LikeEventBroadcaster, get_like_broadcaster
from services.schemas import MessageResponse, PostDetailResponse, PostResponse
from .pagination import MAX_PAGE_SIZE, advertise_next_page

router = APIRouter(prefix="/posts", tags=["posts"])


class PostCreateRequest(BaseModel):
    # Length and blank checks run after trimming in the post service.
    content: str


@router.post("", status_code=status.HTTP_201_CREATED, response_model=PostResponse)
async def create_post(
    payload: PostCreateRequest,
    session: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> PostResponse:
    post = await posts_service.create_post(
        session,
        content=payload.content,
        author_id=require_user_id(current_user),
    )
    return PostResponse.from_post(post)


@router.get("", response_model=list[PostDetailResponse])
async def list_posts(
    response: Response,
    limit: Annotated[int | None, Query(ge=1, le=MAX_PAGE_SIZE)] = None,
    offset: Annotated[int, Query(ge=0)] = 0,
    session: AsyncSession = Depends(get_db),
    _current_user: User = Depends(get_current_user),
) -> list[PostDetailResponse]:
    posts, has_more = await posts_service.list_posts(session, limit=limit, offset=offset)
    advertise_next_page(response, offset=offset, limit=limit, has_more=has_more)
    return posts


@router.get("/my-posts", response_model=list[PostDetailResponse])
async def list_my_posts(
    response: Response,
    limit: Annotated[int | None, Query(ge=1, le=MAX_PAGE_SIZE)] = None,
    offset: Annotated[int, Query(ge=0)] = 0,
    session: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> list[PostDetailResponse]:
    posts, has_more = await posts_service.list_posts_by_author(
        session,
        require_user_id(current_user),
        limit=limit,
        offset=offset,
    )
    advertise_next_page(response, offset=offset, limit=limit, has_more=has_more)
    return posts


@router.get("/{post_id}", response_model=PostDetailResponse)
async def get_post(
    post_id: int,
    session: AsyncSession = Depends(get_db),
    _current_user: User = Depends(get_current_user),
) -> PostDetailResponse:
    return await posts_service.get_post(session, post_id)


@router.post(
    "/{post_id}/like",
    status_code=status.HTTP_201_CREATED,
    response_model=MessageResponse,
)
async def like_post(
    post_id: int,
    session: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
    broadcaster: LikeEventBroadcaster = Depends(get_like_broadcaster),
) -> MessageResponse:
    return await likes_service.like_post(
        session,
        post_id=post_id,
        user_id=require_user_id(current_user),
        broadcaster=broadcaster,
    )


@router.delete("/{post_id}/like", response_model=MessageResponse)
async def unlike_post(
    post_id: int,
    session: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
    broadcaster: LikeEventBroadcaster = Depends(get_like_broadcaster),
) -> MessageResponse:
    return await likes_service.unlike_post(
        session,
        post_id=post_id,
        user_id=require_user_id(current_user),
        broadcaster=broadcaster,
    )
