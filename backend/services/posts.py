"""Post ledger: create posts and read them with author and like joins."""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Any, cast

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import ColumnElement

from models import Like, Post, User
from .schemas import PostAuthorResponse, PostDetailResponse

MAX_POST_CONTENT_LENGTH = 500
POST_NOT_FOUND_DETAIL = "Publicación no encontrada"
EMPTY_CONTENT_DETAIL = "El contenido no puede estar vacío"
CONTENT_TOO_LONG_DETAIL = (
    f"El contenido no puede exceder {MAX_POST_CONTENT_LENGTH} caracteres"
)

logger = logging.getLogger(__name__)


def _eq(column: Any, value: Any) -> ColumnElement[bool]:
    return cast(ColumnElement[bool], column == value)


def _desc(column: Any) -> Any:
    return cast(Any, column).desc()


def _asc(column: Any) -> Any:
    return cast(Any, column).asc()


def normalize_post_content(content: str) -> str:
    normalized = content.strip()
    if not normalized:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_CONTENT,
            detail=EMPTY_CONTENT_DETAIL,
        )
    if len(normalized) > MAX_POST_CONTENT_LENGTH:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_CONTENT,
            detail=CONTENT_TOO_LONG_DETAIL,
        )
    return normalized


async def require_post(session: AsyncSession, post_id: int) -> Post:
    """Return the post or raise 404 when it does not exist."""
    result = await session.execute(select(Post).where(_eq(Post.id, post_id)).limit(1))
    post = result.scalar_one_or_none()
    if post is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=POST_NOT_FOUND_DETAIL,
        )
    return post


async def create_post(session: AsyncSession, *, content: str, author_id: int) -> Post:
    post = Post(content=normalize_post_content(content), user_id=author_id, likes_count=0)
    session.add(post)
    try:
        await session.commit()
    except Exception:
        await session.rollback()
        raise
    await session.refresh(post)
    logger.info("Post created", extra={"post_id": post.id, "user_id": author_id})
    return post


async def collect_post_likes(
    session: AsyncSession,
    post_ids: list[int],
) -> dict[int, list[Like]]:
    """Batch-load likes for the given posts, oldest first per post."""
    likes_by_post: dict[int, list[Like]] = defaultdict(list)
    if not post_ids:
        return likes_by_post

    post_id_column = cast(Any, Like.post_id)
    result = await session.execute(
        select(Like)
        .where(post_id_column.in_(post_ids))
        .order_by(_asc(Like.created_at), _asc(Like.id))
    )
    for like in result.scalars().all():
        likes_by_post[like.post_id].append(like)
    return likes_by_post


def _post_detail_query() -> Any:
    return (
        select(
            cast(Any, Post),
            User.id,
            User.first_name,
            User.last_name,
            User.alias,
        )
        .join(User, _eq(User.id, Post.user_id))
        .order_by(_desc(Post.created_at), _desc(Post.id))
    )


async def _load_post_details(
    session: AsyncSession,
    query: Any,
) -> list[PostDetailResponse]:
    result = await session.execute(query)
    rows = result.all()
    post_ids = [post.id for post, *_author in rows if post.id is not None]
    likes_by_post = await collect_post_likes(session, post_ids)
    return [
        PostDetailResponse.from_post_with_author(
            post,
            PostAuthorResponse(
                id=author_id,
                first_name=first_name,
                last_name=last_name,
                alias=alias,
            ),
            likes_by_post.get(cast(int, post.id), []),
        )
        for post, author_id, first_name, last_name, alias in rows
    ]


def _apply_page(query: Any, *, limit: int | None, offset: int) -> Any:
    if offset > 0:
        query = query.offset(offset)
    if limit is not None:
        query = query.limit(limit + 1)
    return query


async def list_posts(
    session: AsyncSession,
    *,
    limit: int | None = None,
    offset: int = 0,
) -> tuple[list[PostDetailResponse], bool]:
    """Return posts newest first and whether another page exists."""
    query = _apply_page(_post_detail_query(), limit=limit, offset=offset)
    posts = await _load_post_details(session, query)
    return _trim_page(posts, limit)


async def list_posts_by_author(
    session: AsyncSession,
    author_id: int,
    *,
    limit: int | None = None,
    offset: int = 0,
) -> tuple[list[PostDetailResponse], bool]:
    query = _apply_page(
        _post_detail_query().where(_eq(Post.user_id, author_id)),
        limit=limit,
        offset=offset,
    )
    posts = await _load_post_details(session, query)
    return _trim_page(posts, limit)


async def get_post(session: AsyncSession, post_id: int) -> PostDetailResponse:
    posts = await _load_post_details(
        session,
        _post_detail_query().where(_eq(Post.id, post_id)).limit(1),
    )
    if not posts:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=POST_NOT_FOUND_DETAIL,
        )
    return posts[0]


def _trim_page(
    posts: list[PostDetailResponse],
    limit: int | None,
) -> tuple[list[PostDetailResponse], bool]:
    if limit is None or len(posts) <= limit:
        return posts, False
    return posts[:limit], True


__all__ = [
    "MAX_POST_CONTENT_LENGTH",
    "POST_NOT_FOUND_DETAIL",
    "EMPTY_CONTENT_DETAIL",
    "CONTENT_TOO_LONG_DETAIL",
    "normalize_post_content",
    "require_post",
    "create_post",
    "collect_post_likes",
    "list_posts",
    "list_posts_by_author",
    "get_post",
]
