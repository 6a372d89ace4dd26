"""Like toggle: one like per (user, post) with a maintained counter.

The like row and the ``posts.likes_count`` adjustment are written in the
same transaction. The counter moves through an SQL expression so it always
reflects the committed cardinality, and the ``(user_id, post_id)`` unique
constraint is the final arbiter between concurrent duplicate likes.
Realtime events go out only after commit and never fail the request.
"""

from __future__ import annotations

import logging
from typing import Any, NoReturn, cast

from fastapi import HTTPException, status
from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import ColumnElement

from db.errors import is_unique_violation
from models import Like, Post
from .posts import require_post
from .realtime import LikeEventBroadcaster
from .schemas import LikePayload, LikeUserPayload, MessageResponse
from .users import find_user_by_id

LIKE_ADDED_MESSAGE = "Like agregado exitosamente"
LIKE_REMOVED_MESSAGE = "Like removido exitosamente"
ALREADY_LIKED_DETAIL = "Ya has dado like a esta publicación"
LIKE_NOT_FOUND_DETAIL = "No has dado like a esta publicación"

logger = logging.getLogger(__name__)


def _eq(column: Any, value: Any) -> ColumnElement[bool]:
    return cast(ColumnElement[bool], column == value)


def _raise_already_liked() -> NoReturn:
    raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=ALREADY_LIKED_DETAIL)


def _raise_like_not_found() -> NoReturn:
    raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=LIKE_NOT_FOUND_DETAIL)


async def find_like(session: AsyncSession, *, post_id: int, user_id: int) -> Like | None:
    result = await session.execute(
        select(Like)
        .where(_eq(Like.post_id, post_id), _eq(Like.user_id, user_id))
        .limit(1)
    )
    return result.scalar_one_or_none()


async def _read_likes_count(session: AsyncSession, post_id: int) -> int:
    result = await session.execute(
        select(Post.likes_count).where(_eq(Post.id, post_id))
    )
    return int(result.scalar_one())


async def _adjust_likes_count(session: AsyncSession, post_id: int, delta: int) -> None:
    likes_count_column = cast(Any, Post.likes_count)
    statement = update(Post).where(_eq(Post.id, post_id))
    if delta < 0:
        statement = statement.where(likes_count_column + delta >= 0)
    await session.execute(
        statement.values(likes_count=likes_count_column + delta).execution_options(
            synchronize_session=False
        )
    )


async def like_post(
    session: AsyncSession,
    *,
    post_id: int,
    user_id: int,
    broadcaster: LikeEventBroadcaster,
) -> MessageResponse:
    await require_post(session, post_id)

    if await find_like(session, post_id=post_id, user_id=user_id) is not None:
        _raise_already_liked()

    like = Like(post_id=post_id, user_id=user_id)
    session.add(like)
    try:
        await session.flush()
        await _adjust_likes_count(session, post_id, 1)
        likes_count = await _read_likes_count(session, post_id)
        await session.commit()
    except IntegrityError as exc:
        await session.rollback()
        if is_unique_violation(exc):
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=ALREADY_LIKED_DETAIL,
            ) from exc
        raise
    except Exception:
        await session.rollback()
        raise

    await session.refresh(like)
    logger.info(
        "Like added",
        extra={"post_id": post_id, "user_id": user_id, "likes_count": likes_count},
    )

    liker = await find_user_by_id(session, user_id)
    if like.id is None:
        raise ValueError("Like record missing identifier")
    payload = LikePayload(
        id=like.id,
        user=LikeUserPayload.from_public(liker),
        post_id=post_id,
        created_at=like.created_at,
    )
    await _publish_like_events(
        broadcaster,
        post_id=post_id,
        likes_count=likes_count,
        added=payload,
    )
    return MessageResponse(message=LIKE_ADDED_MESSAGE)


async def unlike_post(
    session: AsyncSession,
    *,
    post_id: int,
    user_id: int,
    broadcaster: LikeEventBroadcaster,
) -> MessageResponse:
    await require_post(session, post_id)

    like = await find_like(session, post_id=post_id, user_id=user_id)
    if like is None:
        _raise_like_not_found()
    like_id = cast(Like, like).id

    try:
        result = await session.execute(
            delete(Like)
            .where(_eq(Like.id, like_id))
            .execution_options(synchronize_session=False)
        )
        # Another request removed the row between the lookup and the delete.
        if int(cast(Any, result).rowcount or 0) == 0:
            await session.rollback()
            _raise_like_not_found()
        await _adjust_likes_count(session, post_id, -1)
        likes_count = await _read_likes_count(session, post_id)
        await session.commit()
    except HTTPException:
        raise
    except Exception:
        await session.rollback()
        raise

    logger.info(
        "Like removed",
        extra={"post_id": post_id, "user_id": user_id, "likes_count": likes_count},
    )
    await _publish_like_events(
        broadcaster,
        post_id=post_id,
        likes_count=likes_count,
        removed_user_id=user_id,
    )
    return MessageResponse(message=LIKE_REMOVED_MESSAGE)


async def _publish_like_events(
    broadcaster: LikeEventBroadcaster,
    *,
    post_id: int,
    likes_count: int,
    added: LikePayload | None = None,
    removed_user_id: int | None = None,
) -> None:
    """Best-effort publication; the like/unlike is already committed."""
    try:
        if added is not None:
            await broadcaster.emit_like_added(post_id, added)
        if removed_user_id is not None:
            await broadcaster.emit_like_removed(post_id, removed_user_id)
        await broadcaster.emit_like_count_update(post_id, likes_count)
    except Exception as publish_error:
        logger.warning(
            "Failed to publish realtime like events",
            extra={"post_id": post_id},
            exc_info=publish_error,
        )


__all__ = [
    "LIKE_ADDED_MESSAGE",
    "LIKE_REMOVED_MESSAGE",
    "ALREADY_LIKED_DETAIL",
    "LIKE_NOT_FOUND_DETAIL",
    "find_like",
    "like_post",
    "unlike_post",
]
