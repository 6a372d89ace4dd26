"""Text post model."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Index, Integer, Text, func, text
from sqlmodel import Field, SQLModel


class Post(SQLModel, table=True):
    """A text post. ``likes_count`` caches the number of rows in ``likes``."""

    __tablename__ = "posts"
    __table_args__ = (
        CheckConstraint("likes_count >= 0", name="ck_posts_likes_count_non_negative"),
        Index("ix_posts_user_id_created_at", "user_id", "created_at"),
    )

    id: int | None = Field(
        default=None,
        sa_column=Column(Integer, primary_key=True, autoincrement=True),
    )
    content: str = Field(sa_column=Column(Text, nullable=False))
    user_id: int = Field(
        sa_column=Column(
            Integer,
            ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        )
    )
    likes_count: int = Field(
        default=0,
        sa_column=Column(Integer, nullable=False, server_default=text("0")),
    )
    created_at: datetime = Field(
        sa_column=Column(
            DateTime(timezone=True), server_default=func.now(), nullable=False, index=True
        )
    )
    updated_at: datetime = Field(
        sa_column=Column(
            DateTime(timezone=True),
            server_default=func.now(),
            onupdate=func.now(),
            nullable=False,
        )
    )
