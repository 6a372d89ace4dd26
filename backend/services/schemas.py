"""API and realtime payload schemas."""

from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from models import Like, Post, User


class UserPublicResponse(BaseModel):
    """Account fields safe to expose; never carries the password hash."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    first_name: str
    last_name: str
    alias: str
    birth_date: date
    email: str


class UserProfileResponse(UserPublicResponse):
    pass


class AuthResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserPublicResponse


class PostAuthorResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    first_name: str
    last_name: str
    alias: str


class LikeResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    post_id: int
    created_at: datetime

    @classmethod
    def from_like(cls, like: Like) -> "LikeResponse":
        if like.id is None:
            raise ValueError("Like record missing identifier")
        return cls(
            id=like.id,
            user_id=like.user_id,
            post_id=like.post_id,
            created_at=like.created_at,
        )


class PostResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    content: str
    user_id: int
    likes_count: int = 0
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_post(cls, post: Post) -> "PostResponse":
        if post.id is None:
            raise ValueError("Post record missing identifier")
        return cls(
            id=post.id,
            content=post.content,
            user_id=post.user_id,
            likes_count=post.likes_count,
            created_at=post.created_at,
            updated_at=post.updated_at,
        )


class PostDetailResponse(PostResponse):
    user: PostAuthorResponse
    likes: list[LikeResponse] = []

    @classmethod
    def from_post_with_author(
        cls,
        post: Post,
        author: PostAuthorResponse,
        likes: list[Like],
    ) -> "PostDetailResponse":
        base = PostResponse.from_post(post)
        return cls(
            **base.model_dump(),
            user=author,
            likes=[LikeResponse.from_like(like) for like in likes],
        )


class MessageResponse(BaseModel):
    message: str


class RealtimePayload(BaseModel):
    """Base for realtime frames; serialized with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class LikeUserPayload(RealtimePayload):
    id: int
    first_name: str
    last_name: str
    alias: str
    birth_date: date
    email: str

    @classmethod
    def from_public(cls, user: UserPublicResponse) -> "LikeUserPayload":
        return cls(**user.model_dump())


class LikePayload(RealtimePayload):
    id: int
    user: LikeUserPayload
    post_id: int
    created_at: datetime


class LikeAddedEvent(RealtimePayload):
    post_id: int
    like: LikePayload
    timestamp: datetime


class LikeRemovedEvent(RealtimePayload):
    post_id: int
    user_id: int
    timestamp: datetime


class LikeCountUpdateEvent(RealtimePayload):
    post_id: int
    like_count: int
    timestamp: datetime


def public_user(user: User) -> UserPublicResponse:
    return UserPublicResponse.model_validate(user)


__all__ = [
    "UserPublicResponse",
    "UserProfileResponse",
    "AuthResponse",
    "PostAuthorResponse",
    "LikeResponse",
    "PostResponse",
    "PostDetailResponse",
    "MessageResponse",
    "RealtimePayload",
    "LikeUserPayload",
    "LikePayload",
    "LikeAddedEvent",
    "LikeRemovedEvent",
    "LikeCountUpdateEvent",
    "public_user",
]
