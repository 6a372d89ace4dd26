"""Business logic services."""

from .likes import like_post, unlike_post
from .posts import create_post, get_post, list_posts, list_posts_by_author
from .realtime import (
    LikeEventBroadcaster,
    get_like_broadcaster,
    set_like_broadcaster,
)
from .users import find_user_by_alias, find_user_by_id, get_profile

__all__ = [
    "like_post",
    "unlike_post",
    "create_post",
    "get_post",
    "list_posts",
    "list_posts_by_author",
    "LikeEventBroadcaster",
    "get_like_broadcaster",
    "set_like_broadcaster",
    "find_user_by_alias",
    "find_user_by_id",
    "get_profile",
]
