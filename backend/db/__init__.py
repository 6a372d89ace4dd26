"""Database helpers."""

from .errors import is_unique_violation
from .session import async_engine, async_session_maker, build_engine, get_session

__all__ = [
    "async_engine",
    "async_session_maker",
    "build_engine",
    "get_session",
    "is_unique_violation",
]
