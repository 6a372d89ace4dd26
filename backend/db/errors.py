"""Classify integrity errors raised while writing users and likes."""

from __future__ import annotations

from typing import Any

from sqlalchemy.exc import IntegrityError

UNIQUE_VIOLATION_SQLSTATE = "23505"

# asyncpg and psycopg report the SQLSTATE; SQLite only words it.
_UNIQUE_MESSAGE_MARKERS = ("duplicate key", "unique constraint")


def _driver_sqlstate(driver_error: Any) -> str | None:
    for attribute in ("sqlstate", "pgcode"):
        code = getattr(driver_error, attribute, None)
        if code:
            return str(code)
    return None


def is_unique_violation(error: IntegrityError) -> bool:
    """Tell a duplicate email, alias or like apart from other constraint failures."""
    driver_error = error.orig
    if _driver_sqlstate(driver_error) == UNIQUE_VIOLATION_SQLSTATE:
        return True
    text = str(driver_error if driver_error is not None else error).lower()
    return any(marker in text for marker in _UNIQUE_MESSAGE_MARKERS)


__all__ = ["UNIQUE_VIOLATION_SQLSTATE", "is_unique_violation"]
