"""Authentication domain services."""

from .accounts import (
    INVALID_CREDENTIALS_DETAIL,
    REGISTRATION_CONFLICT_DETAIL,
    login,
    register_account,
)
from .identity_resolution import (
    normalize_alias,
    normalize_email,
    registration_conflict_exists,
    resolve_login_user,
)
from .tokens import (
    UNAUTHORIZED_DETAIL,
    extract_user_id,
    issue_access_token,
    resolve_token_user,
)

__all__ = [
    "INVALID_CREDENTIALS_DETAIL",
    "REGISTRATION_CONFLICT_DETAIL",
    "UNAUTHORIZED_DETAIL",
    "login",
    "register_account",
    "normalize_alias",
    "normalize_email",
    "registration_conflict_exists",
    "resolve_login_user",
    "extract_user_id",
    "issue_access_token",
    "resolve_token_user",
]
