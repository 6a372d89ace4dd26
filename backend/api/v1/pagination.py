"""Offset paging for post listings."""

from fastapi import Response

MAX_PAGE_SIZE = 100
NEXT_OFFSET_HEADER = "X-Next-Offset"


def next_offset(*, offset: int, limit: int | None, has_more: bool) -> int | None:
    """Offset of the following page, or None when the listing is exhausted."""
    if limit is None or not has_more:
        return None
    return offset + limit


def advertise_next_page(
    response: Response,
    *,
    offset: int,
    limit: int | None,
    has_more: bool,
) -> None:
    following = next_offset(offset=offset, limit=limit, has_more=has_more)
    if following is not None:
        response.headers[NEXT_OFFSET_HEADER] = str(following)
