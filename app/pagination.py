"""Page/size normalisation for the user listing."""

import math

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 10


def _to_int(value: str | int | None) -> int | None:
    if value is None:
        return None
    if isinstance(value, int):
        return value
    try:
        return int(value.strip())
    except ValueError:
        return None


def parse_page(value: str | int | None) -> int:
    """Zero-based page index. Missing, non-numeric or negative input becomes 0."""
    page = _to_int(value)
    if page is None or page < 0:
        return 0
    return page


def parse_size(value: str | int | None) -> int:
    """Page size in [1, MAX_PAGE_SIZE].

    Anything outside that range (including oversized requests) falls back to
    DEFAULT_PAGE_SIZE rather than being capped.
    """
    size = _to_int(value)
    if size is None or size < 1 or size > MAX_PAGE_SIZE:
        return DEFAULT_PAGE_SIZE
    return size


def total_pages(count: int, size: int) -> int:
    return math.ceil(count / size)
