"""Fixed addressable result window for dog search pagination."""

from __future__ import annotations

from src.data.schemas import PageClamp

PAGE_SIZE = 24
MAX_ADDRESSABLE_PAGES = 416
MAX_ADDRESSABLE_RESULTS = PAGE_SIZE * MAX_ADDRESSABLE_PAGES


def is_addressable(page: int) -> bool:
    """Return True if *page* (1-based) lies inside the addressable window."""
    return page <= MAX_ADDRESSABLE_PAGES


def clamp_page(reported_total: int, requested_page: int) -> PageClamp:
    """Clamp an upstream match count to what can actually be paged through.

    The page count is the fixed window size rather than a value derived from
    the effective total, so navigation always offers the full range.

    Args:
        reported_total: Match count reported by the upstream search.
        requested_page: 1-based page the caller asked for.

    Returns:
        PageClamp with the effective total, page count, and a redirect
        target when the requested page is not addressable.
    """
    effective_total = min(reported_total, MAX_ADDRESSABLE_RESULTS)
    redirect_to = None if is_addressable(requested_page) else MAX_ADDRESSABLE_PAGES
    return PageClamp(
        effective_total=effective_total,
        total_pages=MAX_ADDRESSABLE_PAGES,
        redirect_to=redirect_to,
    )
