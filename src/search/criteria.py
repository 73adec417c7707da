"""Build upstream dog search payloads from raw filters."""

from __future__ import annotations

from collections.abc import Iterable

from src.data.schemas import SearchCriteria, SearchFilters
from src.search.pagination import PAGE_SIZE

DEFAULT_SORT = "breed:asc"


def unique(values: Iterable[str]) -> list[str]:
    """Drop duplicates while keeping first-seen order."""
    return list(dict.fromkeys(values))


def build_search_criteria(
    filters: SearchFilters,
    zip_codes: Iterable[str] | None = None,
    page: int = 1,
    sort: str | None = None,
) -> SearchCriteria:
    """Map user filters and resolved zip codes onto a search payload.

    Optional fields are only populated when present: an empty breed or an
    empty zip code list leaves the constraint out entirely.

    Args:
        filters: Validated user filters.
        zip_codes: Zip codes resolved from the location filter, if any.
        page: 1-based page number; values below 1 are treated as 1.
        sort: Sort key overriding ``filters.sort``.

    Returns:
        SearchCriteria ready for ``FetchApiClient.search_dogs``.
    """
    page = max(1, page)
    breed = (filters.breed or "").strip()
    return SearchCriteria(
        breeds=[breed] if breed else [],
        zip_codes=unique(z for z in zip_codes or () if z),
        age_min=filters.age_min,
        age_max=filters.age_max,
        sort=sort or filters.sort or DEFAULT_SORT,
        size=PAGE_SIZE,
        offset=(page - 1) * PAGE_SIZE,
    )


def to_query_params(criteria: SearchCriteria) -> dict[str, str | list[str]]:
    """Serialize criteria to ``/dogs/search`` query parameters.

    List values are sent as repeated query keys by ``requests``.
    """
    params: dict[str, str | list[str]] = {
        "size": str(criteria.size),
        "from": str(criteria.offset),
        "sort": criteria.sort,
    }
    if criteria.breeds:
        params["breeds"] = list(criteria.breeds)
    if criteria.zip_codes:
        params["zipCodes"] = list(criteria.zip_codes)
    if criteria.age_min is not None:
        params["ageMin"] = str(criteria.age_min)
    if criteria.age_max is not None:
        params["ageMax"] = str(criteria.age_max)
    return params
