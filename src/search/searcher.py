"""Dog search orchestration over the upstream dogs API."""

from __future__ import annotations

import logging

from src.data.schemas import (
    RedirectRequired,
    SearchDegraded,
    SearchFilters,
    SearchOk,
    SearchOutcome,
    SearchPage,
)
from src.errors import LocationSearchFailed, UpstreamRequestFailed
from src.search.api_client import FetchApiClient
from src.search.criteria import DEFAULT_SORT, build_search_criteria
from src.search.location import LOCATION_PAGE_SIZE, LocationResolver, is_zip_code
from src.search.pagination import MAX_ADDRESSABLE_PAGES, clamp_page, is_addressable

logger = logging.getLogger(__name__)


class DogSearcher:
    """Turn a filtered page request into a page of hydrated dogs.

    Location filters are resolved to zip codes first, the upstream search
    is run for the requested window, and the returned identifiers are
    hydrated into full records. Upstream failures never escape ``search``:
    they degrade to an empty page and are logged.

    Args:
        client: Upstream API client bound to the caller's token.
        default_sort: Sort key used when the filters carry none.
        location_page_size: Page size for location lookups.
    """

    def __init__(
        self,
        client: FetchApiClient,
        default_sort: str = DEFAULT_SORT,
        location_page_size: int = LOCATION_PAGE_SIZE,
    ) -> None:
        self.client = client
        self.default_sort = default_sort
        self.locations = LocationResolver(client, page_size=location_page_size)

    def list_breeds(self) -> list[str]:
        """Return the breed names available for filtering."""
        return self.client.get_breeds()

    def search(
        self,
        filters: SearchFilters,
        page: int = 1,
        authenticated: bool = True,
    ) -> SearchOutcome:
        """Search dogs for one page of results.

        Args:
            filters: Validated user filters.
            page: 1-based page number; values below 1 are treated as 1.
            authenticated: Whether the caller holds a usable session.

        Returns:
            SearchOk with the page, RedirectRequired when the page is beyond
            the addressable window, or SearchDegraded with an empty page when
            an upstream call failed.
        """
        page = max(1, page)

        if not authenticated:
            return SearchOk(page=SearchPage(current_page=page))

        if not is_addressable(page):
            logger.info("Page %d out of range, redirecting to %d", page, MAX_ADDRESSABLE_PAGES)
            return RedirectRequired(page_number=MAX_ADDRESSABLE_PAGES)

        try:
            return self._run_search(filters, page)
        except UpstreamRequestFailed as err:
            logger.exception("Dog search failed for page %d", page)
            return SearchDegraded(page=SearchPage(current_page=page), reason=str(err))

    def _run_search(self, filters: SearchFilters, page: int) -> SearchOk:
        zip_codes = self._zip_codes_for(filters.location)
        criteria = build_search_criteria(
            filters,
            zip_codes=zip_codes,
            page=page,
            sort=filters.sort or self.default_sort,
        )
        result = self.client.search_dogs(criteria)

        window = clamp_page(result.total, page)
        dogs = self.client.get_dogs(result.result_ids) if result.result_ids else []
        logger.info(
            "Page %d: %d dogs of %d reported matches",
            page,
            len(dogs),
            result.total,
        )
        return SearchOk(
            page=SearchPage(
                dogs=dogs,
                total=window.effective_total,
                current_page=page,
                total_pages=window.total_pages,
            )
        )

    def _zip_codes_for(self, location: str | None) -> list[str] | None:
        """Resolve a location filter, falling back to the raw zip code."""
        if not location or not location.strip():
            return None

        try:
            zip_codes = self.locations.resolve_zip_codes(location)
        except LocationSearchFailed:
            logger.warning("Location lookup failed for %r", location, exc_info=True)
            zip_codes = []

        if zip_codes:
            return zip_codes
        if is_zip_code(location):
            return [location.strip()]
        return None
