"""Classify free-text locations and resolve them to postal codes."""

from __future__ import annotations

import logging
import re

from src.data.schemas import Location, LocationKind
from src.errors import LocationSearchFailed, UpstreamRequestFailed
from src.search.api_client import FetchApiClient
from src.search.criteria import unique

logger = logging.getLogger(__name__)

_ZIP_PATTERN = re.compile(r"[0-9]{5}")
_STATE_PATTERN = re.compile(r"[A-Za-z]{2}")

LOCATION_PAGE_SIZE = 100


def is_zip_code(value: str) -> bool:
    """Return True if *value* is exactly five ASCII digits once trimmed."""
    return _ZIP_PATTERN.fullmatch(value.strip()) is not None


def is_state_code(value: str) -> bool:
    """Return True if *value* is exactly two ASCII letters once trimmed."""
    return _STATE_PATTERN.fullmatch(value.strip()) is not None


def classify_location(raw: str) -> LocationKind:
    """Classify a location query as a zip code, state code, or city name."""
    if is_zip_code(raw):
        return LocationKind.ZIP
    if is_state_code(raw):
        return LocationKind.STATE
    return LocationKind.CITY


def zip_only_location(zip_code: str) -> Location:
    """Build a placeholder location carrying nothing but a zip code."""
    return Location(zip_code=zip_code)


class LocationResolver:
    """Expand a location query into the matching upstream locations.

    Zip codes are taken at face value without a lookup. State codes get a
    single upstream page. City names are paged through until every match
    reported by the upstream has been collected.

    Args:
        client: Upstream API client.
        page_size: Number of locations requested per call.
    """

    def __init__(
        self,
        client: FetchApiClient,
        page_size: int = LOCATION_PAGE_SIZE,
    ) -> None:
        self.client = client
        self.page_size = page_size

    def resolve(self, raw: str) -> list[Location]:
        """Resolve *raw* into a list of locations.

        Args:
            raw: Zip code, two-letter state code, or city name.

        Returns:
            Matching locations. City lookups that fail part-way return what
            was collected before the failure.

        Raises:
            LocationSearchFailed: If the first upstream request fails.
        """
        query = raw.strip()
        kind = classify_location(query)

        if kind is LocationKind.ZIP:
            return [zip_only_location(query)]

        if kind is LocationKind.STATE:
            body = {"states": [query.upper()], "size": self.page_size}
        else:
            body = {"city": query, "size": self.page_size}

        try:
            first = self.client.search_locations(body)
        except UpstreamRequestFailed as err:
            raise LocationSearchFailed(
                f"Location search for {query!r} failed: {err}",
                status_code=err.status_code,
            ) from err

        if kind is LocationKind.STATE or first.total <= len(first.results):
            return list(first.results)

        return self._collect_remaining(body, list(first.results), first.total)

    def resolve_zip_codes(self, raw: str) -> list[str]:
        """Resolve *raw* and keep only the distinct zip codes, in order."""
        return unique(location.zip_code for location in self.resolve(raw))

    def _collect_remaining(
        self,
        body: dict,
        results: list[Location],
        total: int,
    ) -> list[Location]:
        offset = len(results)
        while len(results) < total:
            try:
                page = self.client.search_locations({**body, "from": offset})
            except UpstreamRequestFailed as err:
                logger.warning(
                    "Location paging stopped at offset %d of %d: %s",
                    offset,
                    total,
                    err,
                )
                break

            if not page.results:
                break
            results.extend(page.results)
            offset += len(page.results)

        return results
