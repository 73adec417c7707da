"""Hydrate a favorites shortlist and pick a match from it."""

from __future__ import annotations

import logging

from src.data.schemas import FavoritesView
from src.search.api_client import FetchApiClient

logger = logging.getLogger(__name__)


def load_favorites(client: FetchApiClient, favorite_ids: list[str]) -> FavoritesView:
    """Fetch the favorite dogs and ask the upstream for a single match.

    Args:
        client: Upstream API client bound to the caller's token.
        favorite_ids: Ids from the favorites cookie.

    Returns:
        FavoritesView with the hydrated dogs and the matched dog, which is
        None if the upstream picked an id that was not hydrated.

    Raises:
        UpstreamRequestFailed: If either upstream call fails.
    """
    if not favorite_ids:
        return FavoritesView()

    dogs = client.get_dogs(favorite_ids)
    match_id = client.match(favorite_ids)
    matched_dog = next((dog for dog in dogs if dog.id == match_id), None)

    logger.info(
        "Loaded %d favorites, matched %s",
        len(dogs),
        match_id if matched_dog else "nothing",
    )
    return FavoritesView(dogs=dogs, matched_dog=matched_dog)
