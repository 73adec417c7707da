"""FastAPI routes for dog search, breeds, favorites, and auth status."""

from __future__ import annotations

import logging
import re
from typing import Any

from fastapi import APIRouter, HTTPException, Query, Request
from fastapi.responses import JSONResponse, RedirectResponse, Response
from pydantic import ValidationError

from src.data.schemas import (
    FavoritesUpdate,
    FavoritesView,
    RedirectRequired,
    SearchFilters,
)
from src.errors import MirrorWriteFailed, UpstreamRequestFailed
from src.favorites.loader import load_favorites
from src.favorites.mirrors import (
    FAVORITES_KEY,
    ResponseCookieMirror,
    check_cookie_size,
    parse_favorites_cookie,
    serialize_favorites,
)
from src.favorites.store import FavoritesStore
from src.search.api_client import AUTH_COOKIE_NAME, FetchApiClient
from src.search.criteria import unique
from src.search.searcher import DogSearcher

logger = logging.getLogger(__name__)

router = APIRouter()

_JWT_PATTERN = re.compile(r"[A-Za-z0-9_-]+\.[A-Za-z0-9_-]+\.[A-Za-z0-9_-]*")


def _auth_token(request: Request) -> str | None:
    """Return the caller's access token if it has the shape of a JWT."""
    token = request.cookies.get(AUTH_COOKIE_NAME)
    if token and _JWT_PATTERN.fullmatch(token):
        return token
    return None


def _client_for(request: Request, token: str | None) -> FetchApiClient:
    return request.app.state.client_factory(token)


def _require_token(request: Request) -> str:
    token = _auth_token(request)
    if token is None:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return token


@router.get("/api/dogs")
def search_dogs(
    request: Request,
    page: int = 1,
    breed: str | None = None,
    age_min: int | None = Query(default=None, alias="ageMin"),
    age_max: int | None = Query(default=None, alias="ageMax"),
    location: str | None = None,
    sort: str | None = None,
) -> Response:
    """Search dogs for one page of results.

    Redirects to the last addressable page when *page* is past the window.

    Args:
        request: FastAPI request object.
        page: 1-based page number.
        breed: Breed name to filter by.
        age_min: Minimum age in years.
        age_max: Maximum age in years.
        location: Zip code, state code, or city name.
        sort: Upstream sort key such as ``breed:asc``.

    Returns:
        JSON page of dogs with a ``status`` of ``ok`` or ``degraded``.
    """
    try:
        filters = SearchFilters(
            breed=breed or None,
            age_min=age_min,
            age_max=age_max,
            location=location or None,
            sort=sort or None,
        )
    except ValidationError as err:
        raise HTTPException(
            status_code=422,
            detail=err.errors(include_url=False, include_context=False),
        ) from err

    token = _auth_token(request)
    config = request.app.state.config
    searcher = DogSearcher(
        _client_for(request, token),
        default_sort=config.default_sort,
        location_page_size=config.location_page_size,
    )
    outcome = searcher.search(filters, page=page, authenticated=token is not None)

    if isinstance(outcome, RedirectRequired):
        target = request.url.include_query_params(page=outcome.page_number)
        return RedirectResponse(url=str(target), status_code=303)

    return JSONResponse({"status": outcome.status, **outcome.page.model_dump()})


@router.get("/api/breeds")
def list_breeds(request: Request) -> list[str]:
    """Return the breed names available for filtering."""
    token = _require_token(request)
    try:
        return _client_for(request, token).get_breeds()
    except UpstreamRequestFailed as err:
        logger.warning("Failed to fetch breeds: %s", err)
        raise HTTPException(status_code=502, detail="Failed to fetch breeds") from err


@router.get("/api/favorites", response_model=FavoritesView)
def get_favorites(request: Request) -> FavoritesView:
    """Hydrate the favorites cookie and pick a match from it."""
    token = _require_token(request)
    favorite_ids = parse_favorites_cookie(request.cookies.get(FAVORITES_KEY))
    try:
        return load_favorites(_client_for(request, token), favorite_ids)
    except UpstreamRequestFailed as err:
        logger.warning("Failed to load favorites: %s", err)
        raise HTTPException(status_code=502, detail="Failed to load favorites") from err


@router.put("/api/favorites")
def put_favorites(
    request: Request, update: FavoritesUpdate, response: Response
) -> dict[str, Any]:
    """Replace the caller's favorites and mirror them into the cookie.

    An empty set deletes the cookie rather than storing an empty array. A
    set too large for the cookie is rejected with 413 and the existing
    cookie is left alone.
    """
    _require_token(request)
    favorite_ids = unique(update.favorites)
    try:
        check_cookie_size(serialize_favorites(favorite_ids))
    except MirrorWriteFailed as err:
        raise HTTPException(status_code=413, detail=str(err)) from err

    cookie = ResponseCookieMirror(
        response,
        current=request.cookies.get(FAVORITES_KEY),
        max_age=request.app.state.config.favorites_max_age,
    )
    store = FavoritesStore(None, cookie, initial=cookie.read())
    store.replace(favorite_ids)
    return {"success": True, "favorites": store.as_list()}


@router.get("/api/auth/check")
async def auth_check(request: Request) -> Response:
    """Report whether the caller's access token looks usable.

    Returns:
        200 with ``{"status": "authenticated"}``, or an empty 401.
    """
    if _auth_token(request) is None:
        return Response(status_code=401)
    return JSONResponse({"status": "authenticated"})
