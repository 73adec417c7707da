"""HTTP client for the upstream dogs API."""

from __future__ import annotations

import logging
from typing import Any, TypeVar

import requests
from pydantic import BaseModel, ValidationError

from src.data.schemas import Dog, LocationSearchResponse, ResultPage, SearchCriteria
from src.errors import UpstreamRequestFailed
from src.search.criteria import to_query_params

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

AUTH_COOKIE_NAME = "fetch-access-token"
MAX_IDS_PER_REQUEST = 100


class FetchApiClient:
    """Authenticated access to the upstream dogs and locations endpoints.

    Every call carries the caller's access token as a
    ``fetch-access-token`` cookie header. Failures of any kind surface as
    ``UpstreamRequestFailed``.

    Args:
        base_url: Root URL of the upstream API.
        auth_token: Opaque access token, or None for ambient credentials.
        session: Shared requests session; a private one is created if None.
        timeout: Per-request timeout in seconds.
    """

    def __init__(
        self,
        base_url: str,
        auth_token: str | None = None,
        session: requests.Session | None = None,
        timeout: float = 30,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.auth_token = auth_token
        self.session = session or requests.Session()
        self.timeout = timeout

    def get_breeds(self) -> list[str]:
        """Fetch every breed name known to the upstream."""
        data = self._request("GET", "/dogs/breeds")
        if not isinstance(data, list):
            raise UpstreamRequestFailed("GET /dogs/breeds returned a non-list body")
        return [str(breed) for breed in data]

    def search_dogs(self, criteria: SearchCriteria) -> ResultPage:
        """Run a dog search and return the matching identifiers.

        Args:
            criteria: Normalized search payload.

        Returns:
            ResultPage with ids for the requested window and the total.
        """
        data = self._request("GET", "/dogs/search", params=to_query_params(criteria))
        return _parse(ResultPage, data, "/dogs/search")

    def get_dogs(self, dog_ids: list[str]) -> list[Dog]:
        """Fetch full records for *dog_ids*, in the same order.

        Requests are split into batches of 100 identifiers. Ids the upstream
        does not return are left out.

        Args:
            dog_ids: Identifiers to hydrate.

        Returns:
            Dog records ordered like *dog_ids*.
        """
        by_id: dict[str, Dog] = {}
        for start in range(0, len(dog_ids), MAX_IDS_PER_REQUEST):
            batch = dog_ids[start:start + MAX_IDS_PER_REQUEST]
            records = self._request("POST", "/dogs", json=batch)
            if not isinstance(records, list):
                raise UpstreamRequestFailed("POST /dogs returned a non-list body")
            for record in records:
                dog = _parse(Dog, record, "/dogs")
                by_id[dog.id] = dog
        return [by_id[dog_id] for dog_id in dog_ids if dog_id in by_id]

    def match(self, dog_ids: list[str]) -> str:
        """Ask the upstream to pick one dog out of *dog_ids*."""
        data = self._request("POST", "/dogs/match", json=dog_ids)
        if not isinstance(data, dict) or "match" not in data:
            raise UpstreamRequestFailed("POST /dogs/match returned no match")
        return str(data["match"])

    def search_locations(self, body: dict[str, Any]) -> LocationSearchResponse:
        """Run one ``/locations/search`` request with the given body."""
        data = self._request("POST", "/locations/search", json=body)
        return _parse(LocationSearchResponse, data, "/locations/search")

    def _headers(self, has_body: bool) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if has_body:
            headers["Content-Type"] = "application/json"
        if self.auth_token:
            headers["Cookie"] = f"{AUTH_COOKIE_NAME}={self.auth_token}"
        return headers

    def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict | None = None,
        json: Any = None,
    ) -> Any:
        """Send a request and decode the JSON response.

        Raises:
            UpstreamRequestFailed: On transport errors, non-2xx statuses,
                or a body that is not valid JSON.
        """
        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(
                method,
                url,
                params=params,
                json=json,
                headers=self._headers(json is not None),
                timeout=self.timeout,
            )
        except requests.RequestException as err:
            raise UpstreamRequestFailed(f"{method} {path} failed: {err}") from err

        if not response.ok:
            logger.error(
                "Upstream %s %s returned %d %s: %s",
                method,
                path,
                response.status_code,
                response.reason,
                response.text,
            )
            raise UpstreamRequestFailed(
                f"{method} {path} returned {response.status_code}",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as err:
            raise UpstreamRequestFailed(
                f"{method} {path} returned invalid JSON",
                status_code=response.status_code,
            ) from err


def _parse(model: type[ModelT], data: Any, path: str) -> ModelT:
    """Validate an upstream payload, reporting bad shapes as upstream failures."""
    try:
        return model.model_validate(data)
    except ValidationError as err:
        raise UpstreamRequestFailed(f"{path} returned an unexpected payload: {err}") from err


def create_api_client(
    base_url: str,
    auth_token: str | None = None,
    session: requests.Session | None = None,
    timeout: float = 30,
) -> FetchApiClient:
    """Create a client bound to one caller's access token.

    Args:
        base_url: Root URL of the upstream API.
        auth_token: The caller's ``fetch-access-token`` value.
        session: Shared requests session to reuse connections.
        timeout: Per-request timeout in seconds.

    Returns:
        FetchApiClient instance (not yet verified).
    """
    client = FetchApiClient(base_url, auth_token, session=session, timeout=timeout)
    logger.debug("Created upstream client for %s", client.base_url)
    return client
