"""Shared test fixtures for the Fetch a Friend test suite."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from unittest.mock import MagicMock

import pytest
from requests.cookies import RequestsCookieJar

from src.data.schemas import Dog, Location, LocationSearchResponse, ResultPage
from src.favorites.mirrors import CookieJarMirror, JsonFileMirror
from src.search.api_client import FetchApiClient


@pytest.fixture
def sample_dog() -> Dog:
    """Create a sample Dog for testing."""
    return Dog(
        id="dog-1",
        img="https://example.com/dog-1.jpg",
        name="Buddy",
        age=3,
        zip_code="90210",
        breed="Labrador",
    )


@pytest.fixture
def sample_dogs() -> list[Dog]:
    """Create three dogs with distinct ids."""
    return [
        Dog(id=f"dog-{i}", name=f"Dog {i}", age=i, zip_code="90210", breed="Beagle")
        for i in range(1, 4)
    ]


@pytest.fixture
def mock_client(sample_dogs: list[Dog]) -> MagicMock:
    """Create a mock upstream client returning one page of three dogs."""
    mock = MagicMock(spec=FetchApiClient)
    mock.get_breeds.return_value = ["Beagle", "Labrador"]
    mock.search_dogs.return_value = ResultPage(
        result_ids=[dog.id for dog in sample_dogs], total=3
    )
    mock.get_dogs.return_value = sample_dogs
    mock.match.return_value = "dog-2"
    mock.search_locations.return_value = LocationSearchResponse(results=[], total=0)
    return mock


@pytest.fixture
def make_locations() -> Callable[..., list[Location]]:
    """Return a builder for locations with sequential zip codes."""

    def _make(count: int, start: int = 0) -> list[Location]:
        return [
            Location(zip_code=f"{10000 + start + i:05d}", city="Springfield", state="IL")
            for i in range(count)
        ]

    return _make


@pytest.fixture
def durable_mirror(tmp_path: Path) -> JsonFileMirror:
    """Create a file-backed durable mirror in a temp directory."""
    return JsonFileMirror(tmp_path / "data" / "favorites.json")


@pytest.fixture
def cookie_jar() -> RequestsCookieJar:
    """Create an empty cookie jar."""
    return RequestsCookieJar()


@pytest.fixture
def cookie_mirror(cookie_jar: RequestsCookieJar) -> CookieJarMirror:
    """Create a cookie mirror over the shared jar."""
    return CookieJarMirror(cookie_jar)
