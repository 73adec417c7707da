"""Central application configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True)
class Config:
    """Central application configuration.

    Reads from environment variables with sensible defaults.
    All paths are resolved relative to project root.
    """

    # Upstream dogs API
    api_url: str = field(
        default_factory=lambda: os.getenv(
            "FETCH_API_URL", "https://frontend-take-home-service.fetch.com"
        )
    )
    request_timeout: float = field(
        default_factory=lambda: float(os.getenv("REQUEST_TIMEOUT", "30"))
    )

    # Search
    default_sort: str = "breed:asc"
    location_page_size: int = 100

    # Favorites
    favorites_path: Path = field(
        default_factory=lambda: Path(os.getenv("FAVORITES_PATH", "data/favorites.json"))
    )
    favorites_max_age: int = 60 * 60 * 24 * 30

    # Server
    host: str = field(default_factory=lambda: os.getenv("HOST", "0.0.0.0"))
    port: int = field(default_factory=lambda: int(os.getenv("PORT", "8000")))


def get_config() -> Config:
    """Get application configuration.

    Returns:
        Config instance with values from environment or defaults.
    """
    return Config()
