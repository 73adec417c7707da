"""Pydantic models for data validation and serialization."""

from __future__ import annotations

from enum import Enum
from typing import Literal, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Dog(BaseModel):
    """A dog record as returned by the upstream ``POST /dogs`` endpoint."""

    id: str = Field(description="Upstream dog identifier")
    img: str = Field(default="", description="Image URL")
    name: str = Field(default="Unknown")
    age: int = Field(default=0, description="Age in years")
    zip_code: str = Field(default="", description="Postal code of the shelter")
    breed: str = Field(default="")


class LocationKind(str, Enum):
    """Classification of a free-text location query."""

    ZIP = "zip"
    STATE = "state"
    CITY = "city"


class Location(BaseModel):
    """A postal location returned by ``POST /locations/search``."""

    zip_code: str
    latitude: float = 0.0
    longitude: float = 0.0
    city: str = ""
    state: str = ""
    county: str = ""


class LocationSearchResponse(BaseModel):
    """One page of location search results."""

    results: list[Location] = Field(default_factory=list)
    total: int = 0


class SearchFilters(BaseModel):
    """Raw user-supplied search filters.

    Age bounds are validated here so that bad input surfaces as a
    ``ValidationError`` the user can correct.
    """

    breed: str | None = None
    age_min: int | None = Field(default=None, ge=0)
    age_max: int | None = Field(default=None, ge=0)
    location: str | None = None
    sort: str | None = None

    @model_validator(mode="after")
    def _check_age_bounds(self) -> SearchFilters:
        if (
            self.age_min is not None
            and self.age_max is not None
            and self.age_min > self.age_max
        ):
            raise ValueError("age_min must not exceed age_max")
        return self


class SearchCriteria(BaseModel):
    """Normalized payload for the upstream ``GET /dogs/search`` call."""

    breeds: list[str] = Field(default_factory=list)
    zip_codes: list[str] = Field(default_factory=list)
    age_min: int | None = None
    age_max: int | None = None
    sort: str = "breed:asc"
    size: int = Field(gt=0)
    offset: int = Field(default=0, ge=0)

    @model_validator(mode="after")
    def _check_age_bounds(self) -> SearchCriteria:
        if (
            self.age_min is not None
            and self.age_max is not None
            and self.age_min > self.age_max
        ):
            raise ValueError("age_min must not exceed age_max")
        return self


class ResultPage(BaseModel):
    """Identifiers returned by the upstream search and its reported total."""

    model_config = ConfigDict(populate_by_name=True)

    result_ids: list[str] = Field(default_factory=list, alias="resultIds")
    total: int = 0
    next: str | None = None
    prev: str | None = None


class PageClamp(BaseModel):
    """Outcome of clamping an upstream total to the addressable window."""

    effective_total: int
    total_pages: int
    redirect_to: int | None = None


class SearchPage(BaseModel):
    """Page-ready search results for the presentation layer."""

    dogs: list[Dog] = Field(default_factory=list)
    total: int = 0
    current_page: int = 1
    total_pages: int = 0


class SearchOk(BaseModel):
    """The search completed and produced a page of results."""

    status: Literal["ok"] = "ok"
    page: SearchPage


class SearchDegraded(BaseModel):
    """The search failed upstream and degraded to an empty page."""

    status: Literal["degraded"] = "degraded"
    page: SearchPage
    reason: str = ""


class RedirectRequired(BaseModel):
    """The requested page is outside the addressable window."""

    status: Literal["redirect"] = "redirect"
    page_number: int


SearchOutcome = Union[SearchOk, SearchDegraded, RedirectRequired]


class FavoritesView(BaseModel):
    """Hydrated favorites plus the dog the upstream matched."""

    dogs: list[Dog] = Field(default_factory=list)
    matched_dog: Dog | None = None


class FavoritesUpdate(BaseModel):
    """Request body replacing the caller's favorites."""

    favorites: list[str] = Field(default_factory=list)
