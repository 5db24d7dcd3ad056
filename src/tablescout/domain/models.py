"""
Domain models (Pydantic).

These types represent the stable "contract" between layers:
- catalog entities (`Venue`, `GamingTable`, `Host`)
- search inputs (`SearchQuery`, `ProximityConstraints`)
- annotated output (`AnnotatedEntity`, `SearchResult`, `LocationContext`)

Coordinates are `[lng, lat]` pairs on the wire (longitude first). They are not
range-checked here: the geo engine raises `InvalidCoordinateError` for bad
upstream data so callers can tell it apart from a malformed request body.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, Field, SerializeAsAny, field_validator

from tablescout.core.geo import Coordinate


class Location(BaseModel):
    """Where an entity is: an optional street address plus `[lng, lat]`."""

    address: str | None = None
    coordinates: tuple[float, float]

    def to_coordinate(self) -> Coordinate:
        return Coordinate.from_pair(self.coordinates)


class LocatedEntity(BaseModel):
    """Any record the proximity engine can place: an id, maybe a location, maybe a rating."""

    id: str
    location: Location | None = None
    rating: float | None = None

    @property
    def coordinate(self) -> Coordinate | None:
        return self.location.to_coordinate() if self.location else None


class Availability(BaseModel):
    status: Literal["available", "occupied", "maintenance"] = "available"
    until: str | None = None


class GamingTable(LocatedEntity):
    """A bookable gaming table, standalone or inside a venue."""

    name: str
    description: str | None = None
    images: list[str] = Field(default_factory=list)
    availability: Availability = Field(default_factory=Availability)
    capacity: int | None = Field(default=None, ge=1)
    table_number: str | None = None
    amenities: list[str] = Field(default_factory=list)
    review_count: int | None = Field(default=None, ge=0)
    host_id: str | None = None

    venue_id: str | None = None
    venue_name: str | None = None
    venue_address: str | None = None

    @field_validator("amenities")
    @classmethod
    def _strip_amenities(cls, amenities: list[str]) -> list[str]:
        return [a.strip() for a in amenities if a and a.strip()]


class Venue(LocatedEntity):
    """A place hosting several tables; its rating and address apply to all of them."""

    name: str
    description: str | None = None
    images: list[str] = Field(default_factory=list)
    review_count: int | None = Field(default=None, ge=0)
    amenities: list[str] = Field(default_factory=list)
    tables: list[GamingTable] = Field(default_factory=list)


class Host(BaseModel):
    """Whoever runs a table. Contact details stay server-side; guests use the contact form."""

    id: str
    name: str
    bio: str | None = None
    avatar_url: str | None = None
    is_business: bool = False
    email: str | None = None
    phone: str | None = None

    def public_profile(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude={"email", "phone"})


class Catalog(BaseModel):
    """Root of the catalog JSON file."""

    hosts: list[Host] = Field(default_factory=list)
    venues: list[Venue] = Field(default_factory=list)
    tables: list[GamingTable] = Field(default_factory=list)


class ProximityConstraints(BaseModel):
    """Thresholds for a proximity search. `min_rating` is 0..5 by convention only."""

    max_distance_m: float = Field(..., ge=0)
    min_rating: float = 0.0


class AnnotatedEntity(BaseModel):
    """An entity plus its computed distance (whole meters) and region label."""

    entity: SerializeAsAny[LocatedEntity]
    distance_m: int | None = None
    region_name: str | None = None


class SearchQuery(BaseModel):
    """Search request. Omitted fields fall back to configured defaults."""

    reference: tuple[float, float] | None = None
    max_distance_m: float | None = Field(default=None, ge=0)
    min_rating: float | None = None
    sort: Literal["none", "distance", "rating"] | None = None
    max_results: int | None = Field(default=None, ge=1, le=200)
    classify_regions: bool = True
    settings_overrides: dict[str, Any] | None = None


class SearchResult(BaseModel):
    generated_at: datetime
    query: SearchQuery
    results: list[AnnotatedEntity]
    meta: dict[str, Any] = Field(default_factory=dict)


class LocationContext(BaseModel):
    """Where a point sits relative to the service area and city center."""

    coordinates: tuple[float, float]
    in_service_area: bool
    neighborhood: str | None = None
    distance_to_center_m: int
