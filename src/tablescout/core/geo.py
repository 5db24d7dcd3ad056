from __future__ import annotations
from dataclasses import dataclass
from math import atan2, cos, floor, isfinite, radians, sin, sqrt
from typing import Sequence

"""
Geospatial helpers.

We keep a tiny geometry layer here so the search and geocoding modules can do
distance calculations without pulling in heavier GIS dependencies.

Coordinates are (longitude, latitude) in decimal degrees, longitude first, the
same order map providers use for `coordinates` arrays.
"""

EARTH_RADIUS_M = 6_371_000


class InvalidCoordinateError(ValueError):
    """Raised when a longitude/latitude falls outside valid degree ranges."""

    def __init__(self, lng: float, lat: float):
        super().__init__(f"Invalid coordinate (lng={lng}, lat={lat}); expected lng in [-180, 180], lat in [-90, 90].")
        self.lng = lng
        self.lat = lat


@dataclass(frozen=True)
class Coordinate:
    """A longitude/latitude pair in decimal degrees."""

    lng: float
    lat: float

    @classmethod
    def from_pair(cls, pair: Sequence[float]) -> "Coordinate":
        """Build from a `[lng, lat]` pair."""
        if len(pair) != 2:
            raise ValueError(f"Expected a [lng, lat] pair, got {len(pair)} values.")
        return cls(lng=float(pair[0]), lat=float(pair[1]))

    def as_pair(self) -> tuple[float, float]:
        return (self.lng, self.lat)


def validate_coordinate(c: Coordinate) -> Coordinate:
    """Return `c` unchanged, or raise `InvalidCoordinateError`."""
    lng, lat = c.lng, c.lat
    if not (isfinite(lng) and isfinite(lat)):
        raise InvalidCoordinateError(lng, lat)
    if not (-180.0 <= lng <= 180.0 and -90.0 <= lat <= 90.0):
        raise InvalidCoordinateError(lng, lat)
    return c


def haversine_distance_m(a: Coordinate, b: Coordinate) -> float:
    """Compute great-circle distance in meters between two points."""
    validate_coordinate(a)
    validate_coordinate(b)

    lat1 = radians(a.lat)
    lat2 = radians(b.lat)
    dlat = radians(b.lat - a.lat)
    dlng = radians(b.lng - a.lng)

    h = sin(dlat / 2) ** 2 + cos(lat1) * cos(lat2) * sin(dlng / 2) ** 2
    # Rounding can push h a hair outside [0, 1] near antipodal points.
    h = min(1.0, max(0.0, h))
    return EARTH_RADIUS_M * 2 * atan2(sqrt(h), sqrt(1 - h))


def round_meters(distance_m: float) -> int:
    """Round a non-negative distance to whole meters, halves going up (2.5 -> 3)."""
    return int(floor(float(distance_m) + 0.5))


def distance_from_reference(reference: Coordinate, target: Coordinate) -> int:
    """Distance from `reference` to `target` in whole meters."""
    return round_meters(haversine_distance_m(reference, target))


def map_link(c: Coordinate) -> str:
    """Link that opens the point in an external map application."""
    return f"https://www.google.com/maps/search/?api=1&query={c.lat},{c.lng}"
