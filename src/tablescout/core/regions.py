"""
Region classification over named bounding boxes.

A region is an axis-aligned lng/lat rectangle (a neighborhood, a city's bounds).
Regions may overlap, so classification walks an ordered list and returns the
first match; putting a city-wide box last gives a city-level fallback label.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from tablescout.core.geo import Coordinate, validate_coordinate


@dataclass(frozen=True)
class Region:
    """A named bounding box; all four edges belong to the region."""

    name: str
    lng_min: float
    lng_max: float
    lat_min: float
    lat_max: float

    def __post_init__(self) -> None:
        if self.lng_min > self.lng_max:
            raise ValueError(f"Region '{self.name}': lng_min must be <= lng_max")
        if self.lat_min > self.lat_max:
            raise ValueError(f"Region '{self.name}': lat_min must be <= lat_max")

    @property
    def center(self) -> Coordinate:
        return Coordinate(lng=(self.lng_min + self.lng_max) / 2, lat=(self.lat_min + self.lat_max) / 2)


def _contains(bounds: Region, coordinate: Coordinate) -> bool:
    return bounds.lng_min <= coordinate.lng <= bounds.lng_max and bounds.lat_min <= coordinate.lat <= bounds.lat_max


def is_within_bounds(coordinate: Coordinate, bounds: Region) -> bool:
    """Return True when `coordinate` lies inside `bounds` (edges inclusive)."""
    return _contains(bounds, validate_coordinate(coordinate))


def classify_region(coordinate: Coordinate, regions: Sequence[Region]) -> str | None:
    """Return the name of the first region containing `coordinate`, or None."""
    validate_coordinate(coordinate)
    for region in regions:
        if _contains(region, coordinate):
            return region.name
    return None
