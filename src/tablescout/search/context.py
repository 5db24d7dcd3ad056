"""Location context: is a point in the service area, which neighborhood, how far from the center."""

from __future__ import annotations

from typing import Sequence

from tablescout.config.settings import Settings
from tablescout.core.geo import Coordinate, distance_from_reference
from tablescout.core.regions import Region, classify_region, is_within_bounds
from tablescout.domain.models import LocationContext


def describe_location(
    coordinate: Coordinate,
    *,
    service_area: Region,
    regions: Sequence[Region],
    center: Coordinate,
) -> LocationContext:
    in_area = is_within_bounds(coordinate, service_area)
    return LocationContext(
        coordinates=coordinate.as_pair(),
        in_service_area=in_area,
        # Neighborhood boxes are only meaningful inside the service area.
        neighborhood=classify_region(coordinate, regions) if in_area else None,
        distance_to_center_m=distance_from_reference(center, coordinate),
    )


def describe_location_with_settings(coordinate: Coordinate, settings: Settings) -> LocationContext:
    return describe_location(
        coordinate,
        service_area=settings.geo.service_area.to_region(),
        regions=settings.geo.region_list(),
        center=settings.geo.center_coordinate(),
    )
