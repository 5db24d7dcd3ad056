"""
API routes.

Endpoints:
- POST `/api/tables/search`: proximity search (distance + rating thresholds, region labels).
- GET  `/api/tables/{table_id}`: one table plus its host profile and location context.
- GET  `/api/regions`: service area, city center, and neighborhood boxes in priority order.
- POST `/api/locations/describe`: location context for an arbitrary point.
- GET  `/api/geocode`: address -> coordinates (+ context), via Mapbox.
- GET  `/api/settings`: public settings for the frontend (token redacted).
"""

from __future__ import annotations

import logging
from functools import lru_cache

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from tablescout.catalog.loader import find_table, hosts_by_id, load_catalog, load_tables
from tablescout.config.settings import get_settings
from tablescout.core.geo import Coordinate, map_link
from tablescout.domain.models import GamingTable, Host, SearchQuery
from tablescout.geocoding.mapbox_client import GeocodingError, MapboxGeocoder
from tablescout.search.context import describe_location_with_settings
from tablescout.search.service import search_tables

logger = logging.getLogger(__name__)

router = APIRouter()


class DescribeLocationRequest(BaseModel):
    coordinates: tuple[float, float]


def _bad_request(e: ValueError) -> HTTPException:
    return HTTPException(status_code=400, detail={"code": "VALIDATION_ERROR", "message": str(e)})


@lru_cache
def _tables() -> list[GamingTable]:
    return load_tables(get_settings().catalog.path)


@lru_cache
def _hosts() -> dict[str, Host]:
    return hosts_by_id(load_catalog(get_settings().catalog.path))


@lru_cache
def _geocoder() -> MapboxGeocoder:
    return MapboxGeocoder(get_settings())


@router.post("/api/tables/search")
def post_search(query: SearchQuery) -> dict:
    """Run the proximity search with validated query input."""
    try:
        result = search_tables(query, settings=get_settings(), tables=_tables())
    except ValueError as e:
        raise _bad_request(e) from e
    # Dump here rather than via response_model so table fields survive serialization.
    return result.model_dump(mode="json")


@router.get("/api/tables/{table_id}")
def get_table(table_id: str) -> dict:
    """Return one table with its host profile, plus location context when it has coordinates."""
    table = find_table(_tables(), table_id)
    if table is None:
        raise HTTPException(status_code=404, detail={"code": "NOT_FOUND", "message": f"Unknown table '{table_id}'."})
    coordinate = table.coordinate
    context = None
    link = None
    if coordinate is not None:
        try:
            context = describe_location_with_settings(coordinate, get_settings()).model_dump(mode="json")
        except ValueError as e:
            raise _bad_request(e) from e
        link = map_link(coordinate)
    host = _hosts().get(table.host_id) if table.host_id else None
    return {
        "table": table.model_dump(mode="json"),
        "host": host.public_profile() if host else None,
        "context": context,
        "map_link": link,
    }


@router.get("/api/regions")
def get_regions() -> dict:
    """Return the configured service area and neighborhood boxes (priority order)."""
    geo = get_settings().geo
    return {
        "center": list(geo.center),
        "service_area": geo.service_area.model_dump(mode="json"),
        "regions": [r.model_dump(mode="json") for r in geo.regions],
    }


@router.post("/api/locations/describe")
def post_describe_location(body: DescribeLocationRequest) -> dict:
    """Return service-area membership, neighborhood and distance to center for a point."""
    try:
        context = describe_location_with_settings(Coordinate.from_pair(body.coordinates), get_settings())
    except ValueError as e:
        raise _bad_request(e) from e
    return context.model_dump(mode="json")


@router.get("/api/geocode")
def get_geocode(address: str) -> dict:
    """Geocode an address and return its coordinates plus location context."""
    try:
        coordinate = _geocoder().geocode(address)
    except GeocodingError as e:
        logger.warning("Geocoding failed: %s", e)
        raise HTTPException(status_code=502, detail={"code": "GEOCODING_ERROR", "message": str(e)}) from e
    if coordinate is None:
        raise HTTPException(status_code=404, detail={"code": "NOT_FOUND", "message": "Address could not be geocoded."})
    context = describe_location_with_settings(coordinate, get_settings())
    return {"coordinates": list(coordinate.as_pair()), "context": context.model_dump(mode="json")}


@router.get("/api/settings")
def get_public_settings() -> dict:
    """Return safe-to-expose settings for frontend defaults (credentials removed)."""
    data = get_settings().model_dump(mode="json")
    data.get("geocoding", {}).pop("access_token", None)
    return {
        "app": {"name": data.get("app", {}).get("name")},
        "geo": data.get("geo", {}),
        "search": data.get("search", {}),
        "geocoding": data.get("geocoding", {}),
    }
