"""
Geocoding client (Mapbox Places API).

Forward geocoding turns a host-typed address into `[lng, lat]`; reverse geocoding
turns a point back into a display address. Both are biased to the configured
service area (proximity = city center, bbox = service area box).

The access token is read from `Settings.geocoding.access_token` (env:
`MAPBOX_ACCESS_TOKEN`) and passed per request; nothing is stored in module state.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any
from urllib.parse import quote

import httpx

from tablescout.config.settings import Settings
from tablescout.core.geo import Coordinate, validate_coordinate
from tablescout.core.http import get_json
from tablescout.geocoding.address import enrich_address
from tablescout.search.context import describe_location_with_settings

logger = logging.getLogger(__name__)


class GeocodingError(RuntimeError):
    """Geocoding could not be performed (missing token, upstream failure, bad payload)."""


@dataclass(frozen=True)
class ReverseGeocodeResult:
    address: str | None
    neighborhood: str | None
    in_service_area: bool


class MapboxGeocoder:
    def __init__(self, settings: Settings):
        self._settings = settings

    def _token(self) -> str:
        token = self._settings.geocoding.access_token
        if not token:
            raise GeocodingError("Mapbox access token is not configured (set MAPBOX_ACCESS_TOKEN).")
        return token

    def _fetch(self, query: str, params: dict[str, Any]) -> dict[str, Any]:
        url = f"{self._settings.geocoding.base_url.rstrip('/')}/{quote(query, safe=',.-')}.json"
        try:
            payload = get_json(
                url,
                params={**params, "access_token": self._token()},
                timeout_seconds=self._settings.app.http_timeout_seconds,
            )
        except (httpx.HTTPError, ValueError) as e:
            raise GeocodingError(f"Geocoding request failed: {e}") from e
        if not isinstance(payload, dict):
            raise GeocodingError("Geocoding response was not a JSON object.")
        return payload

    @staticmethod
    def _first_feature(payload: dict[str, Any]) -> dict[str, Any] | None:
        features = payload.get("features") or []
        if not isinstance(features, list) or not features or not isinstance(features[0], dict):
            return None
        return features[0]

    def geocode(self, address: str) -> Coordinate | None:
        """Return the best match for `address`, or None when nothing matches."""
        if not address or not address.strip():
            return None

        geo = self._settings.geo
        area = geo.service_area
        enriched = enrich_address(
            address.strip(),
            city_name=self._settings.geocoding.city_name,
            default_postal_code=self._settings.geocoding.default_postal_code,
        )
        params = {
            "proximity": f"{geo.center[0]},{geo.center[1]}",
            "country": self._settings.geocoding.country,
            "bbox": f"{area.lng['min']},{area.lat['min']},{area.lng['max']},{area.lat['max']}",
        }
        feature = self._first_feature(self._fetch(enriched, params))
        if feature is None:
            logger.info("No geocoding match for %r", enriched)
            return None

        try:
            coordinate = validate_coordinate(Coordinate.from_pair(feature["center"]))
        except (KeyError, TypeError, ValueError) as e:
            raise GeocodingError(f"Geocoding result has no usable center: {e}") from e

        context = describe_location_with_settings(coordinate, self._settings)
        if not context.in_service_area:
            logger.warning("Address geocoded outside the service area: %s", feature.get("place_name"))
        elif context.neighborhood:
            logger.info("Address geocoded in %s", context.neighborhood)
        return coordinate

    def reverse_geocode(self, coordinate: Coordinate) -> ReverseGeocodeResult:
        """Return a display address plus neighborhood context for `coordinate`."""
        validate_coordinate(coordinate)
        context = describe_location_with_settings(coordinate, self._settings)
        feature = self._first_feature(self._fetch(f"{coordinate.lng},{coordinate.lat}", {}))
        address = feature.get("place_name") if feature else None
        return ReverseGeocodeResult(
            address=address if isinstance(address, str) else None,
            neighborhood=context.neighborhood,
            in_service_area=context.in_service_area,
        )
