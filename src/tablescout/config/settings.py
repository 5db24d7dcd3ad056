# src/tablescout/config/settings.py
"""
Application settings (Pydantic).

Settings are loaded from `src/tablescout/config/defaults.yaml`, then optionally overridden by:
- environment variables (e.g., `MAPBOX_ACCESS_TOKEN`, `TABLESCOUT_LOG_LEVEL`)
- an external YAML file via `TABLESCOUT_CONFIG_PATH`

Design rule:
- Region boxes, the city center, and default search thresholds live in YAML, not in code.
"""

from __future__ import annotations

import os
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from tablescout.core.env import load_dotenv_if_present
from tablescout.core.geo import Coordinate
from tablescout.core.regions import Region


def _read_package_yaml(filename: str) -> dict[str, Any]:
    """Read a YAML file packaged inside `tablescout.config`."""
    text = resources.files("tablescout.config").joinpath(filename).read_text(encoding="utf-8")
    data = yaml.safe_load(text) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid YAML root object for {filename}; expected a mapping.")
    return data


def _read_yaml_file(path: str | Path) -> dict[str, Any]:
    """Read a YAML file from disk and return its mapping root."""
    data = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid YAML root object for {path}; expected a mapping.")
    return data


class AppSettings(BaseModel):
    name: str = "TableScout"
    http_timeout_seconds: float = 15
    log_level: str = "INFO"
    quiet_loggers: list[str] = Field(default_factory=lambda: ["httpx", "httpcore"])


class CatalogSettings(BaseModel):
    path: str = "data/catalogs/tables.json"


class RegionSettings(BaseModel):
    """One bounding box as written in YAML: `{name, lng: {min, max}, lat: {min, max}}`."""

    name: str
    lng: dict[Literal["min", "max"], float]
    lat: dict[Literal["min", "max"], float]

    @model_validator(mode="after")
    def _validate_box(self) -> "RegionSettings":
        for axis, lo, hi in (("lng", -180, 180), ("lat", -90, 90)):
            box = getattr(self, axis)
            if set(box) != {"min", "max"}:
                raise ValueError(f"region '{self.name}': {axis} needs both min and max")
            if not (lo <= box["min"] <= box["max"] <= hi):
                raise ValueError(f"region '{self.name}': invalid {axis} range {box['min']}..{box['max']}")
        return self

    def to_region(self) -> Region:
        return Region(
            name=self.name,
            lng_min=self.lng["min"],
            lng_max=self.lng["max"],
            lat_min=self.lat["min"],
            lat_max=self.lat["max"],
        )


class GeoSettings(BaseModel):
    # [lng, lat], longitude first (Plaça de Catalunya).
    center: tuple[float, float] = (2.1700, 41.3874)
    service_area: RegionSettings
    # Priority order: first containing region wins, so the city-wide box goes last.
    regions: list[RegionSettings] = Field(default_factory=list)

    @field_validator("center")
    @classmethod
    def _validate_center(cls, center: tuple[float, float]) -> tuple[float, float]:
        lng, lat = center
        if not (-180 <= lng <= 180 and -90 <= lat <= 90):
            raise ValueError(f"geo.center out of range: {center}")
        return center

    def center_coordinate(self) -> Coordinate:
        return Coordinate.from_pair(self.center)

    def region_list(self) -> list[Region]:
        return [r.to_region() for r in self.regions]


class SearchSettings(BaseModel):
    max_distance_m: float = Field(1500, ge=0)
    min_rating: float = 3.0
    sort: Literal["none", "distance", "rating"] = "none"
    max_results: int | None = Field(default=None, ge=1)


class GeocodingSettings(BaseModel):
    base_url: str = "https://api.mapbox.com/geocoding/v5/mapbox.places"
    country: str = "es"
    city_name: str = "Barcelona"
    default_postal_code: str = "08001"
    access_token: str | None = None


class Settings(BaseModel):
    app: AppSettings = Field(default_factory=AppSettings)
    catalog: CatalogSettings = Field(default_factory=CatalogSettings)
    geo: GeoSettings
    search: SearchSettings = Field(default_factory=SearchSettings)
    geocoding: GeocodingSettings = Field(default_factory=GeocodingSettings)


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    """Overlay selected environment variables onto raw settings payload.

    Note: We intentionally keep this whitelist small to avoid exposing unsafe overrides.
    """
    load_dotenv_if_present()
    data = dict(data)

    log_level = os.getenv("TABLESCOUT_LOG_LEVEL")
    if log_level:
        data.setdefault("app", {})["log_level"] = log_level

    catalog_path = os.getenv("TABLESCOUT_CATALOG_PATH")
    if catalog_path:
        data.setdefault("catalog", {})["path"] = catalog_path

    token = os.getenv("MAPBOX_ACCESS_TOKEN")
    if token:
        data.setdefault("geocoding", {})["access_token"] = token

    return data


@lru_cache
def get_settings() -> Settings:
    """Load and validate settings (cached)."""
    load_dotenv_if_present()
    config_path = os.getenv("TABLESCOUT_CONFIG_PATH")
    raw = _read_yaml_file(config_path) if config_path else _read_package_yaml("defaults.yaml")
    raw = _apply_env_overrides(raw)
    return Settings.model_validate(raw)


@lru_cache
def get_logging_config() -> dict[str, Any]:
    """Load logging configuration (cached)."""
    return _read_package_yaml("logging.yaml")
