"""
Gaming table catalog loader.

The catalog is a local JSON file (default: `data/catalogs/tables.json`) with three lists:
- `hosts`: table hosts, referenced by `host_id`
- `venues`: places hosting several tables (tables inherit the venue's rating and address)
- `tables`: standalone tables

We validate it into typed Pydantic models and flatten venues into one table list so
the search layer only ever sees `GamingTable`s.
"""

from __future__ import annotations

import json
from pathlib import Path

from tablescout.core.env import resolve_project_path
from tablescout.domain.models import Catalog, GamingTable, Host, Venue


def load_catalog(path: str | Path) -> Catalog:
    """Load and validate a catalog JSON file."""
    resolved = resolve_project_path(path)
    payload = json.loads(resolved.read_text(encoding="utf-8"))
    return Catalog.model_validate(payload)


def _venue_table(venue: Venue, table: GamingTable) -> GamingTable:
    updates: dict = {
        "venue_id": venue.id,
        "venue_name": venue.name,
        "venue_address": venue.location.address if venue.location else None,
        # The venue's rating is the one guests see; per-table ratings are not collected.
        "rating": venue.rating,
        "review_count": venue.review_count,
    }
    if table.location is None:
        updates["location"] = venue.location
    if not table.amenities:
        updates["amenities"] = list(venue.amenities)
    return table.model_copy(update=updates)


def flatten_tables(catalog: Catalog) -> list[GamingTable]:
    """Return venue tables (in venue order) followed by standalone tables."""
    out: list[GamingTable] = []
    for venue in catalog.venues:
        out.extend(_venue_table(venue, t) for t in venue.tables)
    out.extend(catalog.tables)
    return out


def load_tables(path: str | Path) -> list[GamingTable]:
    """Load a catalog file and return its flattened table list."""
    return flatten_tables(load_catalog(path))


def find_table(tables: list[GamingTable], table_id: str) -> GamingTable | None:
    for t in tables:
        if t.id == table_id:
            return t
    return None


def hosts_by_id(catalog: Catalog) -> dict[str, Host]:
    return {h.id: h for h in catalog.hosts}
