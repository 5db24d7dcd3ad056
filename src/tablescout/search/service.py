from __future__ import annotations

# This module is the "orchestrator" for a table search.
# It wires together:
# - request input (SearchQuery)
# - settings (+ per-request overrides)
# - the catalog (unless the caller injects tables)
# - the proximity engine (annotate, filter, classify)
# - optional ranking + truncation, and a self-describing SearchResult

import logging
import time
from datetime import datetime, timezone

from tablescout.catalog.loader import load_tables
from tablescout.config.overrides import apply_settings_overrides
from tablescout.config.settings import Settings, get_settings
from tablescout.core.geo import Coordinate
from tablescout.domain.models import (
    AnnotatedEntity,
    GamingTable,
    ProximityConstraints,
    SearchQuery,
    SearchResult,
)
from tablescout.search.proximity import filter_and_rank, rank_by_distance, rank_by_rating

logger = logging.getLogger(__name__)


def effective_constraints(query: SearchQuery, settings: Settings) -> ProximityConstraints:
    # Request values win; anything omitted falls back to configured defaults.
    return ProximityConstraints(
        max_distance_m=(
            query.max_distance_m if query.max_distance_m is not None else settings.search.max_distance_m
        ),
        min_rating=query.min_rating if query.min_rating is not None else settings.search.min_rating,
    )


def _apply_sort(items: list[AnnotatedEntity], sort: str) -> list[AnnotatedEntity]:
    if sort == "distance":
        return rank_by_distance(items)
    if sort == "rating":
        # Nearest first among equal ratings.
        return rank_by_rating(rank_by_distance(items))
    return items


def search_tables(
    query: SearchQuery,
    *,
    settings: Settings | None = None,
    tables: list[GamingTable] | None = None,
) -> SearchResult:
    """Run a proximity search and return annotated, filtered (optionally sorted) tables.

    Raises:
        ValueError: On invalid settings overrides, or `InvalidCoordinateError` for a
            reference/catalog coordinate outside valid degree ranges.
    """
    t0 = time.monotonic()
    timings_ms: dict[str, int] = {}

    # ---- Step 1: Resolve settings for THIS run ----
    settings = settings or get_settings()
    settings = apply_settings_overrides(settings, query.settings_overrides)

    # ---- Step 2: Effective inputs (precedence: config defaults -> request) ----
    reference = (
        Coordinate.from_pair(query.reference) if query.reference is not None else settings.geo.center_coordinate()
    )
    constraints = effective_constraints(query, settings)
    sort = query.sort or settings.search.sort
    max_results = query.max_results or settings.search.max_results
    regions = settings.geo.region_list() if query.classify_regions else None

    normalized_query = query.model_copy(
        update={
            "reference": reference.as_pair(),
            "max_distance_m": constraints.max_distance_m,
            "min_rating": constraints.min_rating,
            "sort": sort,
            "max_results": max_results,
        }
    )

    # ---- Step 3: Load catalog (unless tests/callers inject a list) ----
    if tables is None:
        tables = load_tables(settings.catalog.path)
    timings_ms["load_catalog"] = int((time.monotonic() - t0) * 1000)

    # ---- Step 4: Annotate + filter (stable input order) ----
    t_filter = time.monotonic()
    results = filter_and_rank(tables, reference, constraints, regions)
    timings_ms["filter"] = int((time.monotonic() - t_filter) * 1000)

    # ---- Step 5: Caller-level ranking and truncation ----
    results = _apply_sort(results, sort)
    matched_count = len(results)
    if max_results is not None:
        results = results[:max_results]
    timings_ms["total"] = int((time.monotonic() - t0) * 1000)

    unlocated = sum(1 for t in tables if t.location is None)
    logger.info(
        "Search ref=%.4f,%.4f max_distance_m=%s min_rating=%s: %d/%d tables matched (%d without location)",
        reference.lng,
        reference.lat,
        constraints.max_distance_m,
        constraints.min_rating,
        matched_count,
        len(tables),
        unlocated,
    )

    return SearchResult(
        generated_at=datetime.now(timezone.utc),
        query=normalized_query,
        results=results,
        meta={
            "candidate_count": len(tables),
            "matched_count": matched_count,
            "result_count": len(results),
            "unlocated_count": unlocated,
            "timings_ms": timings_ms,
        },
    )
