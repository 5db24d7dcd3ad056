"""
Proximity filter / ranker.

Pipeline: annotate every entity with its distance from the reference point (and
optionally a region label), then keep the ones inside the distance/rating
thresholds. Output order always matches input order; sorting is a separate,
caller-level step (`rank_by_distance`, `rank_by_rating`).

Everything here is a pure function of its arguments. Entities without
coordinates get `distance_m=None` and never survive a distance-constrained
filter: we cannot claim they are within range.
"""

from __future__ import annotations

from typing import Iterable, Sequence

from tablescout.core.geo import Coordinate, distance_from_reference, validate_coordinate
from tablescout.core.regions import Region, classify_region
from tablescout.domain.models import AnnotatedEntity, LocatedEntity, ProximityConstraints


def annotate_one(
    entity: LocatedEntity | AnnotatedEntity, reference: Coordinate, regions: Sequence[Region] | None = None
) -> AnnotatedEntity:
    """Attach distance (whole meters) and region label to one entity.

    Already-annotated input is unwrapped and annotated afresh, so earlier results
    can be fed back in with a new reference or new constraints.
    """
    if isinstance(entity, AnnotatedEntity):
        entity = entity.entity
    coordinate = entity.coordinate
    if coordinate is None:
        return AnnotatedEntity(entity=entity, distance_m=None, region_name=None)
    distance_m = distance_from_reference(reference, coordinate)
    region_name = classify_region(coordinate, regions) if regions is not None else None
    return AnnotatedEntity(entity=entity, distance_m=distance_m, region_name=region_name)


def annotate(
    entities: Iterable[LocatedEntity | AnnotatedEntity], reference: Coordinate, regions: Sequence[Region] | None = None
) -> list[AnnotatedEntity]:
    """Annotate all entities, keeping input order and entities without coordinates."""
    validate_coordinate(reference)
    return [annotate_one(e, reference, regions) for e in entities]


def passes_constraints(item: AnnotatedEntity, constraints: ProximityConstraints) -> bool:
    if item.distance_m is None:
        return False
    if item.distance_m > constraints.max_distance_m:
        return False
    rating = item.entity.rating if item.entity.rating is not None else 0.0
    return rating >= constraints.min_rating


def filter_and_rank(
    entities: Iterable[LocatedEntity | AnnotatedEntity],
    reference: Coordinate,
    constraints: ProximityConstraints,
    regions: Sequence[Region] | None = None,
) -> list[AnnotatedEntity]:
    """Annotate entities and keep those within `constraints`, in input order.

    An empty list is a valid result. Raises `InvalidCoordinateError` if the
    reference or any entity coordinate is outside valid degree ranges.
    """
    annotated = annotate(entities, reference, regions)
    return [a for a in annotated if passes_constraints(a, constraints)]


def rank_by_distance(items: Iterable[AnnotatedEntity]) -> list[AnnotatedEntity]:
    """Stable sort, nearest first; entities with unknown distance go last."""
    return sorted(items, key=lambda a: (a.distance_m is None, a.distance_m or 0))


def rank_by_rating(items: Iterable[AnnotatedEntity]) -> list[AnnotatedEntity]:
    """Stable sort, best rated first; unrated entities go last."""
    return sorted(items, key=lambda a: (a.entity.rating is None, -(a.entity.rating or 0.0)))
