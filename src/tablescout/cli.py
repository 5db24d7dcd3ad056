"""
TableScout CLI entrypoint.

This CLI is intended for quick local demos and debugging without the map frontend.
It delegates search logic to `tablescout.search.service.search_tables`.
"""

from __future__ import annotations

import argparse
import json
from typing import Any

from tablescout.config.settings import get_settings
from tablescout.core.geo import Coordinate, haversine_distance_m, round_meters
from tablescout.core.logging import configure_logging
from tablescout.domain.models import GamingTable, SearchQuery
from tablescout.search.context import describe_location_with_settings
from tablescout.search.service import search_tables


def _cmd_search(args: argparse.Namespace) -> int:
    """Handle the `search` subcommand."""
    settings = get_settings()

    reference = None
    if args.lng is not None or args.lat is not None:
        if args.lng is None or args.lat is None:
            raise ValueError("--lng and --lat must be given together")
        reference = (float(args.lng), float(args.lat))

    query = SearchQuery(
        reference=reference,
        max_distance_m=args.max_distance,
        min_rating=args.min_rating,
        sort=args.sort,
        max_results=args.max_results,
    )
    result = search_tables(query, settings=settings)

    if args.json:
        print(json.dumps(result.model_dump(mode="json"), ensure_ascii=False, indent=2))
        return 0

    print(f"Generated at: {result.generated_at.isoformat()}")
    print(f"{result.meta['result_count']} of {result.meta['candidate_count']} tables match:")
    for i, item in enumerate(result.results, start=1):
        table = item.entity
        name = table.name if isinstance(table, GamingTable) else table.id
        rating = f"{table.rating:.1f}" if table.rating is not None else "-"
        print(f"{i:>2}. {name}  {item.distance_m} m  rating={rating}  ({item.region_name or 'no region'})")
    return 0


def _cmd_describe(args: argparse.Namespace) -> int:
    settings = get_settings()
    context = describe_location_with_settings(Coordinate(lng=args.lng, lat=args.lat), settings)
    print(json.dumps(context.model_dump(mode="json"), ensure_ascii=False, indent=2))
    return 0


def _cmd_distance(args: argparse.Namespace) -> int:
    a = Coordinate(lng=args.lng1, lat=args.lat1)
    b = Coordinate(lng=args.lng2, lat=args.lat2)
    print(round_meters(haversine_distance_m(a, b)))
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the TableScout CLI."""
    parser = argparse.ArgumentParser(prog="tablescout")
    sub = parser.add_subparsers(dest="command", required=True)

    s = sub.add_parser("search", help="Find gaming tables near a point (default: city center).")
    s.add_argument("--lng", type=float, default=None, help="Reference longitude")
    s.add_argument("--lat", type=float, default=None, help="Reference latitude")
    s.add_argument("--max-distance", type=float, default=None, help="Meters; default from config")
    s.add_argument("--min-rating", type=float, default=None, help="0..5; default from config")
    s.add_argument("--sort", choices=["none", "distance", "rating"], default=None)
    s.add_argument("--max-results", type=int, default=None)
    s.add_argument("--json", action="store_true", help="Output machine-readable JSON")
    s.set_defaults(func=_cmd_search)

    d = sub.add_parser("describe", help="Service area / neighborhood / distance-to-center for a point.")
    d.add_argument("--lng", required=True, type=float)
    d.add_argument("--lat", required=True, type=float)
    d.set_defaults(func=_cmd_describe)

    dist = sub.add_parser("distance", help="Great-circle distance in whole meters between two points.")
    for name in ("lng1", "lat1", "lng2", "lat2"):
        dist.add_argument(name, type=float)
    dist.set_defaults(func=_cmd_distance)
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint callable used by `python -m tablescout.cli`."""
    configure_logging()
    parser = build_parser()
    args = parser.parse_args(argv)
    func: Any = getattr(args, "func")
    try:
        return int(func(args))
    except ValueError as e:
        # InvalidCoordinateError and pydantic.ValidationError are both ValueErrors.
        parser.error(str(e))
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
