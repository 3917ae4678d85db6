"""
Proximity CLI entrypoint.

Thin driver around the record pipeline: it opens the input file, passes the configured
reference point and radius into the filter, and prints the matches sorted by user_id.
"""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Any

from proximity.config.settings import Settings, get_settings, reference_from_settings
from proximity.core.env import resolve_project_path
from proximity.core.geo import Coordinate, distance
from proximity.core.logging import configure_logging
from proximity.errors import ProximityError
from proximity.records.loader import open_records
from proximity.records.render import format_matches, to_json_rows
from proximity.records.shard import filter_sharded

logger = logging.getLogger(__name__)


def _reference(args: argparse.Namespace, settings: Settings) -> Coordinate:
    if args.ref_lat is None and args.ref_lon is None:
        return reference_from_settings(settings)
    lat = args.ref_lat if args.ref_lat is not None else settings.reference.latitude_deg
    lon = args.ref_lon if args.ref_lon is not None else settings.reference.longitude_deg
    return Coordinate.from_degrees(float(lat), float(lon))


def _cmd_filter(args: argparse.Namespace) -> int:
    """Handle the `filter` subcommand."""
    settings = get_settings()
    cfg = settings.filter
    # An explicit --input is relative to cwd; the configured default is relative to the project root.
    path = Path(args.input) if args.input else resolve_project_path(settings.input.path)
    radius_km = float(args.radius_km) if args.radius_km is not None else cfg.radius_km
    shards = int(args.shards) if args.shards is not None else cfg.shards

    try:
        with open_records(path, encoding=settings.input.encoding) as fh:
            matches = filter_sharded(
                fh,
                _reference(args, settings),
                radius_km,
                shards=shards,
                radius_km=cfg.earth_radius_km,
                clamp=cfg.clamp_central_angle,
                reject_duplicate_ids=cfg.reject_duplicate_ids,
            )
    except ProximityError as e:
        logger.error("Filtering %s failed: %s", path, e)
        return 1

    if args.json:
        print(json.dumps(to_json_rows(matches), ensure_ascii=False, indent=2))
        return 0

    for line in format_matches(matches):
        print(line)
    return 0


def _cmd_distance(args: argparse.Namespace) -> int:
    settings = get_settings()
    a = Coordinate.from_degrees(args.lat1, args.lon1)
    b = Coordinate.from_degrees(args.lat2, args.lon2)
    d = distance(a, b, radius_km=settings.filter.earth_radius_km, clamp=settings.filter.clamp_central_angle)
    print(f"{d:.3f}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the Proximity CLI."""
    parser = argparse.ArgumentParser(prog="proximity")
    sub = parser.add_subparsers(dest="command", required=True)

    flt = sub.add_parser("filter", help="List customers within the radius of the reference point.")
    flt.add_argument("--input", type=str, default=None, help="Newline-delimited JSON file (default from config)")
    flt.add_argument("--radius-km", type=float, default=None)
    flt.add_argument("--ref-lat", type=float, default=None, help="Reference latitude in degrees")
    flt.add_argument("--ref-lon", type=float, default=None, help="Reference longitude in degrees")
    flt.add_argument("--shards", type=int, default=None, help="Worker threads; 1 means sequential")
    flt.add_argument("--json", action="store_true", help="Output machine-readable JSON")
    flt.set_defaults(func=_cmd_filter)

    dist = sub.add_parser("distance", help="Great-circle distance in km between two points (degrees).")
    dist.add_argument("lat1", type=float)
    dist.add_argument("lon1", type=float)
    dist.add_argument("lat2", type=float)
    dist.add_argument("lon2", type=float)
    dist.set_defaults(func=_cmd_distance)
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint callable used by `python -m proximity.cli`."""
    configure_logging()
    parser = build_parser()
    args = parser.parse_args(argv)
    func: Any = getattr(args, "func")
    return int(func(args))


if __name__ == "__main__":
    raise SystemExit(main())
