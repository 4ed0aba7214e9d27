"""
Command-line interface for geoprefix.

Provides commands for exploring a geohash prefix tree and checking its
codec.
"""

import argparse
import logging
import random
import sys
from typing import Optional

from . import geohash
from .context import GEO, dist_to_degrees
from .errors import GeoPrefixError
from .geohash_tree import GeohashPrefixTree, get_max_levels_possible
from .oracle import CodecOracle, compare_oracles


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="geoprefix",
        description="Explore geohash spatial prefix trees",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Encode command
    encode_parser = subparsers.add_parser(
        "encode",
        help="Show the cells containing a point",
    )
    encode_parser.add_argument("lat", type=float, help="Latitude in degrees")
    encode_parser.add_argument("lon", type=float, help="Longitude in degrees")
    encode_parser.add_argument(
        "-l", "--level",
        type=int,
        default=12,
        help="Finest level (default: 12)",
    )
    encode_parser.add_argument(
        "--no-parents",
        action="store_true",
        help="Only show the finest cell",
    )

    # Cells command
    cells_parser = subparsers.add_parser(
        "cells",
        help="List the sub-cells of a cell",
    )
    cells_parser.add_argument("token", help="Geohash token of the parent cell")

    # Level command
    level_parser = subparsers.add_parser(
        "level",
        help="Show the level for a cell size",
    )
    level_parser.add_argument("distance", type=float, help="Cell size in degrees")
    level_parser.add_argument(
        "--km",
        action="store_true",
        help="Distance is in kilometers instead of degrees",
    )
    level_parser.add_argument(
        "-m", "--max-levels",
        type=int,
        default=None,
        help="Tree maximum level (default: maximum possible)",
    )

    # Stats command
    subparsers.add_parser(
        "stats",
        help="Show cell sizes for every level",
    )

    # Verify command
    verify_parser = subparsers.add_parser(
        "verify",
        help="Check the geohash codec against DuckDB's ST_GeoHash",
    )
    verify_parser.add_argument(
        "-n", "--points",
        type=int,
        default=1000,
        help="Number of random points (default: 1000)",
    )
    verify_parser.add_argument(
        "-p", "--precision",
        type=int,
        default=12,
        help="Geohash length (default: 12)",
    )
    verify_parser.add_argument(
        "--seed",
        type=int,
        default=42,
        help="Random seed for sampling (default: 42)",
    )

    return parser


def cmd_encode(args: argparse.Namespace) -> int:
    """Handle the encode command."""
    tree = GeohashPrefixTree(GEO, get_max_levels_possible())
    point = GEO.make_point(args.lon, args.lat)
    cells = tree.get_cells(point, args.level, include_parents=not args.no_parents)

    for cell in cells:
        shape = cell.get_shape()
        print(
            f"{cell.level:2d}  {cell.get_token_bytes().decode('ascii'):<{args.level + 1}}  "
            f"lon [{shape.min_x:.6f}, {shape.max_x:.6f}]  "
            f"lat [{shape.min_y:.6f}, {shape.max_y:.6f}]"
        )
    return 0


def cmd_cells(args: argparse.Namespace) -> int:
    """Handle the cells command."""
    tree = GeohashPrefixTree(GEO, get_max_levels_possible())
    cell = tree.read_cell(args.token.encode("ascii"))

    for sub_cell in cell.get_sub_cells():
        center = sub_cell.get_center()
        print(f"{sub_cell.get_token_string()}  center ({center.y:.6f}, {center.x:.6f})")
    return 0


def cmd_level(args: argparse.Namespace) -> int:
    """Handle the level command."""
    tree = GeohashPrefixTree(GEO, args.max_levels or get_max_levels_possible())
    degrees = dist_to_degrees(args.distance) if args.km else args.distance
    level = tree.get_level_for_distance(degrees)

    print(f"Level for {degrees:g} degrees: {level}")
    print(f"  Cell width: {geohash.hash_len_to_lon_width(level):g} degrees")
    print(f"  Cell height: {geohash.hash_len_to_lat_height(level):g} degrees")
    return 0


def cmd_stats(args: argparse.Namespace) -> int:
    """Handle the stats command."""
    tree = GeohashPrefixTree(GEO, get_max_levels_possible())

    print(f"Geohash prefix tree, {tree.max_levels} levels, 32 sub-cells per cell:")
    print(f"  {'level':>5}  {'lon width':>14}  {'lat height':>14}  {'diagonal':>14}")
    for level in range(1, tree.max_levels + 1):
        print(
            f"  {level:>5}  {geohash.hash_len_to_lon_width(level):>14.8g}  "
            f"{geohash.hash_len_to_lat_height(level):>14.8g}  "
            f"{tree.get_distance_for_level(level):>14.8g}"
        )
    return 0


def cmd_verify(args: argparse.Namespace) -> int:
    """Handle the verify command."""
    from .duckdb_oracle import DuckDBGeohashOracle

    print(f"Comparing {args.points} points at precision {args.precision}...")
    rng = random.Random(args.seed)
    points = [
        (rng.uniform(-90.0, 90.0), rng.uniform(-180.0, 180.0))
        for _ in range(args.points)
    ]

    with DuckDBGeohashOracle() as oracle:
        mismatches = compare_oracles(oracle, CodecOracle(), points, args.precision)

    for m in mismatches[:10]:
        print(f"  ({m.lat}, {m.lon}): duckdb={m.expected} codec={m.actual}")
    if mismatches:
        print(f"{len(mismatches)} of {len(points)} points differ")
        return 1

    print("All points match")
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command is None:
        parser.print_help()
        return 1

    handlers = {
        "encode": cmd_encode,
        "cells": cmd_cells,
        "level": cmd_level,
        "stats": cmd_stats,
        "verify": cmd_verify,
    }
    try:
        return handlers[args.command](args)
    except (GeoPrefixError, ValueError) as e:
        print(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
