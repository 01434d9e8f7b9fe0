import argparse
from dataclasses import replace
import json
import logging
import sys

from gpx_climbs.charts import generate_climb_profile
from gpx_climbs.climb import detect_climbs
from gpx_climbs.config import ClimbConfig, load_config
from gpx_climbs.errors import ClimbDetectionError
from gpx_climbs.formatters import format_climb_table, format_distance
from gpx_climbs.parser import parse_gpx
from gpx_climbs.profile import build_profile, profile_stats


def build_parser(defaults: ClimbConfig | None = None) -> argparse.ArgumentParser:
    """Build argument parser with defaults from the loaded config."""
    if defaults is None:
        defaults = ClimbConfig()

    parser = argparse.ArgumentParser(
        description="Detect and categorize climbs along a GPX route."
    )
    parser.add_argument("gpx_file", help="Path to GPX file")
    parser.add_argument(
        "--min-gradient",
        type=float,
        default=defaults.min_gradient,
        help=f"Minimum gradient in %% for a steep step (default: {defaults.min_gradient})",
    )
    parser.add_argument(
        "--min-length",
        type=float,
        default=defaults.min_length,
        help=f"Minimum steep section length in meters (default: {defaults.min_length})",
    )
    parser.add_argument(
        "--smoothing-window",
        type=int,
        default=defaults.smoothing_window,
        help=f"Moving-average window in samples (default: {defaults.smoothing_window})",
    )
    parser.add_argument(
        "--merge-gap",
        type=float,
        default=defaults.merge_gap,
        help=f"Maximum gap in meters between sections to merge (default: {defaults.merge_gap})",
    )
    parser.add_argument(
        "--lookahead",
        type=float,
        default=defaults.lookahead_distance,
        help=f"Distance in meters searched past a climb top for a higher point (default: {defaults.lookahead_distance})",
    )
    parser.add_argument(
        "--remove-overlaps",
        action=argparse.BooleanOptionalAction,
        default=defaults.remove_overlaps,
        help="Drop climbs that overlap a more significant climb",
    )
    parser.add_argument(
        "--chart",
        type=str,
        default=None,
        help="Write an elevation profile PNG with climbs highlighted to this path",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print detected climbs as JSON",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    try:
        defaults = ClimbConfig.from_dict(load_config())
    except ClimbDetectionError as e:
        print(f"Error in config file: {e}", file=sys.stderr)
        sys.exit(1)

    parser = build_parser(defaults)
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        config = replace(
            defaults,
            min_gradient=args.min_gradient,
            min_length=args.min_length,
            smoothing_window=args.smoothing_window,
            merge_gap=args.merge_gap,
            lookahead_distance=args.lookahead,
            remove_overlaps=args.remove_overlaps,
        )
    except ClimbDetectionError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    gpx_path = args.gpx_file
    try:
        points = parse_gpx(gpx_path)
    except FileNotFoundError:
        print(f"Error: File not found: {gpx_path}", file=sys.stderr)
        sys.exit(1)
    except Exception as e:
        print(f"Error parsing GPX file: {e}", file=sys.stderr)
        sys.exit(1)

    samples = build_profile(points)
    if len(samples) < 2:
        print("Error: GPX file contains fewer than 2 points with elevation.", file=sys.stderr)
        sys.exit(1)

    try:
        climbs = detect_climbs(samples, config)
    except ClimbDetectionError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    if args.chart:
        with open(args.chart, "wb") as f:
            f.write(generate_climb_profile(samples, climbs))

    if args.json:
        print(json.dumps([climb.to_dict() for climb in climbs], indent=2))
        return

    stats = profile_stats(samples)
    print("=== GPX Climb Analysis ===")
    print(f"Distance:       {format_distance(stats.total_distance)}")
    print(f"Elevation Gain: {stats.elevation_gained:.0f} m")
    print(f"Elevation Loss: {stats.elevation_lost:.0f} m")
    print(f"Climbs:         {len(climbs)}")
    print("")
    print(format_climb_table(climbs))
    if args.chart:
        print("")
        print(f"Chart written to {args.chart}")
