#!/usr/bin/env python3
"""
Great-circle near-point tool.

Reads a GPX file holding a route (or track) and waypoints, finds the
waypoints within reach of the route, prints SkyVector flight plans that
visit them, and writes an interactive HTML map.
"""

from typing import List, Optional
import webbrowser
import argparse
import logging
import sys
import os
from gpxpy import gpx

from . import __version__
from . import visualization
from .config import GreatCircleConfig
from .file_utils import generate_output_filename
from .geometry import NamedCoordinate
from .proximity import ProximityMatch
from .route import Route, load_waypoints

logger = logging.getLogger("greatcircle")


def create_argument_parser() -> argparse.ArgumentParser:
    """
    Create and configure the command-line argument parser.

    Returns:
        Configured ArgumentParser instance
    """
    parser = argparse.ArgumentParser(
        description="Find GPX waypoints near a great-circle route",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "filename",
        type=str,
        nargs="?",
        help="GPX file with a route or track, and waypoints to match",
    )
    parser.add_argument(
        "--max-distance",
        type=float,
        default=25.0,
        help="Maximum distance from the route in nautical miles (default: 25)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Output HTML map file (default: auto-generated based on input filename)",
    )
    parser.add_argument(
        "--bbox-buffer",
        type=float,
        default=10.0,
        help="Map padding around the route in nautical miles (default: 10)",
    )
    parser.add_argument(
        "--no-map",
        action="store_true",
        help="Don't write an HTML map",
    )
    parser.add_argument(
        "--no-open",
        action="store_true",
        help="Don't automatically open the HTML file in browser",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Set logging level (default: WARNING)",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"greatcircle {__version__}",
    )
    return parser


def determine_output_filename(input_filename: str, output_arg: Optional[str]) -> str:
    """
    Determine the output filename to use.

    Raises:
        RuntimeError: If auto-generation fails
        ValueError: If constructed filename would be illegal
    """
    if output_arg is not None:
        return output_arg

    try:
        return generate_output_filename(input_filename)
    except (RuntimeError, ValueError) as e:
        logger.error(f"Failed to generate output filename: {e}")
        raise


def open_file_in_browser(filename: str) -> None:
    abs_path = os.path.abspath(filename)
    try:
        webbrowser.open(f"file://{abs_path}")
        logger.debug(f"Opening {abs_path} in your default browser...")
    except webbrowser.Error as e:
        logger.warning(f"Could not automatically open browser: {e}")
        logger.warning(f"Please manually open {abs_path}")


def setup_logging(level_name: str) -> None:
    """Setup logging configuration."""
    level = getattr(logging, level_name)

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s", datefmt="%H:%M:%S"
    )

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)

    # Configure the root logger so all modules inherit the configuration
    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.addHandler(console_handler)


def exclude_route_points(
    route: Route, waypoints: List[NamedCoordinate]
) -> List[NamedCoordinate]:
    """Drop waypoints that are already points of the route."""
    return [
        waypoint
        for waypoint in waypoints
        if not any(waypoint.coordinate.isclose(point.coordinate) for point in route)
    ]


def log_matches(matches: List[ProximityMatch], max_distance: float) -> None:
    """
    Print the points of interest near the route in discovery order.

    Args:
        matches: Matches from Route.points_of_interest
        max_distance: Reach used for the search, in nautical miles
    """
    if not matches:
        print(f"No waypoints within {max_distance} nm of route")
        return

    print(f"Waypoints within {max_distance} nm of route ({len(matches)}):")
    name_width = max(len(match.point_of_interest.name or "-") for match in matches)
    for match in matches:
        nearest = match.nearest_point_on_route
        print(
            f"  {match.point_of_interest.name or '-':<{name_width}} "
            f"{match.distance:6.1f} nm  abeam {nearest.latitude_degrees:.4f}, "
            f"{nearest.longitude_degrees:.4f}"
        )


def print_flight_plans(route: Route, matches: List[ProximityMatch]) -> None:
    print("\nRoute:")
    print(route.to_skyvector())
    if not matches:
        return
    print("\nRoute via nearby waypoints:")
    print(route.with_points_of_interest(matches).to_skyvector())
    print("\nRoute with waypoints abeam nearby waypoints:")
    print(route.with_points_of_interest(matches, on_route=True).to_skyvector())
    print("\nEnter a plan at https://skyvector.com/")


def main():
    """
    Parses command-line arguments, loads the GPX file, matches waypoints
    against the route, prints flight plans and writes the map.
    """
    parser = create_argument_parser()
    args = parser.parse_args()

    if not args.filename:
        parser.print_help()
        sys.exit(1)

    config = GreatCircleConfig.from_args(args)
    setup_logging(config.log_level)

    try:
        with open(args.filename, "r", encoding="utf-8") as f:
            gpx_text = f.read()
        route = Route.from_gpx(gpx_text)
        waypoints = load_waypoints(gpx_text)
    except FileNotFoundError:
        logger.error(f"GPX file not found: {args.filename}")
        sys.exit(1)
    except PermissionError:
        logger.error(f"Cannot read GPX file (permission denied): {args.filename}")
        sys.exit(1)
    except gpx.GPXException as e:
        logger.error(f"Invalid GPX file: {e}")
        sys.exit(1)
    except ValueError as e:
        logger.error(f"Invalid route: {e}")
        sys.exit(1)
    logger.info(f"Loaded route with {len(route)} points and {len(waypoints)} waypoints")
    logger.info(f"Total route distance: {route.total_distance():.1f} nm")

    candidates = exclude_route_points(route, waypoints)
    matches = route.points_of_interest(candidates, config.max_distance)

    log_matches(matches, config.max_distance)
    print_flight_plans(route, matches)

    if args.no_map:
        return

    try:
        output_filename = determine_output_filename(args.filename, config.output)
        logger.debug(f"Output filename: {output_filename}")
    except (RuntimeError, ValueError):
        sys.exit(1)

    try:
        visualization.create_route_map(route, matches, output_filename, config)
    except (OSError, ValueError) as e:
        logger.error(f"Failed to create map: {e}")
        sys.exit(1)

    if config.open_browser:
        open_file_in_browser(output_filename)


if __name__ == "__main__":
    main()
