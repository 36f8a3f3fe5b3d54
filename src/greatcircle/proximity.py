#!/usr/bin/env python3
"""
Proximity of points of interest to a route.
"""

from typing import List, NamedTuple, Optional, Sequence, Tuple, TypeVar, Union
import logging

from .geometry import Coordinate, NamedCoordinate
from .geometry_utils import UndefinedProjection, closest_point, distance

logger = logging.getLogger(__name__)

Point = Union[Coordinate, NamedCoordinate]
P = TypeVar("P", Coordinate, NamedCoordinate)


class ProximityMatch(NamedTuple):
    """A point of interest and where a route passes closest to it."""

    point_of_interest: NamedCoordinate
    nearest_point_on_route: Coordinate
    distance: float  # Nautical miles between the two


def _coordinate(point: Point) -> Coordinate:
    if isinstance(point, NamedCoordinate):
        return point.coordinate
    return point


def _closest_approach(
    route_start: Point, route_end: Point, point: Point
) -> Tuple[Coordinate, float]:
    """Closest point on the route and its distance (nm) from point."""
    target = _coordinate(point)
    nearest = closest_point(_coordinate(route_start), _coordinate(route_end), target)
    return nearest, distance(nearest, target)


def point_in_reach(
    route_start: Point, route_end: Point, point: Point, max_distance: float
) -> bool:
    """
    Check whether point lies within max_distance of the route.

    Args:
        route_start: Start of the route
        route_end: End of the route
        point: Point to test
        max_distance: Reach in nautical miles (inclusive)

    Returns:
        True if the closest approach is at most max_distance

    Raises:
        UndefinedProjection: If point is 90 degrees off course
    """
    _, approach = _closest_approach(route_start, route_end, point)
    return approach <= max_distance


def _points_in_reach_with_distance(
    route_start: Point, route_end: Point, max_distance: float, points: Sequence[P]
) -> List[Tuple[float, P, Coordinate]]:
    in_reach = []
    for index, point in enumerate(points):
        try:
            nearest, approach = _closest_approach(route_start, route_end, point)
        except UndefinedProjection:
            logger.debug(f"Skipping point {index}: perpendicular to route")
            continue
        if approach <= max_distance:
            in_reach.append((approach, index, point, nearest))

    # Index breaks ties, so equal distances keep their input order
    in_reach.sort(key=lambda entry: (entry[0], entry[1]))
    return [(approach, point, nearest) for approach, _, point, nearest in in_reach]


def points_in_reach(
    route_start: Point, route_end: Point, max_distance: float, points: Sequence[P]
) -> List[P]:
    """
    Filter points to those within max_distance of the route.

    Points whose projection onto the route is undefined are left out.

    Args:
        route_start: Start of the route
        route_end: End of the route
        max_distance: Reach in nautical miles (inclusive)
        points: Candidate points

    Returns:
        The points in reach, closest first; equal distances keep input order
    """
    return [
        point
        for _, point, _ in _points_in_reach_with_distance(
            route_start, route_end, max_distance, points
        )
    ]


def _find_match(
    matches: List[ProximityMatch], poi: NamedCoordinate
) -> Optional[ProximityMatch]:
    for match in matches:
        if match.point_of_interest.isclose(poi):
            return match
    return None


def route_points_of_interest(
    route_points: Sequence[Point],
    pois: Sequence[Point],
    max_distance: float,
) -> List[ProximityMatch]:
    """
    Match points of interest against every segment of a route.

    Segments are scanned in route order; within a segment, matches are taken
    closest first. A point of interest near several segments is reported
    once, for the first segment that reached it.

    Args:
        route_points: Ordered route points
        pois: Points of interest; plain coordinates are treated as unnamed
        max_distance: Reach in nautical miles (inclusive)

    Returns:
        List of ProximityMatch in discovery order
    """
    named_pois = [
        poi if isinstance(poi, NamedCoordinate) else poi.to_named_coordinate()
        for poi in pois
    ]
    matches: List[ProximityMatch] = []

    for i in range(len(route_points) - 1):
        seg_start, seg_end = route_points[i], route_points[i + 1]
        segment_matches = _points_in_reach_with_distance(
            seg_start, seg_end, max_distance, named_pois
        )
        for approach, poi, nearest in segment_matches:
            if _find_match(matches, poi) is not None:
                continue
            matches.append(ProximityMatch(poi, nearest, approach))

        logger.debug(
            f"Segment {i}: {len(segment_matches)} points of interest within "
            f"{max_distance} nm, {len(matches)} unique so far"
        )

    return matches
