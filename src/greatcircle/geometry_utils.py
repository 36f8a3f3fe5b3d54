#!/usr/bin/env python3
"""
Great-circle calculations on a spherical Earth.

Formulas follow the Aviation Formulary (Ed Williams), written for
east-positive longitudes and true courses measured clockwise from north.
Angles are radians; distance() returns nautical miles.
"""

from typing import Tuple
import math

from .geometry import Coordinate, Radial
from .units import normalize_bearing, normalize_longitude, radians_to_nm, wrap_angle

# cos(latitude) below this is treated as a pole
POLE_EPSILON = 1e-12
# sin() of a course offset below this means the radial runs through the other origin
COURSE_EPSILON = 1e-12
# cos(cross track) below this leaves the along-track projection undefined
PROJECTION_EPSILON = 1e-12


class IntersectionError(ValueError):
    """Two radials do not meet at a single point ahead of both origins."""


class NoIntersection(IntersectionError):
    """The radials lie on the same great circle (no or infinitely many intersections)."""


class AmbiguousIntersection(IntersectionError):
    """The great circles meet, but behind the origin of at least one radial."""


class UndefinedProjection(ValueError):
    """The point is 90 degrees off course, so every point of the route is equally close."""


def _clamp(value: float) -> float:
    return max(-1.0, min(1.0, value))


def angular_distance(point1: Coordinate, point2: Coordinate) -> float:
    """
    Angle subtended at the Earth's centre by two coordinates.

    Uses the spherical law of cosines; the arccosine argument is clamped
    so rounding can never push it outside [-1, 1].

    Args:
        point1: First coordinate
        point2: Second coordinate

    Returns:
        Angular distance in radians, in [0, pi]
    """
    if point1 == point2:
        return 0.0
    return math.acos(
        _clamp(
            math.sin(point1.latitude) * math.sin(point2.latitude)
            + math.cos(point1.latitude)
            * math.cos(point2.latitude)
            * math.cos(point1.longitude - point2.longitude)
        )
    )


def haversine_angular_distance(point1: Coordinate, point2: Coordinate) -> float:
    """Angular distance in radians using the haversine form (well conditioned for short arcs)."""
    dlat = point1.latitude - point2.latitude
    dlon = point1.longitude - point2.longitude
    a = (
        math.sin(dlat / 2) ** 2
        + math.cos(point1.latitude) * math.cos(point2.latitude) * math.sin(dlon / 2) ** 2
    )
    return 2 * math.asin(math.sqrt(min(1.0, a)))


def distance(point1: Coordinate, point2: Coordinate) -> float:
    """
    Shortest distance between two coordinates, along their great circle.

    Args:
        point1: First coordinate
        point2: Second coordinate

    Returns:
        Distance in nautical miles
    """
    return radians_to_nm(angular_distance(point1, point2))


def initial_bearing(point1: Coordinate, point2: Coordinate) -> float:
    """
    True course at point1 for the great circle towards point2.

    The course changes along a great circle; this is the departure course.
    At a pole every direction is south (or north), so courses there are
    measured against the pole's stored longitude instead: from the north
    pole the course along that meridian is pi, and turning towards east
    longitudes lowers it. This is the limit of the formula as point1
    approaches the pole along its own meridian, and destination() inverts it.

    Args:
        point1: Departure coordinate
        point2: Destination coordinate

    Returns:
        Bearing in radians, in [0, 2*pi)
    """
    dlon = point2.longitude - point1.longitude
    if math.cos(point1.latitude) < POLE_EPSILON:
        if point1.latitude > 0:
            return normalize_bearing(math.pi - dlon)
        return normalize_bearing(dlon)

    y = math.sin(dlon) * math.cos(point2.latitude)
    x = math.cos(point1.latitude) * math.sin(point2.latitude) - math.sin(
        point1.latitude
    ) * math.cos(point2.latitude) * math.cos(dlon)
    return normalize_bearing(math.atan2(y, x))


def destination(origin: Coordinate, bearing: float, distance_rad: float) -> Coordinate:
    """
    Coordinate reached by travelling from origin along a great circle.

    Args:
        origin: Starting coordinate
        bearing: Initial true course in radians
        distance_rad: Angular distance to travel in radians (negative travels backwards)

    Returns:
        Destination coordinate with longitude in (-pi, pi]
    """
    lat1 = origin.latitude
    lat = math.asin(
        _clamp(
            math.sin(lat1) * math.cos(distance_rad)
            + math.cos(lat1) * math.sin(distance_rad) * math.cos(bearing)
        )
    )
    if math.cos(lat1) < POLE_EPSILON:
        # Pole courses are relative to the pole's stored longitude
        hemisphere = 1.0 if lat1 > 0 else -1.0
        dlon = math.atan2(
            math.sin(bearing) * math.sin(distance_rad),
            -hemisphere * math.cos(bearing) * math.sin(distance_rad),
        )
    else:
        dlon = math.atan2(
            math.sin(bearing) * math.sin(distance_rad) * math.cos(lat1),
            math.cos(distance_rad) - math.sin(lat1) * math.sin(lat),
        )
    return Coordinate(lat, normalize_longitude(origin.longitude + dlon))


def intersect(radial1: Radial, radial2: Radial) -> Coordinate:
    """
    Find where two radials cross.

    Solves the spherical triangle formed by the two origins and the
    intersection, then projects from the first origin.

    Args:
        radial1: First radial
        radial2: Second radial

    Returns:
        Intersection coordinate

    Raises:
        NoIntersection: If both radials run along the great circle joining
            their origins, or the origins coincide
        AmbiguousIntersection: If the great circles meet behind an origin
    """
    origin1, origin2 = radial1.coordinate, radial2.coordinate
    dist12 = haversine_angular_distance(origin1, origin2)
    if dist12 == 0:
        raise NoIntersection("Radials share the same origin")

    crs12 = initial_bearing(origin1, origin2)
    crs21 = initial_bearing(origin2, origin1)

    # angle 2-1-3 and angle 1-2-3
    alpha1 = wrap_angle(radial1.bearing - crs12)
    alpha2 = wrap_angle(crs21 - radial2.bearing)
    sin1, sin2 = math.sin(alpha1), math.sin(alpha2)

    along1 = abs(sin1) < COURSE_EPSILON
    along2 = abs(sin2) < COURSE_EPSILON
    if along1 and along2:
        raise NoIntersection("Radials lie on the same great circle")
    if along1 or along2:
        # One radial runs through the other origin
        if along1 and math.cos(alpha1) > 0:
            return origin2
        if along2 and math.cos(alpha2) > 0:
            return origin1
        raise AmbiguousIntersection("Radial points away from the other origin")
    if sin1 * sin2 < 0:
        raise AmbiguousIntersection("Great circles intersect behind a radial origin")

    alpha1, alpha2 = abs(alpha1), abs(alpha2)
    alpha3 = math.acos(
        _clamp(
            -math.cos(alpha1) * math.cos(alpha2)
            + math.sin(alpha1) * math.sin(alpha2) * math.cos(dist12)
        )
    )
    dist13 = math.atan2(
        math.sin(dist12) * math.sin(alpha1) * math.sin(alpha2),
        math.cos(alpha2) + math.cos(alpha1) * math.cos(alpha3),
    )
    return destination(origin1, radial1.bearing, dist13)


def _offset_from_track(
    route_start: Coordinate, route_end: Coordinate, actual: Coordinate
) -> Tuple[float, float]:
    """Angular distance start->actual and its course relative to the route course."""
    dist_ad = angular_distance(route_start, actual)
    course_offset = initial_bearing(route_start, actual) - initial_bearing(
        route_start, route_end
    )
    return dist_ad, course_offset


def cross_track_error(
    route_start: Coordinate, route_end: Coordinate, actual: Coordinate
) -> float:
    """
    Signed distance of actual from the great circle route_start -> route_end.

    Positive is right of course, negative left.

    Returns:
        Cross-track distance in radians
    """
    dist_ad, course_offset = _offset_from_track(route_start, route_end, actual)
    return math.asin(_clamp(math.sin(dist_ad) * math.sin(course_offset)))


def along_track_distance(
    route_start: Coordinate, route_end: Coordinate, actual: Coordinate
) -> float:
    """
    Distance from route_start along the route to the point abeam actual.

    Negative when the abeam point lies behind route_start.

    Args:
        route_start: Start of the route
        route_end: End of the route (fixes the route's great circle)
        actual: Off-route coordinate

    Returns:
        Along-track distance in radians

    Raises:
        UndefinedProjection: If actual is 90 degrees off course
    """
    dist_ad, course_offset = _offset_from_track(route_start, route_end, actual)
    xtd = math.asin(_clamp(math.sin(dist_ad) * math.sin(course_offset)))
    cos_xtd = math.cos(xtd)
    if cos_xtd < PROJECTION_EPSILON:
        raise UndefinedProjection(
            "Point is perpendicular to the route; along-track distance is undefined"
        )

    # sin(atd) = sqrt(sin^2(dAD) - sin^2(xtd)) / cos(xtd), cos(atd) = cos(dAD) / cos(xtd)
    abeam = math.sqrt(max(0.0, math.sin(dist_ad) ** 2 - math.sin(xtd) ** 2))
    return math.atan2(
        math.copysign(abeam, math.cos(course_offset)) / cos_xtd,
        math.cos(dist_ad) / cos_xtd,
    )


def closest_point(
    route_start: Coordinate, route_end: Coordinate, actual: Coordinate
) -> Coordinate:
    """
    Project actual onto the great circle through route_start and route_end.

    Args:
        route_start: Start of the route
        route_end: End of the route
        actual: Coordinate to project

    Returns:
        Closest coordinate on the route's great circle. A zero-length route
        has no direction, so route_start is returned.

    Raises:
        UndefinedProjection: If actual is 90 degrees off course
    """
    if route_start == route_end:
        return route_start
    atd = along_track_distance(route_start, route_end, actual)
    return destination(route_start, initial_bearing(route_start, route_end), atd)
