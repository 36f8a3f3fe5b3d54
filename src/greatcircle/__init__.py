#!/usr/bin/env python3
"""
greatcircle - spherical-Earth geometry for flight planning.

Distances, bearings, radial intersections, cross-track and along-track
decomposition, and the points of interest within reach of a route.
Angles are radians and distances nautical miles throughout.
"""
import importlib.metadata

__version__ = importlib.metadata.version("greatcircle")

# Import main classes and functions for public API
from .geometry import COORDINATE_TOLERANCE, Coordinate, NamedCoordinate, Radial
from .geometry_utils import (
    AmbiguousIntersection,
    IntersectionError,
    NoIntersection,
    UndefinedProjection,
    along_track_distance,
    angular_distance,
    closest_point,
    cross_track_error,
    destination,
    distance,
    initial_bearing,
    intersect,
)
from .proximity import (
    ProximityMatch,
    point_in_reach,
    points_in_reach,
    route_points_of_interest,
)
from .route import Route
from .dms import CoordinateParseError
from .units import (
    degrees_to_radians,
    dms_to_decimal_degrees,
    nm_to_radians,
    radians_to_degrees,
    radians_to_nm,
)

__all__ = [
    "COORDINATE_TOLERANCE",
    "Coordinate",
    "NamedCoordinate",
    "Radial",
    "Route",
    "ProximityMatch",
    "AmbiguousIntersection",
    "CoordinateParseError",
    "IntersectionError",
    "NoIntersection",
    "UndefinedProjection",
    "along_track_distance",
    "angular_distance",
    "closest_point",
    "cross_track_error",
    "degrees_to_radians",
    "destination",
    "distance",
    "dms_to_decimal_degrees",
    "initial_bearing",
    "intersect",
    "nm_to_radians",
    "point_in_reach",
    "points_in_reach",
    "radians_to_degrees",
    "radians_to_nm",
    "route_points_of_interest",
]
