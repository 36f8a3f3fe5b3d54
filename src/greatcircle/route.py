#!/usr/bin/env python3
"""
Route data model for flight planning.
"""

from typing import Iterator, List, Sequence, TextIO, Tuple, Union
import logging
import math

import gpxpy

from .dms import format_latitude, format_longitude
from .geometry import Coordinate, NamedCoordinate
from .geometry_utils import (
    UndefinedProjection,
    along_track_distance,
    closest_point,
    distance,
)
from .proximity import ProximityMatch, route_points_of_interest
from .units import unwrap_longitude_degrees

logger = logging.getLogger(__name__)


def _gpx_point_to_named_coordinate(point) -> NamedCoordinate:
    """Convert a gpxpy point (degrees, east-positive) to a NamedCoordinate."""
    return NamedCoordinate(
        Coordinate.from_degrees(point.latitude, point.longitude),
        point.name or "",
    )


class Route:
    """An ordered sequence of named points; consecutive points form segments."""

    def __init__(self, points: Sequence[Union[NamedCoordinate, Coordinate]]):
        """Initializes a Route object.

        Args:
            points: Route points in flight order. Plain Coordinates are
                given an empty name.

        Raises:
            ValueError: If fewer than two points are given.
        """
        if len(points) < 2:
            raise ValueError(
                f"Route must have at least two points, got {len(points)}"
            )

        self.points: Tuple[NamedCoordinate, ...] = tuple(
            point if isinstance(point, NamedCoordinate) else point.to_named_coordinate()
            for point in points
        )

    def segments(self) -> List[Tuple[NamedCoordinate, NamedCoordinate]]:
        """Consecutive (start, end) pairs in route order."""
        return list(zip(self.points, self.points[1:]))

    def total_distance(self) -> float:
        """Sum of segment great-circle distances in nautical miles."""
        return sum(
            distance(start.coordinate, end.coordinate) for start, end in self.segments()
        )

    def points_of_interest(
        self, pois: Sequence[Union[NamedCoordinate, Coordinate]], max_distance: float
    ) -> List[ProximityMatch]:
        """
        Find the points of interest within max_distance (nm) of any segment.

        Returns:
            ProximityMatch list in discovery order, one entry per point of interest
        """
        matches = route_points_of_interest(self.points, pois, max_distance)
        logger.debug(
            f"{len(matches)} of {len(pois)} points of interest within "
            f"{max_distance} nm of route"
        )
        return matches

    def _segment_index(self, match: ProximityMatch) -> int:
        """Index of the first segment whose closest point to the POI is the matched one."""
        poi = match.point_of_interest.coordinate
        for i, (start, end) in enumerate(self.segments()):
            try:
                nearest = closest_point(start.coordinate, end.coordinate, poi)
            except UndefinedProjection:
                continue
            if nearest.isclose(match.nearest_point_on_route):
                return i
        raise ValueError(f"{match.point_of_interest} was not matched against this route")

    def with_points_of_interest(
        self, matches: Sequence[ProximityMatch], on_route: bool = False
    ) -> "Route":
        """
        Build a new route that also visits the matched points of interest.

        Each match is inserted into the segment it was matched against, in
        along-track order.

        Args:
            matches: Matches produced against this route
            on_route: Insert the unnamed closest points on the route instead
                of the points of interest themselves

        Returns:
            New Route
        """
        inserted: List[List[Tuple[float, NamedCoordinate]]] = [
            [] for _ in range(len(self.points) - 1)
        ]
        for match in matches:
            i = self._segment_index(match)
            start, end = self.points[i], self.points[i + 1]
            nearest = match.nearest_point_on_route
            atd = along_track_distance(start.coordinate, end.coordinate, nearest)
            waypoint = (
                nearest.to_named_coordinate() if on_route else match.point_of_interest
            )
            inserted[i].append((atd, waypoint))

        points: List[NamedCoordinate] = []
        for i, start in enumerate(self.points[:-1]):
            points.append(start)
            points.extend(
                waypoint for _, waypoint in sorted(inserted[i], key=lambda x: x[0])
            )
        points.append(self.points[-1])
        return Route(points)

    def get_bbox(self, buffer: float = 0.0) -> Tuple[float, float, float, float]:
        """
        Get bounding box for this route, optionally with a buffer.

        Args:
            buffer: Buffer distance in nautical miles (default: 0.0)

        Longitudes are unwrapped along the route, so a route crossing the
        antimeridian gets a box with east > 180 (or west < -180) rather than
        one spanning the globe.

        Returns:
            Tuple of (south, west, north, east) in decimal degrees
        """
        latitudes = [point.coordinate.latitude_degrees for point in self.points]
        longitudes: List[float] = []
        for point in self.points:
            longitude = point.coordinate.longitude_degrees
            if longitudes:
                longitude = unwrap_longitude_degrees(longitude, longitudes[-1])
            longitudes.append(longitude)

        min_lat, max_lat = min(latitudes), max(latitudes)
        min_lon, max_lon = min(longitudes), max(longitudes)

        # One nautical mile is one arc-minute of latitude
        avg_lat = (min_lat + max_lat) / 2
        lat_buffer = buffer / 60.0
        lon_buffer = buffer / (60.0 * max(abs(math.cos(math.radians(avg_lat))), 1e-6))

        bbox = (
            max(-90.0, min_lat - lat_buffer),
            min_lon - lon_buffer,
            min(90.0, max_lat + lat_buffer),
            max_lon + lon_buffer,
        )
        logger.debug(
            f"Route bounding box: ({bbox[0]:.4f}, {bbox[1]:.4f}, {bbox[2]:.4f}, "
            f"{bbox[3]:.4f}) with {buffer} nm buffer"
        )
        return bbox

    def to_skyvector(self) -> str:
        """
        Format the route as a flight plan for https://skyvector.com/.

        Named points print their name; unnamed points print DDMMSSNDDDMMSSW.
        """
        waypoints = []
        for point in self.points:
            if point.name:
                waypoints.append(point.name)
            else:
                waypoints.append(
                    format_latitude(point.latitude) + format_longitude(point.longitude)
                )
        return " ".join(waypoints)

    @classmethod
    def from_gpx(cls, file_input: Union[TextIO, str]) -> "Route":
        """
        Parse a GPX document into a route.

        The first <rte> is used when present; otherwise all track points of
        all tracks and segments are concatenated.

        Args:
            file_input: File-like object or string containing GPX data

        Returns:
            Route object

        Raises:
            ValueError: If the GPX holds fewer than two route or track points.
            gpxpy.gpx.GPXException: If GPX file is malformed.
        """
        gpx_data = gpxpy.parse(file_input)

        if gpx_data.routes:
            points = [
                _gpx_point_to_named_coordinate(point)
                for point in gpx_data.routes[0].points
            ]
            logger.debug(f"Parsed {len(points)} route points from GPX")
        else:
            points = [
                _gpx_point_to_named_coordinate(point)
                for track in gpx_data.tracks
                for segment in track.segments
                for point in segment.points
            ]
            logger.debug(f"Parsed {len(points)} track points from GPX")

        return cls(points)

    @classmethod
    def from_file(cls, filename: str) -> "Route":
        """
        Load and parse a GPX file into a route.

        Raises:
            ValueError: If the file holds fewer than two route points.
            FileNotFoundError: If file doesn't exist.
            PermissionError: If file can't be read.
            gpxpy.gpx.GPXException: If GPX file is malformed.
        """
        logger.debug(f"Reading GPX file: {filename}")
        with open(filename, "r", encoding="utf-8") as f:
            return cls.from_gpx(f)

    def __len__(self) -> int:
        """Return number of points in route."""
        return len(self.points)

    def __getitem__(self, index):
        """Allow indexing into route points."""
        return self.points[index]

    def __iter__(self) -> Iterator[NamedCoordinate]:
        """Allow iteration over route points."""
        return iter(self.points)

    def __repr__(self) -> str:
        return f"Route({self.to_skyvector()!r})"


def load_waypoints(file_input: Union[TextIO, str]) -> List[NamedCoordinate]:
    """
    Read the <wpt> entries of a GPX document as named coordinates.

    Raises:
        gpxpy.gpx.GPXException: If GPX file is malformed.
    """
    gpx_data = gpxpy.parse(file_input)
    waypoints = [_gpx_point_to_named_coordinate(point) for point in gpx_data.waypoints]
    logger.debug(f"Parsed {len(waypoints)} waypoints from GPX")
    return waypoints
