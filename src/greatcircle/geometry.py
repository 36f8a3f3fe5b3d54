#!/usr/bin/env python3
"""
Value types for positions and radials on a spherical Earth.

Latitudes and longitudes are radians. North latitudes and east longitudes
are positive; the west-positive longitudes used by aviation text listings
are translated in greatcircle.dms before they reach these types.
"""

from dataclasses import dataclass
import math

from .dms import parse_latitude, parse_longitude
from .units import (
    degrees_to_radians,
    normalize_bearing,
    normalize_longitude,
    radians_to_degrees,
    wrap_angle,
)

# Roughly 6 mm on the Earth's surface
COORDINATE_TOLERANCE = 1e-9


@dataclass(frozen=True)
class Coordinate:
    """A position on the sphere, in radians."""

    latitude: float
    longitude: float

    def __post_init__(self):
        if not (math.isfinite(self.latitude) and math.isfinite(self.longitude)):
            raise ValueError(
                f"Coordinate components must be finite, got "
                f"({self.latitude}, {self.longitude})"
            )
        if abs(self.latitude) > math.pi / 2:
            raise ValueError(
                f"Latitude {self.latitude} rad is outside [-pi/2, pi/2]"
            )
        object.__setattr__(self, "longitude", normalize_longitude(self.longitude))

    @classmethod
    def from_degrees(cls, latitude: float, longitude: float) -> "Coordinate":
        """Build a Coordinate from decimal degrees (east-positive longitude)."""
        return cls(degrees_to_radians(latitude), degrees_to_radians(longitude))

    @property
    def latitude_degrees(self) -> float:
        return radians_to_degrees(self.latitude)

    @property
    def longitude_degrees(self) -> float:
        return radians_to_degrees(self.longitude)

    def isclose(self, other: "Coordinate", abs_tol: float = COORDINATE_TOLERANCE) -> bool:
        """
        Compare two coordinates within a tolerance.

        Longitudes are compared modulo a full turn, so pi and -pi match.

        Args:
            other: Coordinate to compare with
            abs_tol: Allowed difference per component in radians

        Returns:
            True if both latitude and longitude are within abs_tol
        """
        return (
            abs(self.latitude - other.latitude) <= abs_tol
            and abs(wrap_angle(self.longitude - other.longitude)) <= abs_tol
        )

    def to_named_coordinate(self, name: str = "") -> "NamedCoordinate":
        return NamedCoordinate(self, name)


@dataclass(frozen=True)
class NamedCoordinate:
    """A Coordinate with an optional label, such as an airport identifier."""

    coordinate: Coordinate
    name: str = ""

    @classmethod
    def from_dms(
        cls, name: str, latitude_text: str, longitude_text: str
    ) -> "NamedCoordinate":
        """
        Parse a named coordinate from D:M:S text.

        Args:
            name: Label for the point
            latitude_text: North-positive latitude, e.g. "37:37:00"
            longitude_text: West-positive longitude, e.g. "122:22:00" for 122°22'W

        Returns:
            NamedCoordinate in internal (east-positive) radians

        Raises:
            CoordinateParseError: If either text is malformed or out of range
        """
        return cls(
            Coordinate(parse_latitude(latitude_text), parse_longitude(longitude_text)),
            name,
        )

    @property
    def latitude(self) -> float:
        return self.coordinate.latitude

    @property
    def longitude(self) -> float:
        return self.coordinate.longitude

    def isclose(
        self, other: "NamedCoordinate", abs_tol: float = COORDINATE_TOLERANCE
    ) -> bool:
        """Names must match exactly and coordinates within abs_tol."""
        return self.name == other.name and self.coordinate.isclose(
            other.coordinate, abs_tol
        )

    def __str__(self) -> str:
        position = (
            f"({self.coordinate.latitude_degrees:.4f}, "
            f"{self.coordinate.longitude_degrees:.4f})"
        )
        return f"{self.name} {position}" if self.name else position


@dataclass(frozen=True)
class Radial:
    """
    A great circle leaving a coordinate on an initial bearing.

    The bearing changes along the great circle; this is the bearing at
    the origin, in radians clockwise from true north.
    """

    coordinate: Coordinate
    bearing: float

    def __post_init__(self):
        if not math.isfinite(self.bearing):
            raise ValueError(f"Radial bearing must be finite, got {self.bearing}")
        object.__setattr__(self, "bearing", normalize_bearing(self.bearing))

    @property
    def latitude(self) -> float:
        return self.coordinate.latitude

    @property
    def longitude(self) -> float:
        return self.coordinate.longitude
