#!/usr/bin/env python3
"""
Angle and distance unit conversions.

All angles handled by the rest of the package are radians and all distances
are nautical miles. One nautical mile is one arc-minute of a great circle,
so the sphere's radius is 180 * 60 / pi nautical miles.
"""

import math

NM_PER_RADIAN = (180 * 60) / math.pi
TWO_PI = 2 * math.pi


def dms_to_decimal_degrees(degrees: float, minutes: float, seconds: float) -> float:
    """Convert (degrees, minutes, seconds) into decimal degrees."""
    return degrees + (minutes / 60) + (seconds / 3600)


def degrees_to_radians(degrees: float) -> float:
    return degrees * (math.pi / 180)


def radians_to_degrees(radians: float) -> float:
    return radians * (180 / math.pi)


def nm_to_radians(nautical_miles: float) -> float:
    """Convert nautical miles into an angular distance in radians."""
    return (math.pi / (180 * 60)) * nautical_miles


def radians_to_nm(radians: float) -> float:
    """Convert an angular distance in radians into nautical miles."""
    return NM_PER_RADIAN * radians


def normalize_longitude(longitude: float) -> float:
    """
    Wrap a longitude into the half-open range (-pi, pi].

    Args:
        longitude: Longitude in radians, any value

    Returns:
        Equivalent longitude in (-pi, pi]
    """
    if -math.pi < longitude <= math.pi:
        return longitude
    wrapped = math.pi - ((math.pi - longitude) % TWO_PI)
    # The modulo can round up to exactly 2*pi
    if wrapped <= -math.pi:
        return math.pi
    return wrapped


def normalize_bearing(bearing: float) -> float:
    """Wrap a bearing into [0, 2*pi)."""
    wrapped = bearing % TWO_PI
    # -1e-17 % 2pi rounds to exactly 2pi
    if wrapped >= TWO_PI:
        return 0.0
    return wrapped


def wrap_angle(angle: float) -> float:
    """Wrap a signed angle difference into (-pi, pi]."""
    return normalize_longitude(angle)


def unwrap_longitude_degrees(longitude: float, reference: float) -> float:
    """
    Shift a longitude in degrees by whole turns to lie within 180 degrees of reference.

    Used to keep drawn tracks and bounding boxes continuous across the
    antimeridian; the result may lie outside [-180, 180].
    """
    return reference + ((longitude - reference + 180.0) % 360.0) - 180.0
