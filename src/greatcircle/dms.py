#!/usr/bin/env python3
"""
Degree-minute-second text for coordinates.

Aviation listings write longitudes west-positive without a hemisphere
letter ("122:22:00" is 122°22'W). Internally longitudes are east-positive,
so the sign is flipped here on the way in, and hemisphere letters carry it
back out when formatting.
"""

from typing import Optional, Tuple
import math

from .units import degrees_to_radians, dms_to_decimal_degrees, radians_to_degrees


class CoordinateParseError(ValueError):
    """Raised when coordinate text is malformed or out of range."""


def _split_hemisphere(text: str, letters: str) -> Tuple[str, Optional[str]]:
    """Strip an optional trailing hemisphere letter, e.g. "37:37:00N"."""
    if text and text[-1].upper() in letters:
        return text[:-1].strip(), text[-1].upper()
    return text, None


def parse_dms(text: str) -> float:
    """
    Parse "D", "D:M" or "D:M:S" text into decimal degrees.

    Components may be decimal ("48:26.57") and the text may start with a
    sign. Minutes and seconds must lie in [0, 60).

    Args:
        text: Degree text

    Returns:
        Decimal degrees

    Raises:
        CoordinateParseError: If the text is malformed or a component is out of range
    """
    stripped = text.strip()
    sign = 1.0
    if stripped[:1] in ("-", "+"):
        sign = -1.0 if stripped[0] == "-" else 1.0
        stripped = stripped[1:]

    parts = stripped.split(":")
    if not stripped or len(parts) > 3:
        raise CoordinateParseError(f"Expected D, D:M or D:M:S, got {text!r}")

    try:
        values = [float(part) for part in parts]
    except ValueError:
        raise CoordinateParseError(f"Non-numeric component in {text!r}")

    if not all(math.isfinite(value) for value in values):
        raise CoordinateParseError(f"Non-finite component in {text!r}")

    values += [0.0] * (3 - len(values))
    degrees, minutes, seconds = values
    if degrees < 0:
        raise CoordinateParseError(f"Sign must precede the degrees in {text!r}")
    if not 0 <= minutes < 60:
        raise CoordinateParseError(f"Minutes out of range [0, 60) in {text!r}")
    if not 0 <= seconds < 60:
        raise CoordinateParseError(f"Seconds out of range [0, 60) in {text!r}")

    return sign * dms_to_decimal_degrees(degrees, minutes, seconds)


def parse_latitude(text: str) -> float:
    """
    Parse latitude text (north-positive, optional N/S suffix) into radians.

    Raises:
        CoordinateParseError: If malformed or beyond 90 degrees
    """
    body, hemisphere = _split_hemisphere(text.strip(), "NS")
    degrees = parse_dms(body)
    if hemisphere == "S":
        degrees = -degrees
    if abs(degrees) > 90:
        raise CoordinateParseError(f"Latitude {text!r} is beyond 90 degrees")
    return degrees_to_radians(degrees)


def parse_longitude(text: str) -> float:
    """
    Parse longitude text into east-positive radians.

    Without a hemisphere letter the text is west-positive, as in aviation
    listings. An E/W suffix states the hemisphere explicitly.

    Raises:
        CoordinateParseError: If malformed or beyond 180 degrees
    """
    body, hemisphere = _split_hemisphere(text.strip(), "EW")
    degrees = parse_dms(body)
    if hemisphere == "E":
        east_degrees = degrees
    else:
        east_degrees = -degrees
    if abs(east_degrees) > 180:
        raise CoordinateParseError(f"Longitude {text!r} is beyond 180 degrees")
    return degrees_to_radians(east_degrees)


def format_dms(
    angle: float, positive: str, negative: str, degree_digits: int
) -> str:
    """
    Format an angle as zero-padded DDMMSS followed by a hemisphere letter.

    Args:
        angle: Angle in radians
        positive: Hemisphere letter for angles >= 0
        negative: Hemisphere letter for angles < 0
        degree_digits: Width of the degrees field (2 for latitude, 3 for longitude)

    Returns:
        Text such as "373700N" or "1222200W"
    """
    total_seconds = round(abs(radians_to_degrees(angle)) * 3600)
    degrees, remainder = divmod(total_seconds, 3600)
    minutes, seconds = divmod(remainder, 60)
    hemisphere = negative if angle < 0 and total_seconds else positive
    return f"{degrees:0{degree_digits}d}{minutes:02d}{seconds:02d}{hemisphere}"


def format_latitude(latitude: float) -> str:
    return format_dms(latitude, "N", "S", 2)


def format_longitude(longitude: float) -> str:
    return format_dms(longitude, "E", "W", 3)
