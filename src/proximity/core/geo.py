from __future__ import annotations

import math
import re
from dataclasses import dataclass

from proximity.errors import ParseError

"""
Geospatial helpers.

All trigonometry in this package works in radians. Degree values only exist at the
edges (record text, settings, CLI arguments) and are converted here before use.
"""

EARTH_RADIUS_KM = 6371.0

# Plain base-10 literal: sign, digits, optional fraction, optional exponent.
_DECIMAL_RE = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


@dataclass(frozen=True)
class Coordinate:
    """A latitude/longitude pair in radians."""

    lat: float
    lon: float

    @classmethod
    def from_degrees(cls, lat_deg: float, lon_deg: float) -> "Coordinate":
        return cls(lat=degrees_to_radians(lat_deg), lon=degrees_to_radians(lon_deg))

    def to_degrees(self) -> tuple[float, float]:
        return math.degrees(self.lat), math.degrees(self.lon)


def degrees_to_radians(value: float) -> float:
    return float(value) * math.pi / 180


def parse_degree_string(text: str) -> float:
    """Parse a decimal-degree string and return the value in radians.

    Only plain decimal literals are accepted (no whitespace, underscores, hex, inf or nan).
    Geographic range is not checked.
    """
    if not isinstance(text, str) or not _DECIMAL_RE.fullmatch(text):
        raise ParseError(text)
    value = float(text)
    if not math.isfinite(value):
        # e.g. "1e999" overflows to inf.
        raise ParseError(text)
    return degrees_to_radians(value)


def distance(a: Coordinate, b: Coordinate, *, radius_km: float = EARTH_RADIUS_KM, clamp: bool = True) -> float:
    """Great-circle distance in kilometers (spherical law of cosines).

    With `clamp=False`, rounding that pushes the cosine of the central angle past
    [-1, 1] (coincident or antipodal points) yields NaN instead of 0 or pi * radius.
    """
    dlon = abs(a.lon - b.lon)
    cos_angle = math.sin(a.lat) * math.sin(b.lat) + math.cos(a.lat) * math.cos(b.lat) * math.cos(dlon)
    if clamp:
        cos_angle = max(-1.0, min(1.0, cos_angle))
    elif not -1.0 <= cos_angle <= 1.0:
        return math.nan
    return radius_km * math.acos(cos_angle)
