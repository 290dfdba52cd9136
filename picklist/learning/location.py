"""Location fingerprints: parsing and the same-store test.

The client records where a trip started as a string such as
``"50.8503°, 4.3517°"``. That string is parsed here, once, into a
GeoPoint; everything downstream compares GeoPoints.
"""

from __future__ import annotations

import re

from picklist.learning.constants import LOCATION_TOLERANCE_DEG
from picklist.models.contracts import GeoPoint

_NUMBER = r"[-+]?(?:\d+(?:\.\d*)?|\.\d+)"
_FINGERPRINT_RE = re.compile(rf"({_NUMBER})°,\s*({_NUMBER})°")

LocationLike = str | GeoPoint | None


def parse_location(text: LocationLike) -> GeoPoint | None:
    """Parse a ``"<lat>°, <lon>°"`` fingerprint. Returns None if there is no pair."""
    if isinstance(text, GeoPoint):
        return text
    if not text:
        return None
    match = _FINGERPRINT_RE.search(text)
    if match is None:
        return None
    return GeoPoint(lat=float(match.group(1)), lon=float(match.group(2)))


def format_location(point: GeoPoint) -> str:
    return f"{point.lat}°, {point.lon}°"


def is_similar_location(a: LocationLike, b: LocationLike) -> bool:
    """True when both fingerprints parse and sit within the tolerance on each axis.

    An unparseable or missing fingerprint never matches anything, itself included.
    """
    pa = parse_location(a)
    pb = parse_location(b)
    if pa is None or pb is None:
        return False
    return (
        abs(pa.lat - pb.lat) < LOCATION_TOLERANCE_DEG
        and abs(pa.lon - pb.lon) < LOCATION_TOLERANCE_DEG
    )
