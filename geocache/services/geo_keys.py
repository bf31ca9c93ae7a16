"""Approximate cache keys for continuous coordinates.

Latitude and longitude are rounded half-up (ties away from zero) on their
shortest decimal representation and always rendered with exactly ``places``
fractional digits, so two coordinates that round to the same value share a
key. Modifiers follow in a fixed order: radius, then limit.
"""

from __future__ import annotations

from geocache.schemas.geo import Coordinate
from geocache.utils.geo import fixed, plain_number

MIN_LIMIT = 2
MAX_LIMIT = 1000
MIN_RADIUS_KM = 0.1
MAX_RADIUS_KM = 100.0


def clamp_limit(limit: int) -> int:
    return max(MIN_LIMIT, min(MAX_LIMIT, int(limit)))


def clamp_radius(radius_km: float) -> float:
    return max(MIN_RADIUS_KM, min(MAX_RADIUS_KM, float(radius_km)))


def approx_key(coord: Coordinate, places: int) -> str:
    return f"{fixed(coord.lat, places)}_{fixed(coord.lng, places)}"


def derive_key(
    prefix: str,
    coord: Coordinate,
    places: int,
    radius: float | None = None,
    limit: int | None = None,
) -> str:
    """Build ``<prefix>_<lat>_<lng>[_<radius>][_<limit>]``.

    Callers clamp radius and limit first so equal effective queries share a key.
    """

    key = f"{prefix}_{approx_key(coord, places)}"
    if radius is not None:
        key += f"_{plain_number(radius)}"
    if limit is not None:
        key += f"_{int(limit)}"
    return key
