"""Plane and sphere geometry helpers used by delivery zone matching."""

from __future__ import annotations

import math
from collections.abc import Sequence
from typing import Any

EARTH_RADIUS_KM: float = 6371.0

Point = tuple[float, float]


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Return great-circle distance in kilometres between two lat/lon points."""
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def point_in_polygon(point: Point, ring: Sequence[Point]) -> bool:
    """Ray-casting test of ``point`` (x, y) against a closed or open ring of vertices."""
    if len(ring) < 3:
        return False

    x, y = point
    inside = False
    j = len(ring) - 1
    for i in range(len(ring)):
        xi, yi = ring[i]
        xj, yj = ring[j]
        if (yi > y) != (yj > y) and x < (xj - xi) * (y - yi) / (yj - yi) + xi:
            inside = not inside
        j = i
    return inside


def _vertex(raw: Any) -> Point:
    if isinstance(raw, dict):
        lon = raw.get("lng", raw.get("lon", raw.get("longitude")))
        lat = raw.get("lat", raw.get("latitude"))
        return float(lon), float(lat)
    lon, lat = raw[0], raw[1]
    return float(lon), float(lat)


def parse_ring(coordinates: Any) -> list[Point] | None:
    """Normalize stored polygon coordinates into a list of (lon, lat) vertices.

    Accepts a bare ring of ``[lon, lat]`` pairs, a GeoJSON ``Polygon`` mapping
    (outer ring only) or a list of ``{"lat": .., "lng": ..}`` objects.
    Returns ``None`` for anything malformed.
    """
    if coordinates is None:
        return None

    raw_ring: Any = coordinates
    if isinstance(coordinates, dict):
        if coordinates.get("type") != "Polygon":
            return None
        rings = coordinates.get("coordinates") or []
        if not rings:
            return None
        raw_ring = rings[0]

    if not isinstance(raw_ring, (list, tuple)):
        return None

    try:
        ring = [_vertex(vertex) for vertex in raw_ring]
    except (TypeError, ValueError, IndexError, KeyError):
        return None

    if len(ring) >= 2 and ring[0] == ring[-1]:
        ring = ring[:-1]
    if len(ring) < 3:
        return None
    return ring
