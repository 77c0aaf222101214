"""Geofence evaluation: great-circle distance and zone containment."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Protocol

from ..core.constants import EARTH_RADIUS_METERS


@dataclass(frozen=True)
class GeoPoint:
    latitude: float
    longitude: float


class CircularZone(Protocol):
    latitude: float
    longitude: float
    radius: float


def haversine_meters(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlambda = math.radians(lon2 - lon1)
    a = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2) ** 2
    a = min(1.0, max(0.0, a))
    return EARTH_RADIUS_METERS * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def distance_to_zone(point: GeoPoint, zone: Optional[CircularZone]) -> Optional[float]:
    """Meters between the point and the zone center; None without a zone."""
    if zone is None:
        return None
    return haversine_meters(point.latitude, point.longitude, zone.latitude, zone.longitude)


def is_within_zone(point: Optional[GeoPoint], zone: Optional[CircularZone]) -> bool:
    if point is None or zone is None:
        return False
    return distance_to_zone(point, zone) <= zone.radius
