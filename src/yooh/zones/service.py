from __future__ import annotations

import logging
import threading
import uuid
from datetime import datetime
from typing import TYPE_CHECKING, Callable, Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.validators import require_float, require_latitude, require_longitude, require_non_empty
from ..core.constants import (
    DEFAULT_ZONE_ADDRESS,
    DEFAULT_ZONE_LATITUDE,
    DEFAULT_ZONE_LONGITUDE,
    DEFAULT_ZONE_NAME,
    DEFAULT_ZONE_RADIUS_METERS,
    MAX_ZONE_RADIUS_METERS,
)
from ..core.exceptions import NotFoundError, ValidationError
from ..geo.geofence import GeoPoint, distance_to_zone, is_within_zone
from .model import SchoolZone
from .repository import ZoneRepository

if TYPE_CHECKING:
    from ..sync.service import SyncService

logger = logging.getLogger(__name__)

# Used when a user has no registered zone at all.
FALLBACK_ZONE = SchoolZone(
    zone_id="default",
    name=DEFAULT_ZONE_NAME,
    address=DEFAULT_ZONE_ADDRESS,
    latitude=DEFAULT_ZONE_LATITUDE,
    longitude=DEFAULT_ZONE_LONGITUDE,
    radius=DEFAULT_ZONE_RADIUS_METERS,
    is_active=True,
    created_at=datetime(1970, 1, 1),
)


def _require_radius(value) -> float:
    radius = require_float(value, "radius")
    if radius <= 0 or radius > MAX_ZONE_RADIUS_METERS:
        raise ValidationError(f"radius must be between 0 and {MAX_ZONE_RADIUS_METERS:g} meters")
    return radius


class SchoolZoneRegistry:
    """Known school zones per user, with exactly one active zone after any add/activate.

    The whole zone list is rewritten in a single save, so callers never observe
    a state with zero or several active zones in between.
    """

    def __init__(
        self,
        zones: ZoneRepository,
        *,
        sync: Optional["SyncService"] = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._zones = zones
        self._sync = sync
        self._clock = clock
        self._lock = threading.RLock()

    def list_zones(self, user_id: int) -> list[SchoolZone]:
        with self._lock:
            zones = self._zones.load(user_id)
            if zones is None:
                default = self._build_zone(
                    name=DEFAULT_ZONE_NAME,
                    address=DEFAULT_ZONE_ADDRESS,
                    latitude=DEFAULT_ZONE_LATITUDE,
                    longitude=DEFAULT_ZONE_LONGITUDE,
                    radius=DEFAULT_ZONE_RADIUS_METERS,
                )
                self._zones.save(user_id, [default])
                logger.info("Bootstrapped default school zone for user %s", user_id)
                self._mirror(user_id, default)
                return [default]
            return list(zones)

    def active_zone(self, user_id: int) -> Optional[SchoolZone]:
        return next((z for z in self.list_zones(user_id) if z.is_active), None)

    def geofence_zone(self, user_id: int) -> Optional[SchoolZone]:
        """Zone used for containment checks: the active one, or the fallback when none are registered."""
        zones = self.list_zones(user_id)
        if not zones:
            return FALLBACK_ZONE
        return next((z for z in zones if z.is_active), None)

    def is_within(self, user_id: int, point: Optional[GeoPoint]) -> bool:
        return is_within_zone(point, self.geofence_zone(user_id))

    def distance(self, user_id: int, point: GeoPoint) -> Optional[float]:
        return distance_to_zone(point, self.geofence_zone(user_id))

    def add_zone(
        self,
        user_id: int,
        *,
        name: str,
        address: str = "",
        latitude,
        longitude,
        radius=DEFAULT_ZONE_RADIUS_METERS,
    ) -> SchoolZone:
        zone = self._build_zone(
            name=require_non_empty(name, "name"),
            address=(address or "").strip(),
            latitude=require_latitude(latitude),
            longitude=require_longitude(longitude),
            radius=_require_radius(radius),
        )
        with self._lock:
            others = [z.with_active(False) for z in self.list_zones(user_id)]
            self._zones.save(user_id, others + [zone])
        self._mirror(user_id, zone)
        return zone

    def update_zone(
        self,
        user_id: int,
        zone_id: str,
        *,
        name: Optional[str] = None,
        address: Optional[str] = None,
        latitude=None,
        longitude=None,
        radius=None,
    ) -> SchoolZone:
        with self._lock:
            zones = self.list_zones(user_id)
            current = self._find(zones, zone_id)
            updated = SchoolZone(
                zone_id=current.zone_id,
                name=require_non_empty(name, "name") if name is not None else current.name,
                address=address.strip() if address is not None else current.address,
                latitude=require_latitude(latitude) if latitude is not None else current.latitude,
                longitude=require_longitude(longitude) if longitude is not None else current.longitude,
                radius=_require_radius(radius) if radius is not None else current.radius,
                is_active=current.is_active,
                created_at=current.created_at,
            )
            self._zones.save(user_id, [updated if z.zone_id == zone_id else z for z in zones])
        self._mirror(user_id, updated)
        return updated

    def set_active(self, user_id: int, zone_id: str) -> SchoolZone:
        with self._lock:
            zones = self.list_zones(user_id)
            self._find(zones, zone_id)
            updated = [z.with_active(z.zone_id == zone_id) for z in zones]
            self._zones.save(user_id, updated)
        for zone in updated:
            self._mirror(user_id, zone)
        return next(z for z in updated if z.zone_id == zone_id)

    def delete(self, user_id: int, zone_id: str) -> None:
        """Remove a zone; deleting the active zone leaves no zone active."""
        with self._lock:
            zones = self.list_zones(user_id)
            self._find(zones, zone_id)
            self._zones.save(user_id, [z for z in zones if z.zone_id != zone_id])
        if self._sync:
            self._sync.delete_zone(zone_id)

    def _find(self, zones: Sequence[SchoolZone], zone_id: str) -> SchoolZone:
        for zone in zones:
            if zone.zone_id == zone_id:
                return zone
        raise NotFoundError("School zone not found")

    def _build_zone(self, *, name: str, address: str, latitude: float, longitude: float, radius: float) -> SchoolZone:
        return SchoolZone(
            zone_id=str(uuid.uuid4()),
            name=name,
            address=address,
            latitude=latitude,
            longitude=longitude,
            radius=radius,
            is_active=True,
            created_at=self._clock(),
        )

    def _mirror(self, user_id: int, zone: SchoolZone) -> None:
        if self._sync:
            self._sync.push_zone(user_id, zone)
