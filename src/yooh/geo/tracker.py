from __future__ import annotations

import threading
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Dict, Optional

from ..common.datetime_utils import now_local
from ..core.exceptions import PermissionDeniedError
from .geofence import GeoPoint


@dataclass(frozen=True)
class LocationFix:
    point: GeoPoint
    received_at: datetime

    def is_stale(self, now: datetime, max_age: Optional[timedelta]) -> bool:
        return max_age is not None and now - self.received_at > max_age


class LocationTracker:
    """Latest location fix and permission state per user, app-session scoped.

    A fix older than ``max_age_seconds`` no longer counts as the user's
    position; it is dropped the next time it is read.
    """

    def __init__(self, *, max_age_seconds: Optional[float] = None, clock: Callable[[], datetime] = now_local):
        self._lock = threading.Lock()
        self._fixes: Dict[int, LocationFix] = {}
        self._denied: set[int] = set()
        self._max_age = timedelta(seconds=max_age_seconds) if max_age_seconds is not None else None
        self._clock = clock

    def update(self, user_id: int, point: GeoPoint, *, received_at: Optional[datetime] = None) -> None:
        fix = LocationFix(point=point, received_at=received_at or self._clock())
        with self._lock:
            self._denied.discard(int(user_id))
            self._fixes[int(user_id)] = fix

    def deny(self, user_id: int) -> None:
        """Permission revoked: forget the last fix so the user can no longer be evaluated."""
        with self._lock:
            self._denied.add(int(user_id))
            self._fixes.pop(int(user_id), None)

    def is_denied(self, user_id: int) -> bool:
        with self._lock:
            return int(user_id) in self._denied

    def latest(self, user_id: int, *, now: Optional[datetime] = None) -> Optional[LocationFix]:
        now = now or self._clock()
        with self._lock:
            if int(user_id) in self._denied:
                raise PermissionDeniedError("Location permission denied")
            fix = self._fixes.get(int(user_id))
            if fix is not None and fix.is_stale(now, self._max_age):
                del self._fixes[int(user_id)]
                return None
            return fix

    def tracked_users(self, *, now: Optional[datetime] = None) -> list[int]:
        """Users with a fresh fix. Expired fixes are pruned."""
        now = now or self._clock()
        with self._lock:
            for user_id in [u for u, fix in self._fixes.items() if fix.is_stale(now, self._max_age)]:
                del self._fixes[user_id]
            return list(self._fixes.keys())
