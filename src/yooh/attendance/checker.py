from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from apscheduler.schedulers.background import BackgroundScheduler

from ..classes import resolver
from ..classes.model import ClassSession
from ..classes.repository import ClassRepository
from ..common.datetime_utils import now_local
from ..core.constants import DEFAULT_CHECK_INTERVAL_SECONDS
from ..core.exceptions import (
    AlreadySignedError,
    NoActiveClassError,
    OutsideZoneError,
    PermissionDeniedError,
)
from ..geo.geofence import GeoPoint, distance_to_zone, is_within_zone
from ..geo.tracker import LocationTracker
from ..zones.model import SchoolZone
from ..zones.service import SchoolZoneRegistry
from .ledger import AttendanceLedger
from .model import AttendanceRecord

logger = logging.getLogger(__name__)

CHECK_JOB_ID = "auto_attendance_check"


@dataclass(frozen=True)
class SignEligibility:
    """Whether the sign action is enabled, and the label to show when it is not."""

    can_sign: bool
    reason: Optional[str]
    active_class: Optional[ClassSession] = None
    zone: Optional[SchoolZone] = None
    distance_meters: Optional[float] = None
    within_zone: bool = False
    already_signed: bool = False
    location: Optional[GeoPoint] = None


class AttendanceChecker:
    """Combines geofence and class resolution into the signing decision.

    Runs on demand (manual sign) and on a periodic timer (automatic sign).
    """

    def __init__(
        self,
        ledger: AttendanceLedger,
        classes: ClassRepository,
        zones: SchoolZoneRegistry,
        tracker: LocationTracker,
        *,
        interval_seconds: int = DEFAULT_CHECK_INTERVAL_SECONDS,
        clock: Callable[[], datetime] = now_local,
    ):
        self._ledger = ledger
        self._classes = classes
        self._zones = zones
        self._tracker = tracker
        self._interval = interval_seconds
        self._clock = clock
        self._scheduler: Optional[BackgroundScheduler] = None

    def evaluate(self, user_id: int, *, now: Optional[datetime] = None) -> SignEligibility:
        now = now or self._clock()

        if self._tracker.is_denied(user_id):
            return SignEligibility(can_sign=False, reason="Location permission denied")

        fix = self._tracker.latest(user_id, now=now)
        if fix is None:
            return SignEligibility(can_sign=False, reason="Waiting for your location")

        zone = self._zones.geofence_zone(user_id)
        distance = distance_to_zone(fix.point, zone)
        within = is_within_zone(fix.point, zone)
        active = resolver.active_session_at(now, self._classes.list_for_user(user_id))

        common = dict(active_class=active, zone=zone, distance_meters=distance, within_zone=within, location=fix.point)

        if zone is None:
            return SignEligibility(can_sign=False, reason="No active school zone", **common)
        if not within:
            return SignEligibility(
                can_sign=False,
                reason=f"You are {distance:.0f} m from {zone.name} (limit {zone.radius:.0f} m)",
                **common,
            )
        if active is None:
            return SignEligibility(can_sign=False, reason="No class in session right now", **common)
        if self._ledger.has_signed(user_id, active.class_id, now.date()):
            return SignEligibility(
                can_sign=False,
                reason="Attendance already signed",
                already_signed=True,
                **common,
            )
        return SignEligibility(can_sign=True, reason=None, **common)

    def sign_now(self, user_id: int, *, now: Optional[datetime] = None) -> AttendanceRecord:
        """Manual sign. Raises the error matching the first failed precondition."""
        now = now or self._clock()
        eligibility = self.evaluate(user_id, now=now)

        if eligibility.can_sign:
            return self._ledger.sign_attendance(user_id, eligibility.active_class, eligibility.location, now=now)
        if self._tracker.is_denied(user_id):
            raise PermissionDeniedError("Location permission denied")
        if not eligibility.within_zone:
            raise OutsideZoneError(eligibility.reason or "Outside the school zone")
        if eligibility.active_class is None:
            raise NoActiveClassError("No class in session right now")
        raise AlreadySignedError("Attendance already signed for this class today")

    def check_once(self, *, now: Optional[datetime] = None) -> list[AttendanceRecord]:
        """One timer tick: sign every tracked user who is eligible right now."""
        now = now or self._clock()
        signed: list[AttendanceRecord] = []

        for user_id in self._tracker.tracked_users(now=now):
            try:
                eligibility = self.evaluate(user_id, now=now)
                if not eligibility.can_sign:
                    continue
                signed.append(
                    self._ledger.sign_attendance(user_id, eligibility.active_class, eligibility.location, now=now)
                )
            except (AlreadySignedError, PermissionDeniedError):
                continue
            except Exception:
                logger.exception("Automatic attendance check failed for user %s", user_id)

        return signed

    @property
    def is_running(self) -> bool:
        return self._scheduler is not None and self._scheduler.running

    @property
    def next_check_at(self) -> Optional[datetime]:
        if not self.is_running:
            return None
        job = self._scheduler.get_job(CHECK_JOB_ID)
        return job.next_run_time if job else None

    def start(self) -> None:
        if self.is_running:
            return
        scheduler = BackgroundScheduler()
        scheduler.add_job(
            func=self.check_once,
            trigger="interval",
            seconds=self._interval,
            id=CHECK_JOB_ID,
            name="Automatic attendance check",
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )
        scheduler.start()
        self._scheduler = scheduler
        logger.info("Automatic attendance checker started (every %ss)", self._interval)

    def stop(self, *, wait: bool = True) -> None:
        if self._scheduler is None:
            return
        if self._scheduler.running:
            self._scheduler.shutdown(wait=wait)
        self._scheduler = None
        logger.info("Automatic attendance checker stopped")
