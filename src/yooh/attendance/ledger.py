from __future__ import annotations

import logging
import threading
import uuid
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import TYPE_CHECKING, Callable, Dict, Iterator, Optional, Sequence, Tuple

from ..classes.model import ClassSession
from ..common.datetime_utils import now_local
from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..core.exceptions import AlreadySignedError
from ..geo.geofence import GeoPoint
from . import stats
from .factory import AttendanceStrategyFactory
from .model import AttendanceRecord, AttendanceStats
from .repository import AttendanceRepository

if TYPE_CHECKING:
    from ..sync.service import SyncService

logger = logging.getLogger(__name__)

SlotKey = Tuple[int, Optional[str], date]


@dataclass
class _Slot:
    lock: threading.Lock = field(default_factory=threading.Lock)
    users: int = 0


class AttendanceLedger:
    """System of record for attendance: at most one record per (user, class, day).

    Geofencing is the caller's job; the ledger only guards uniqueness. The
    check-then-insert runs under a lock per slot, and the table's unique index
    turns any remaining race into AlreadySignedError.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        *,
        strategy_factory: Optional[AttendanceStrategyFactory] = None,
        sync: Optional["SyncService"] = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._attendance = attendance
        self._factory = strategy_factory or AttendanceStrategyFactory()
        self._sync = sync
        self._clock = clock
        self._locks_guard = threading.Lock()
        self._slots: Dict[SlotKey, _Slot] = {}

    def has_signed(self, user_id: int, class_id: Optional[str], day: date) -> bool:
        return self._attendance.exists_for(user_id=int(user_id), class_id=class_id, sign_date=day)

    def sign_attendance(
        self,
        user_id: int,
        session: Optional[ClassSession],
        location: GeoPoint,
        *,
        now: Optional[datetime] = None,
    ) -> AttendanceRecord:
        """Create today's record for the class, or a general check-in when session is None."""
        now = now or self._clock()
        class_id = session.class_id if session else None
        key: SlotKey = (int(user_id), class_id, now.date())

        with self._slot(key):
            if self.has_signed(user_id, class_id, now.date()):
                logger.debug("User %s already signed class %s on %s", user_id, class_id, now.date())
                raise AlreadySignedError("Attendance already signed for this class today")

            decision = self._factory.for_signing(now=now, session=session).decide_sign(now=now, session=session)
            record = AttendanceRecord(
                record_id=str(uuid.uuid4()),
                user_id=int(user_id),
                timestamp=now,
                status=decision.status,
                latitude=location.latitude,
                longitude=location.longitude,
                class_id=class_id,
            )
            self._attendance.create(record)

        logger.info("User %s signed attendance for class %s (%s)", user_id, class_id, record.status.value)
        if self._sync:
            self._sync.push_attendance(record)
        return record

    def history(self, user_id: int, *, limit: int = DEFAULT_HISTORY_LIMIT) -> Sequence[AttendanceRecord]:
        return self._attendance.list_for_user(user_id, limit=limit)

    def stats(self, user_id: int, *, today: Optional[date] = None) -> AttendanceStats:
        today = today or self._clock().date()
        return stats.summarize(self._attendance.list_for_user(user_id), today)

    def total_days(self, user_id: int) -> int:
        return stats.total_days(self._attendance.list_for_user(user_id))

    def monthly_count(self, user_id: int, month: date) -> int:
        return stats.monthly_count(self._attendance.list_for_user(user_id), month)

    def current_streak(self, user_id: int, *, today: Optional[date] = None) -> int:
        return stats.current_streak(self._attendance.list_for_user(user_id), today or self._clock().date())

    def record_for_date(self, user_id: int, day: date) -> Optional[AttendanceRecord]:
        return stats.record_for_date(self._attendance.list_for_user(user_id), day)

    def records_for_month(self, user_id: int, month: date) -> list[AttendanceRecord]:
        return stats.records_for_month(self._attendance.list_for_user(user_id), month)

    def clear_all(self, user_id: int) -> int:
        removed = self._attendance.clear_for_user(user_id)
        logger.info("Cleared %s attendance records for user %s", removed, user_id)
        return removed

    @contextmanager
    def _slot(self, key: SlotKey) -> Iterator[None]:
        """Hold the lock of one (user, class, day) slot; it is dropped once nobody holds or awaits it."""
        with self._locks_guard:
            slot = self._slots.setdefault(key, _Slot())
            slot.users += 1
        try:
            with slot.lock:
                yield
        finally:
            with self._locks_guard:
                slot.users -= 1
                if slot.users == 0:
                    del self._slots[key]
