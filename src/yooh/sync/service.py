from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor, wait
from datetime import datetime
from typing import Callable, Optional

from ..assignments.model import Assignment
from ..assignments.repository import AssignmentRepository
from ..attendance.model import AttendanceRecord
from ..attendance.repository import AttendanceRepository
from ..classes.model import ClassSession
from ..classes.repository import ClassRepository
from ..common.datetime_utils import now_local
from ..core.exceptions import RemoteUnavailableError
from ..zones.model import SchoolZone
from ..zones.repository import ZoneRepository
from . import documents
from .remote_store import ASSIGNMENTS, ATTENDANCE, CLASSES, LOCATIONS, RemoteStore

logger = logging.getLogger(__name__)


class SyncService:
    """One-way mirror of local writes to the remote store.

    Pushes run on a worker pool after the local commit and never raise into
    the caller; a failure is only recorded in last_error. sync_all is the
    explicit retry path.
    """

    def __init__(
        self,
        remote: RemoteStore,
        *,
        classes: ClassRepository,
        assignments: AssignmentRepository,
        attendance: AttendanceRepository,
        zones: ZoneRepository,
        workers: int = 2,
        clock: Callable[[], datetime] = now_local,
    ):
        self._remote = remote
        self._classes = classes
        self._assignments = assignments
        self._attendance = attendance
        self._zones = zones
        self._clock = clock
        self._executor = ThreadPoolExecutor(max_workers=max(1, int(workers)), thread_name_prefix="yooh-sync")
        self._lock = threading.Lock()
        self._pending: set[Future] = set()
        self._closed = False
        self._last_error: Optional[str] = None
        self._last_synced_at: Optional[datetime] = None

    @property
    def last_error(self) -> Optional[str]:
        return self._last_error

    @property
    def last_synced_at(self) -> Optional[datetime]:
        return self._last_synced_at

    @property
    def is_syncing(self) -> bool:
        with self._lock:
            return any(not f.done() for f in self._pending)

    def push_class(self, session: ClassSession) -> None:
        self._submit(f"class {session.class_id}", self._remote.set, CLASSES, session.class_id, documents.class_document(session))

    def delete_class(self, class_id: str) -> None:
        self._submit(f"class {class_id} delete", self._remote.delete, CLASSES, class_id)

    def push_assignment(self, assignment: Assignment) -> None:
        self._submit(
            f"assignment {assignment.assignment_id}",
            self._remote.set,
            ASSIGNMENTS,
            assignment.assignment_id,
            documents.assignment_document(assignment),
        )

    def delete_assignment(self, assignment_id: str) -> None:
        self._submit(f"assignment {assignment_id} delete", self._remote.delete, ASSIGNMENTS, assignment_id)

    def push_attendance(self, record: AttendanceRecord) -> None:
        self._submit(
            f"attendance {record.record_id}",
            self._remote.set,
            ATTENDANCE,
            record.record_id,
            documents.attendance_document(record, created_at=self._clock()),
        )

    def push_zone(self, user_id: int, zone: SchoolZone) -> None:
        self._submit(f"zone {zone.zone_id}", self._remote.set, LOCATIONS, zone.zone_id, documents.zone_document(user_id, zone))

    def delete_zone(self, zone_id: str) -> None:
        self._submit(f"zone {zone_id} delete", self._remote.delete, LOCATIONS, zone_id)

    def sync_all(self, user_id: int) -> int:
        """Push every local item of the user, synchronously. Returns the number of documents written."""
        pushed = 0
        try:
            for session in self._classes.list_for_user(user_id):
                self._remote.set(CLASSES, session.class_id, documents.class_document(session))
                pushed += 1
            for assignment in self._assignments.list_for_user(user_id):
                self._remote.set(ASSIGNMENTS, assignment.assignment_id, documents.assignment_document(assignment))
                pushed += 1
            now = self._clock()
            for record in self._attendance.list_for_user(user_id):
                self._remote.set(ATTENDANCE, record.record_id, documents.attendance_document(record, created_at=now))
                pushed += 1
            for zone in self._zones.load(user_id) or []:
                self._remote.set(LOCATIONS, zone.zone_id, documents.zone_document(user_id, zone))
                pushed += 1
        except RemoteUnavailableError as e:
            self._last_error = str(e)
            logger.warning("Full sync for user %s stopped after %s documents: %s", user_id, pushed, e)
            raise

        self._last_error = None
        self._last_synced_at = self._clock()
        logger.info("Full sync for user %s pushed %s documents", user_id, pushed)
        return pushed

    def flush(self, timeout: Optional[float] = None) -> None:
        """Block until every push submitted so far has finished."""
        with self._lock:
            pending = list(self._pending)
        wait(pending, timeout=timeout)

    def close(self) -> None:
        """Stop accepting pushes and cancel the ones not yet started."""
        with self._lock:
            self._closed = True
        self._executor.shutdown(wait=False, cancel_futures=True)

    def _submit(self, label: str, fn: Callable, *args) -> None:
        with self._lock:
            if self._closed:
                logger.warning("Sync service closed, dropping push of %s", label)
                return
            future = self._executor.submit(self._run, label, fn, *args)
            self._pending.add(future)
        future.add_done_callback(self._forget)

    def _run(self, label: str, fn: Callable, *args) -> None:
        try:
            fn(*args)
        except Exception as e:
            self._last_error = str(e)
            logger.warning("Remote push of %s failed: %s", label, e)
        else:
            self._last_synced_at = self._clock()

    def _forget(self, future: Future) -> None:
        with self._lock:
            self._pending.discard(future)
