from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Callable, Optional

from ..assignments.repository import AssignmentRepository
from ..attendance.repository import AttendanceRepository
from ..classes.repository import ClassRepository
from ..common.datetime_utils import now_local
from ..core.constants import MIGRATION_VERSION
from ..core.exceptions import MigrationError
from . import documents
from .remote_store import ASSIGNMENTS, ATTENDANCE, CLASSES, MIGRATIONS, RemoteStore

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[float], None]


@dataclass(frozen=True)
class MigrationStats:
    classes: int = 0
    assignments: int = 0
    attendance: int = 0
    skipped: bool = False


@dataclass(frozen=True)
class MigrationState:
    is_migrating: bool = False
    progress: float = 0.0
    status: str = ""
    error: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "isMigrating": self.is_migrating,
            "progress": round(self.progress, 4),
            "status": self.status,
            "error": self.error,
        }


class MigrationService:
    """One-time bulk copy of a user's local data to the remote store.

    Phases run in order (classes, assignments, attendance) and each moves the
    progress by one third. The marker document is written last, so a failed
    run is simply repeated; every row is upserted under its own id.
    """

    def __init__(
        self,
        remote: RemoteStore,
        *,
        classes: ClassRepository,
        assignments: AssignmentRepository,
        attendance: AttendanceRepository,
        clock: Callable[[], datetime] = now_local,
    ):
        self._remote = remote
        self._classes = classes
        self._assignments = assignments
        self._attendance = attendance
        self._clock = clock
        self._run_lock = threading.Lock()
        self._state_lock = threading.Lock()
        self._state = MigrationState()
        self._thread: Optional[threading.Thread] = None

    @property
    def state(self) -> MigrationState:
        with self._state_lock:
            return self._state

    def reset_state(self) -> None:
        self._set_state(MigrationState())

    def is_migrated(self, user_id: int) -> bool:
        try:
            return self._remote.get(MIGRATIONS, str(user_id)) is not None
        except Exception as e:
            raise MigrationError(f"Could not read migration marker: {e}") from e

    def migrate(self, user_id: int, on_progress: Optional[ProgressCallback] = None) -> MigrationStats:
        with self._run_lock:
            return self._migrate(user_id, on_progress)

    def force_migrate(self, user_id: int, on_progress: Optional[ProgressCallback] = None) -> MigrationStats:
        with self._run_lock:
            try:
                self._remote.delete(MIGRATIONS, str(user_id))
            except Exception as e:
                self._fail(e)
            logger.info("Migration marker reset for user %s", user_id)
            return self._migrate(user_id, on_progress)

    def start(self, user_id: int, *, force: bool = False) -> bool:
        """Run the migration on a background thread. False when one is already running."""
        if self._thread is not None and self._thread.is_alive():
            return False
        target = self.force_migrate if force else self.migrate

        def _run():
            try:
                target(user_id)
            except MigrationError:
                pass  # already recorded in state and logged

        self._thread = threading.Thread(target=_run, name=f"yooh-migration-{user_id}", daemon=True)
        self._thread.start()
        return True

    def join(self, timeout: Optional[float] = None) -> None:
        if self._thread is not None:
            self._thread.join(timeout)

    def remote_stats(self, user_id: int) -> dict[str, int]:
        try:
            return {
                collection: self._remote.count_where(collection, "userId", user_id)
                for collection in (CLASSES, ASSIGNMENTS, ATTENDANCE)
            }
        except Exception as e:
            logger.warning("Could not read remote stats for user %s: %s", user_id, e)
            raise MigrationError(f"Could not read remote stats: {e}") from e

    def _migrate(self, user_id: int, on_progress: Optional[ProgressCallback]) -> MigrationStats:
        def progress(value: float, status: str) -> None:
            self._set_state(MigrationState(is_migrating=value < 1.0, progress=value, status=status))
            if on_progress:
                on_progress(value)

        self._set_state(MigrationState(is_migrating=True, status="Starting migration..."))
        try:
            if self.is_migrated(user_id):
                progress(1.0, "Migration already completed")
                logger.info("Migration already completed for user %s", user_id)
                return MigrationStats(skipped=True)

            progress(0.0, "Migrating classes...")
            self._classes.backfill_owner(user_id)
            classes = 0
            for session in self._classes.list_for_migration(user_id):
                self._remote.set(CLASSES, session.class_id, documents.class_document(replace(session, user_id=user_id)))
                classes += 1
            progress(1 / 3, "Migrating assignments...")

            self._assignments.backfill_owner(user_id)
            assignments = 0
            for assignment in self._assignments.list_for_migration(user_id):
                self._remote.set(
                    ASSIGNMENTS,
                    assignment.assignment_id,
                    documents.assignment_document(replace(assignment, user_id=user_id)),
                )
                assignments += 1
            progress(2 / 3, "Migrating attendance records...")

            self._attendance.backfill_owner(user_id)
            attendance = 0
            now = self._clock()
            for record in self._attendance.list_for_migration(user_id):
                self._remote.set(
                    ATTENDANCE,
                    record.record_id,
                    documents.attendance_document(replace(record, user_id=user_id), created_at=now),
                )
                attendance += 1

            self._remote.set(
                MIGRATIONS,
                str(user_id),
                {"userId": str(user_id), "completedAt": now.isoformat(), "version": MIGRATION_VERSION},
            )
        except Exception as e:
            self._fail(e)

        progress(1.0, "Migration completed successfully!")
        logger.info(
            "Migrated user %s: %s classes, %s assignments, %s attendance records",
            user_id,
            classes,
            assignments,
            attendance,
        )
        return MigrationStats(classes=classes, assignments=assignments, attendance=attendance)

    def _fail(self, error: Exception) -> None:
        message = f"Migration failed: {error}"
        self._set_state(MigrationState(is_migrating=False, progress=self.state.progress, status="Migration failed", error=message))
        logger.error(message)
        if isinstance(error, MigrationError):
            raise error
        raise MigrationError(message) from error

    def _set_state(self, state: MigrationState) -> None:
        with self._state_lock:
            self._state = state
