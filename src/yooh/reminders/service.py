from __future__ import annotations

from datetime import datetime
from typing import Callable, Optional

from ..assignments.repository import AssignmentRepository
from ..classes.repository import ClassRepository
from ..common.datetime_utils import now_local
from .model import ScheduledNotification
from .preferences import ReminderPreferencesService
from .scheduler import ReminderScheduler


class ReminderService:
    """Use case: rebuild a user's reminders from what is stored right now."""

    def __init__(
        self,
        preferences: ReminderPreferencesService,
        scheduler: ReminderScheduler,
        classes: ClassRepository,
        assignments: AssignmentRepository,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._preferences = preferences
        self._scheduler = scheduler
        self._classes = classes
        self._assignments = assignments
        self._clock = clock

    def reschedule(self, user_id: int, *, now: Optional[datetime] = None) -> list[ScheduledNotification]:
        return self._scheduler.reschedule(
            user_id,
            self._classes.list_for_user(user_id),
            self._assignments.list_for_user(user_id),
            self._preferences.load(user_id),
            now or self._clock(),
        )
