from __future__ import annotations

import uuid
from dataclasses import replace
from datetime import datetime, time
from typing import TYPE_CHECKING, Callable, Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.validators import optional_text, require_non_empty
from ..core.enums import DayOfWeek, parse_enum
from ..core.exceptions import NotFoundError, ValidationError
from . import resolver
from .model import ClassOccurrence, ClassSession
from .repository import ClassRepository

if TYPE_CHECKING:
    from ..sync.service import SyncService


def _check_window(start_time: time, end_time: time) -> None:
    if end_time < start_time:
        raise ValidationError("Class end time must not be before its start time")


class ClassService:
    """Use case: manage weekly class templates. Local write first, then the remote mirror."""

    def __init__(
        self,
        classes: ClassRepository,
        *,
        sync: Optional["SyncService"] = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._classes = classes
        self._sync = sync
        self._clock = clock

    def list_classes(self, user_id: int) -> Sequence[ClassSession]:
        return self._classes.list_for_user(user_id)

    def get_class(self, user_id: int, class_id: str) -> ClassSession:
        session = self._classes.get_by_id(class_id)
        if not session or session.user_id != user_id:
            raise NotFoundError("Class not found")
        return session

    def create_class(
        self,
        *,
        user_id: int,
        title: str,
        day_of_week,
        start_time: time,
        end_time: time,
        location: Optional[str] = None,
        notes: Optional[str] = None,
        is_recurring: bool = True,
    ) -> ClassSession:
        _check_window(start_time, end_time)
        session = ClassSession(
            class_id=str(uuid.uuid4()),
            user_id=int(user_id),
            title=require_non_empty(title, "title"),
            day_of_week=parse_enum(DayOfWeek, day_of_week, "dayOfWeek"),
            start_time=start_time,
            end_time=end_time,
            location=optional_text(location),
            notes=optional_text(notes),
            is_recurring=bool(is_recurring),
            created_at=self._clock(),
        )
        self._classes.create(session)
        if self._sync:
            self._sync.push_class(session)
        return session

    def update_class(
        self,
        *,
        user_id: int,
        class_id: str,
        title: Optional[str] = None,
        day_of_week=None,
        start_time: Optional[time] = None,
        end_time: Optional[time] = None,
        location: Optional[str] = None,
        notes: Optional[str] = None,
        is_recurring: Optional[bool] = None,
    ) -> ClassSession:
        current = self.get_class(user_id, class_id)
        updated = replace(
            current,
            title=require_non_empty(title, "title") if title is not None else current.title,
            day_of_week=(
                parse_enum(DayOfWeek, day_of_week, "dayOfWeek") if day_of_week is not None else current.day_of_week
            ),
            start_time=start_time or current.start_time,
            end_time=end_time or current.end_time,
            location=optional_text(location) if location is not None else current.location,
            notes=optional_text(notes) if notes is not None else current.notes,
            is_recurring=bool(is_recurring) if is_recurring is not None else current.is_recurring,
        )
        _check_window(updated.start_time, updated.end_time)

        if not self._classes.update(updated):
            raise NotFoundError("Class not found")
        if self._sync:
            self._sync.push_class(updated)
        return updated

    def delete_class(self, *, user_id: int, class_id: str) -> None:
        self.get_class(user_id, class_id)
        if not self._classes.delete(class_id):
            raise ValidationError("Deleting the class failed")
        if self._sync:
            self._sync.delete_class(class_id)

    def active_class(self, user_id: int, now: Optional[datetime] = None) -> Optional[ClassSession]:
        return resolver.active_session_at(now or self._clock(), self._classes.list_for_user(user_id))

    def occurrences(self, user_id: int, *, start, end, now: Optional[datetime] = None) -> list[datetime]:
        if resolver.as_range_end(end) < resolver.as_range_start(start):
            raise ValidationError("end must not be before start")
        return resolver.occurrences_in_range(
            self._classes.list_for_user(user_id), start, end, now=now or self._clock()
        )

    def upcoming(self, user_id: int, *, now: Optional[datetime] = None, days: int = 7) -> list[ClassOccurrence]:
        return resolver.upcoming(self._classes.list_for_user(user_id), now or self._clock(), days=days)
