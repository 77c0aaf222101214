from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, time
from typing import Optional

from ..core.enums import DayOfWeek


def _hhmm(value: time) -> str:
    return value.strftime("%H:%M")


@dataclass(frozen=True)
class ClassSession:
    """Weekly recurring class template (not a dated instance)."""

    class_id: str
    user_id: Optional[int]
    title: str
    day_of_week: DayOfWeek
    start_time: time
    end_time: time
    location: Optional[str] = None
    notes: Optional[str] = None
    is_recurring: bool = True
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.class_id,
            "title": self.title,
            "dayOfWeek": self.day_of_week.value,
            "startTime": _hhmm(self.start_time),
            "endTime": _hhmm(self.end_time),
            "location": self.location,
            "notes": self.notes,
            "isRecurring": self.is_recurring,
        }


@dataclass(frozen=True)
class ClassOccurrence:
    """Calendar-dated projection of a template, for display only."""

    session: ClassSession
    starts_at: datetime
    ends_at: datetime

    def to_dict(self) -> dict:
        return {
            "classId": self.session.class_id,
            "title": self.session.title,
            "location": self.session.location,
            "startsAt": self.starts_at.isoformat(),
            "endsAt": self.ends_at.isoformat(),
        }
