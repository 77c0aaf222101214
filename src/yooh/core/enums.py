from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Type, TypeVar

from .exceptions import ValidationError

E = TypeVar("E", bound=Enum)


class Role(str, Enum):
    """User role used for authorization."""

    STUDENT = "student"
    LECTURER = "lecturer"


class AttendanceStatus(str, Enum):
    ON_TIME = "onTime"
    LATE = "late"
    ABSENT = "absent"


class Priority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ReminderCategory(str, Enum):
    CLASS = "class"
    ASSIGNMENT = "assignment"


class DayOfWeek(str, Enum):
    SUNDAY = "sunday"
    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"

    @classmethod
    def from_date(cls, value: date) -> "DayOfWeek":
        # date.weekday(): Monday == 0
        return _WEEKDAYS[value.weekday()]


_WEEKDAYS = (
    DayOfWeek.MONDAY,
    DayOfWeek.TUESDAY,
    DayOfWeek.WEDNESDAY,
    DayOfWeek.THURSDAY,
    DayOfWeek.FRIDAY,
    DayOfWeek.SATURDAY,
    DayOfWeek.SUNDAY,
)


def parse_enum(enum_cls: Type[E], raw: object, field_name: str) -> E:
    """Strict enum decoding: unknown raw values are rejected, never defaulted."""
    if isinstance(raw, enum_cls):
        return raw
    value = str(raw).strip()
    for candidate in (value, value.lower()):
        try:
            return enum_cls(candidate)
        except ValueError:
            continue
    raise ValidationError(f"{field_name} is invalid: {raw!r}")
