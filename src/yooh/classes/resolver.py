"""Which class is in session now, and where templates land on the calendar.

Templates carry a weekday plus a time-of-day window; only the hour, minute
and second are projected onto the evaluated date.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import Iterable, Optional, Sequence, Union

from ..core.constants import DEFAULT_UPCOMING_DAYS
from ..core.enums import DayOfWeek
from .model import ClassOccurrence, ClassSession

DateOrDatetime = Union[date, datetime]


def as_range_start(value: DateOrDatetime) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime.combine(value, time.min)


def as_range_end(value: DateOrDatetime) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime.combine(value, time.max)


def active_session_at(instant: datetime, templates: Iterable[ClassSession]) -> Optional[ClassSession]:
    """First template (fetch order) whose window on the instant's date contains the instant.

    A template whose end is before its start never matches.
    """
    day = instant.date()
    weekday = DayOfWeek.from_date(day)
    for template in templates:
        if template.day_of_week != weekday:
            continue
        start = datetime.combine(day, template.start_time)
        end = datetime.combine(day, template.end_time)
        if start <= instant <= end:
            return template
    return None


def occurrences_in_range(
    templates: Sequence[ClassSession],
    start: DateOrDatetime,
    end: DateOrDatetime,
    *,
    now: datetime,
) -> list[datetime]:
    """Start instants of every template occurrence inside [start, end] that is strictly after now."""
    range_start = as_range_start(start)
    range_end = as_range_end(end)
    out: list[datetime] = []

    day = range_start.date()
    while day <= range_end.date():
        weekday = DayOfWeek.from_date(day)
        for template in templates:
            if template.day_of_week != weekday:
                continue
            occurrence = datetime.combine(day, template.start_time)
            if range_start <= occurrence <= range_end and occurrence > now:
                out.append(occurrence)
        day += timedelta(days=1)

    out.sort()
    return out


def next_occurrence(template: ClassSession, now: datetime) -> Optional[datetime]:
    for offset in range(8):
        day = now.date() + timedelta(days=offset)
        if DayOfWeek.from_date(day) != template.day_of_week:
            continue
        occurrence = datetime.combine(day, template.start_time)
        if occurrence > now:
            return occurrence
    return None


def upcoming(
    templates: Sequence[ClassSession],
    now: datetime,
    *,
    days: int = DEFAULT_UPCOMING_DAYS,
) -> list[ClassOccurrence]:
    horizon = now + timedelta(days=days)
    out: list[ClassOccurrence] = []
    day = now.date()
    while day <= horizon.date():
        weekday = DayOfWeek.from_date(day)
        for template in templates:
            if template.day_of_week != weekday:
                continue
            starts_at = datetime.combine(day, template.start_time)
            if now < starts_at <= horizon:
                out.append(
                    ClassOccurrence(
                        session=template,
                        starts_at=starts_at,
                        ends_at=datetime.combine(day, template.end_time),
                    )
                )
        day += timedelta(days=1)

    out.sort(key=lambda o: o.starts_at)
    return out
