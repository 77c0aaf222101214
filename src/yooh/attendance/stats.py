"""Derived attendance statistics, pure functions over a fetched record set."""

from __future__ import annotations

from datetime import date, timedelta
from typing import Iterable, Optional, Sequence

from ..common.datetime_utils import month_key
from .model import AttendanceRecord, AttendanceStats


def total_days(records: Iterable[AttendanceRecord]) -> int:
    """Distinct calendar days with at least one record."""
    return len({r.sign_date for r in records})


def monthly_count(records: Iterable[AttendanceRecord], month: date) -> int:
    key = month_key(month)
    return sum(1 for r in records if month_key(r.sign_date) == key)


def current_streak(records: Iterable[AttendanceRecord], today: date) -> int:
    """Consecutive days with a record, walking back from today; stops at the first empty day."""
    signed_days = {r.sign_date for r in records}
    streak = 0
    cursor = today
    while cursor in signed_days:
        streak += 1
        cursor -= timedelta(days=1)
    return streak


def record_for_date(records: Iterable[AttendanceRecord], day: date) -> Optional[AttendanceRecord]:
    """Most recent record signed on the given day."""
    same_day = [r for r in records if r.sign_date == day]
    if not same_day:
        return None
    return max(same_day, key=lambda r: r.timestamp)


def records_for_month(records: Iterable[AttendanceRecord], month: date) -> list[AttendanceRecord]:
    key = month_key(month)
    out = [r for r in records if month_key(r.sign_date) == key]
    out.sort(key=lambda r: r.timestamp, reverse=True)
    return out


def summarize(records: Sequence[AttendanceRecord], today: date) -> AttendanceStats:
    return AttendanceStats(
        total_days=total_days(records),
        monthly_count=monthly_count(records, today),
        current_streak=current_streak(records, today),
        signed_today=record_for_date(records, today) is not None,
    )
