from __future__ import annotations

from datetime import datetime, time

import pytest

from fakes import (
    FixedClock,
    InMemoryAssignments,
    InMemoryAttendance,
    InMemoryClasses,
    InMemoryCourseAttendance,
    InMemoryCourses,
    InMemoryNotificationCenter,
    InMemoryRemoteStore,
    InMemorySettings,
    InMemoryUsers,
)
from yooh.classes.model import ClassSession
from yooh.container import assemble_container
from yooh.core.enums import DayOfWeek


@pytest.fixture
def fixed_now() -> datetime:
    # Monday
    return datetime(2026, 2, 2, 8, 30, 0)


@pytest.fixture
def clock(fixed_now) -> FixedClock:
    return FixedClock(fixed_now)


@pytest.fixture
def make_class():
    def _make(
        class_id: str = "c1",
        *,
        user_id=1,
        title: str = "Maths",
        day: DayOfWeek = DayOfWeek.MONDAY,
        start: time = time(8, 0),
        end: time = time(9, 0),
    ) -> ClassSession:
        return ClassSession(
            class_id=class_id,
            user_id=user_id,
            title=title,
            day_of_week=day,
            start_time=start,
            end_time=end,
            created_at=datetime(2026, 1, 5, 12, 0),
        )

    return _make


@pytest.fixture
def remote_store() -> InMemoryRemoteStore:
    return InMemoryRemoteStore()


@pytest.fixture
def container(clock, remote_store):
    c = assemble_container(
        users_repo=InMemoryUsers(),
        classes_repo=InMemoryClasses(),
        assignments_repo=InMemoryAssignments(),
        attendance_repo=InMemoryAttendance(),
        settings_repo=InMemorySettings(),
        notifications_repo=InMemoryNotificationCenter(),
        courses_repo=InMemoryCourses(),
        course_attendance_repo=InMemoryCourseAttendance(),
        remote_store=remote_store,
        sync_workers=1,
        clock=clock,
    )
    yield c
    c.shutdown()
