from __future__ import annotations

import pytest

from fakes import InMemoryCourseAttendance, InMemoryCourses, InMemoryUsers
from yooh.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from yooh.dashboard.service import DashboardService
from yooh.users.service import AuthService


@pytest.fixture
def users():
    return InMemoryUsers()


@pytest.fixture
def service(users):
    return DashboardService(InMemoryCourses(), InMemoryCourseAttendance(), users)


@pytest.fixture
def people(users):
    auth = AuthService(users)
    lecturer = auth.register(first_name="L", last_name="One", email="l@x.test", password="secret1", role="lecturer")
    alice = auth.register(first_name="Alice", last_name="A", email="a@x.test", password="secret1")
    bob = auth.register(first_name="Bob", last_name="B", email="b@x.test", password="secret1")
    return lecturer, alice, bob


def test_attendance_percentage_per_student(service, people):
    lecturer, alice, bob = people
    maths = service.create_course(lecturer, "Maths")
    physics = service.create_course(lecturer, "Physics")
    for course in (maths, physics):
        service.enroll(lecturer, course_id=course.course_id, student_id=alice.user_id)
    service.enroll(lecturer, course_id=maths.course_id, student_id=bob.user_id)

    service.record_attendance(alice, course_id=maths.course_id, attendance_date="2026-02-02", is_present=True)
    service.record_attendance(
        lecturer, course_id=physics.course_id, attendance_date="2026-02-02", is_present=False, student_id=alice.user_id
    )

    overview = {s.first_name: s for s in service.attendance_overview(lecturer)}

    assert overview["Alice"].attendance_percentage == 50.0
    assert overview["Alice"].enrolled_courses == 2
    assert overview["Bob"].attendance_percentage == 0.0


def test_percentage_is_rounded_to_two_places(service, people):
    lecturer, alice, _ = people
    courses = [service.create_course(lecturer, name) for name in ("A", "B", "C")]
    for c in courses:
        service.enroll(lecturer, course_id=c.course_id, student_id=alice.user_id)
    service.record_attendance(alice, course_id=courses[0].course_id, attendance_date="2026-02-02", is_present=True)

    assert service.attendance_overview(lecturer)[0].attendance_percentage == 33.33


def test_duplicate_course_attendance_is_rejected(service, people):
    lecturer, alice, _ = people
    course = service.create_course(lecturer, "Maths")
    service.record_attendance(alice, course_id=course.course_id, attendance_date="2026-02-02", is_present=True)

    with pytest.raises(ValidationError):
        service.record_attendance(alice, course_id=course.course_id, attendance_date="2026-02-02", is_present=False)


def test_students_cannot_use_the_dashboard_or_record_for_others(service, people):
    lecturer, alice, bob = people
    course = service.create_course(lecturer, "Maths")

    with pytest.raises(AuthorizationError):
        service.attendance_overview(alice)
    with pytest.raises(AuthorizationError):
        service.record_attendance(
            alice, course_id=course.course_id, attendance_date="2026-02-02", is_present=True, student_id=bob.user_id
        )


def test_unknown_course(service, people):
    _, alice, _ = people

    with pytest.raises(NotFoundError):
        service.record_attendance(alice, course_id=99, attendance_date="2026-02-02", is_present=True)


def test_lecturer_without_courses_sees_empty_list(service, people):
    lecturer, _, _ = people

    assert service.attendance_overview(lecturer) == []
