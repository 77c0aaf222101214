from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import Course, CourseAttendance, Enrollment


class CourseRepository(Protocol):
    def get_by_id(self, course_id: int) -> Optional[Course]:
        raise NotImplementedError

    def list_for_lecturer(self, lecturer_id: int) -> Sequence[Course]:
        raise NotImplementedError

    def create(self, *, name: str, lecturer_id: int) -> int:
        raise NotImplementedError

    def enroll(self, *, student_id: int, course_id: int) -> bool:
        """False when the student was already enrolled."""

        raise NotImplementedError

    def list_enrollments(self, course_ids: Sequence[int]) -> Sequence[Enrollment]:
        raise NotImplementedError


class CourseAttendanceRepository(Protocol):
    def create(self, *, student_id: int, course_id: int, attendance_date: date, is_present: bool) -> CourseAttendance:
        """Raises ValidationError when the (student, course, date) row exists."""

        raise NotImplementedError

    def list_for_courses(self, course_ids: Sequence[int]) -> Sequence[CourseAttendance]:
        raise NotImplementedError
