from __future__ import annotations

import logging
from collections import defaultdict

from ..common.datetime_utils import parse_iso_date
from ..common.validators import require_non_empty, require_positive_int
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..users.model import User
from ..users.repository import UserRepository
from .model import Course, CourseAttendance, StudentAttendanceSummary
from .repository import CourseAttendanceRepository, CourseRepository

logger = logging.getLogger(__name__)


class DashboardService:
    """Lecturer view: per-student attendance percentage across the lecturer's courses."""

    def __init__(
        self,
        courses: CourseRepository,
        attendance: CourseAttendanceRepository,
        users: UserRepository,
    ):
        self._courses = courses
        self._attendance = attendance
        self._users = users

    def attendance_overview(self, lecturer: User) -> list[StudentAttendanceSummary]:
        self._require_lecturer(lecturer)
        course_ids = [c.course_id for c in self._courses.list_for_lecturer(lecturer.user_id)]
        if not course_ids:
            return []

        enrollments = self._courses.list_enrollments(course_ids)
        enrolled: dict[int, set[int]] = defaultdict(set)
        for e in enrollments:
            enrolled[e.student_id].add(e.course_id)

        attended: dict[int, int] = defaultdict(int)
        for row in self._attendance.list_for_courses(course_ids):
            if row.is_present and row.course_id in enrolled.get(row.student_id, ()):
                attended[row.student_id] += 1

        out: list[StudentAttendanceSummary] = []
        for student_id in sorted(enrolled):
            student = self._users.get_by_id(student_id)
            if not student:
                logger.warning("Enrollment references missing student %s", student_id)
                continue
            total = len(enrolled[student_id])
            percentage = round(attended[student_id] / total * 100, 2) if total else 0.0
            out.append(
                StudentAttendanceSummary(
                    student_id=student.user_id,
                    first_name=student.first_name,
                    last_name=student.last_name,
                    email=student.email,
                    enrolled_courses=total,
                    attended=attended[student_id],
                    attendance_percentage=percentage,
                )
            )
        return out

    def create_course(self, lecturer: User, name: str) -> Course:
        self._require_lecturer(lecturer)
        course_id = self._courses.create(name=require_non_empty(name, "name"), lecturer_id=lecturer.user_id)
        return Course(course_id=course_id, name=name.strip(), lecturer_id=lecturer.user_id)

    def enroll(self, lecturer: User, *, course_id, student_id) -> bool:
        course = self._owned_course(lecturer, course_id)
        student = self._users.get_by_id(require_positive_int(student_id, "studentId"))
        if not student or student.role != Role.STUDENT:
            raise NotFoundError("Student not found")
        return self._courses.enroll(student_id=student.user_id, course_id=course.course_id)

    def record_attendance(
        self,
        actor: User,
        *,
        course_id,
        attendance_date,
        is_present,
        student_id=None,
    ) -> CourseAttendance:
        course_id = require_positive_int(course_id, "classId")
        day = parse_iso_date(attendance_date)
        if not isinstance(is_present, bool):
            raise ValidationError("isPresent must be true or false")

        if actor.role == Role.LECTURER:
            course = self._owned_course(actor, course_id)
            if student_id is None:
                raise ValidationError("studentId is required")
            student_id = require_positive_int(student_id, "studentId")
        else:
            course = self._courses.get_by_id(course_id)
            if not course:
                raise NotFoundError("Class not found")
            if student_id is not None and int(student_id) != actor.user_id:
                raise AuthorizationError("Students can only record their own attendance")
            student_id = actor.user_id

        row = self._attendance.create(
            student_id=student_id,
            course_id=course.course_id,
            attendance_date=day,
            is_present=is_present,
        )
        logger.info("Recorded course attendance %s for student %s", row.attendance_id, student_id)
        return row

    def _owned_course(self, lecturer: User, course_id) -> Course:
        self._require_lecturer(lecturer)
        course = self._courses.get_by_id(require_positive_int(course_id, "classId"))
        if not course or course.lecturer_id != lecturer.user_id:
            raise NotFoundError("Class not found")
        return course

    @staticmethod
    def _require_lecturer(user: User) -> None:
        if user.role != Role.LECTURER:
            raise AuthorizationError("Lecturer access required")
