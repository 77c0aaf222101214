from __future__ import annotations

from datetime import date
from typing import Any, Dict, Optional, Sequence

from mysql.connector.errors import IntegrityError

from ..core.exceptions import ValidationError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key
from .model import Course, CourseAttendance, Enrollment
from .repository import CourseAttendanceRepository, CourseRepository


def _placeholders(values: Sequence[Any]) -> str:
    return ",".join(["%s"] * len(values))


def _to_attendance(row: Dict[str, Any]) -> CourseAttendance:
    return CourseAttendance(
        attendance_id=int(row["attendance_id"]),
        student_id=int(row["student_id"]),
        course_id=int(row["course_id"]),
        attendance_date=row["attendance_date"],
        is_present=bool(row["is_present"]),
        created_at=row.get("created_at"),
    )


class MySQLCourseRepository(CourseRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, course_id: int) -> Optional[Course]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT course_id, name, lecturer_id FROM courses WHERE course_id=%s", (int(course_id),))
            r = fetchone(cur)
            return Course(int(r["course_id"]), r["name"], int(r["lecturer_id"])) if r else None

    def list_for_lecturer(self, lecturer_id: int) -> Sequence[Course]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT course_id, name, lecturer_id FROM courses WHERE lecturer_id=%s ORDER BY course_id",
                (int(lecturer_id),),
            )
            return [Course(int(r["course_id"]), r["name"], int(r["lecturer_id"])) for r in fetchall(cur)]

    def create(self, *, name: str, lecturer_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("INSERT INTO courses(name, lecturer_id) VALUES(%s,%s)", (name, int(lecturer_id)))
            return int(cur.lastrowid)

    def enroll(self, *, student_id: int, course_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT IGNORE INTO enrollments(student_id, course_id) VALUES(%s,%s)",
                (int(student_id), int(course_id)),
            )
            return cur.rowcount > 0

    def list_enrollments(self, course_ids: Sequence[int]) -> Sequence[Enrollment]:
        if not course_ids:
            return []
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT student_id, course_id FROM enrollments WHERE course_id IN ({_placeholders(course_ids)})",
                tuple(int(c) for c in course_ids),
            )
            return [Enrollment(int(r["student_id"]), int(r["course_id"])) for r in fetchall(cur)]


class MySQLCourseAttendanceRepository(CourseAttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, *, student_id: int, course_id: int, attendance_date: date, is_present: bool) -> CourseAttendance:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO course_attendance(student_id, course_id, attendance_date, is_present)
                    VALUES(%s,%s,%s,%s)
                    """,
                    (int(student_id), int(course_id), attendance_date, 1 if is_present else 0),
                )
                attendance_id = int(cur.lastrowid)
        except IntegrityError as e:
            if is_duplicate_key(e):
                raise ValidationError("Attendance record for this student, class, and date already exists.")
            raise
        return CourseAttendance(
            attendance_id=attendance_id,
            student_id=int(student_id),
            course_id=int(course_id),
            attendance_date=attendance_date,
            is_present=bool(is_present),
        )

    def list_for_courses(self, course_ids: Sequence[int]) -> Sequence[CourseAttendance]:
        if not course_ids:
            return []
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT attendance_id, student_id, course_id, attendance_date, is_present, created_at
                FROM course_attendance
                WHERE course_id IN ({_placeholders(course_ids)})
                """,
                tuple(int(c) for c in course_ids),
            )
            return [_to_attendance(r) for r in fetchall(cur)]
