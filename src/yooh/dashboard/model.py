from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional


@dataclass(frozen=True)
class Course:
    course_id: int
    name: str
    lecturer_id: int


@dataclass(frozen=True)
class Enrollment:
    student_id: int
    course_id: int


@dataclass(frozen=True)
class CourseAttendance:
    attendance_id: int
    student_id: int
    course_id: int
    attendance_date: date
    is_present: bool
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.attendance_id,
            "studentId": self.student_id,
            "classId": self.course_id,
            "attendanceDate": self.attendance_date.isoformat(),
            "isPresent": self.is_present,
        }


@dataclass(frozen=True)
class StudentAttendanceSummary:
    student_id: int
    first_name: str
    last_name: str
    email: str
    enrolled_courses: int
    attended: int
    attendance_percentage: float

    def to_dict(self) -> dict:
        return {
            "id": self.student_id,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "email": self.email,
            "enrolledCourses": self.enrolled_courses,
            "attended": self.attended,
            "attendancePercentage": self.attendance_percentage,
        }
