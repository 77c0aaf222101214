from __future__ import annotations

import json
import math
from dataclasses import replace
from datetime import date, datetime
from typing import Any, Optional

from yooh.assignments.model import Assignment
from yooh.attendance.model import AttendanceRecord
from yooh.classes.model import ClassSession
from yooh.core.constants import EARTH_RADIUS_METERS
from yooh.core.enums import ReminderCategory, Role
from yooh.core.exceptions import AlreadySignedError, RemoteUnavailableError, ValidationError
from yooh.dashboard.model import Course, CourseAttendance, Enrollment
from yooh.database.mysql_base import dump_json
from yooh.geo.geofence import GeoPoint
from yooh.reminders.model import ScheduledNotification
from yooh.users.model import User


class InMemorySettings:
    def __init__(self):
        self._values: dict[tuple[int, str], str] = {}

    def get(self, user_id: int, key: str) -> Optional[Any]:
        raw = self._values.get((int(user_id), key))
        return json.loads(raw) if raw is not None else None

    def put(self, user_id: int, key: str, value: Any) -> None:
        self._values[(int(user_id), key)] = dump_json(value)


class InMemoryClasses:
    def __init__(self, items: Optional[list[ClassSession]] = None):
        self._items: list[ClassSession] = list(items or [])

    def list_for_user(self, user_id: int):
        return [c for c in self._items if c.user_id == user_id]

    def get_by_id(self, class_id: str) -> Optional[ClassSession]:
        return next((c for c in self._items if c.class_id == class_id), None)

    def create(self, session: ClassSession) -> None:
        self._items.append(session)

    def update(self, session: ClassSession) -> bool:
        for i, c in enumerate(self._items):
            if c.class_id == session.class_id:
                self._items[i] = session
                return True
        return False

    def delete(self, class_id: str) -> bool:
        before = len(self._items)
        self._items = [c for c in self._items if c.class_id != class_id]
        return len(self._items) < before

    def list_for_migration(self, user_id: int):
        return [c for c in self._items if c.user_id in (user_id, None)]

    def backfill_owner(self, user_id: int) -> int:
        changed = 0
        for i, c in enumerate(self._items):
            if c.user_id is None:
                self._items[i] = replace(c, user_id=user_id)
                changed += 1
        return changed


class InMemoryAssignments:
    def __init__(self, items: Optional[list[Assignment]] = None):
        self._items: list[Assignment] = list(items or [])

    def list_for_user(self, user_id: int):
        return sorted((a for a in self._items if a.user_id == user_id), key=lambda a: a.due_at)

    def get_by_id(self, assignment_id: str) -> Optional[Assignment]:
        return next((a for a in self._items if a.assignment_id == assignment_id), None)

    def create(self, assignment: Assignment) -> None:
        self._items.append(assignment)

    def update(self, assignment: Assignment) -> bool:
        for i, a in enumerate(self._items):
            if a.assignment_id == assignment.assignment_id:
                self._items[i] = assignment
                return True
        return False

    def delete(self, assignment_id: str) -> bool:
        before = len(self._items)
        self._items = [a for a in self._items if a.assignment_id != assignment_id]
        return len(self._items) < before

    def list_for_migration(self, user_id: int):
        return [a for a in self._items if a.user_id in (user_id, None)]

    def backfill_owner(self, user_id: int) -> int:
        changed = 0
        for i, a in enumerate(self._items):
            if a.user_id is None:
                self._items[i] = replace(a, user_id=user_id)
                changed += 1
        return changed


class InMemoryAttendance:
    """Mirrors the unique (user, class, day) index of the attendance table."""

    def __init__(self, items: Optional[list[AttendanceRecord]] = None):
        self._items: list[AttendanceRecord] = list(items or [])

    def exists_for(self, *, user_id: int, class_id: Optional[str], sign_date: date) -> bool:
        return any(
            r.user_id == user_id and r.class_id == class_id and r.sign_date == sign_date for r in self._items
        )

    def create(self, record: AttendanceRecord) -> None:
        if self.exists_for(user_id=record.user_id, class_id=record.class_id, sign_date=record.sign_date):
            raise AlreadySignedError("Attendance already signed for this class today")
        self._items.append(record)

    def list_for_user(self, user_id: int, *, limit: Optional[int] = None):
        items = sorted((r for r in self._items if r.user_id == user_id), key=lambda r: r.timestamp, reverse=True)
        return items[:limit] if limit is not None else items

    def clear_for_user(self, user_id: int) -> int:
        before = len(self._items)
        self._items = [r for r in self._items if r.user_id != user_id]
        return before - len(self._items)

    def list_for_migration(self, user_id: int):
        return sorted((r for r in self._items if r.user_id in (user_id, None)), key=lambda r: r.timestamp)

    def backfill_owner(self, user_id: int) -> int:
        changed = 0
        for i, r in enumerate(self._items):
            if r.user_id is None:
                self._items[i] = replace(r, user_id=user_id)
                changed += 1
        return changed


class InMemoryNotificationCenter:
    def __init__(self):
        self.items: dict[tuple[int, str], ScheduledNotification] = {}

    def pending(self, user_id: int):
        out = [n for (uid, _), n in self.items.items() if uid == user_id]
        return sorted(out, key=lambda n: (n.fire_at, n.identifier))

    def add(self, notification: ScheduledNotification) -> None:
        self.items[(notification.user_id, notification.identifier)] = notification

    def remove_category(self, user_id: int, category: ReminderCategory) -> int:
        doomed = [k for k, n in self.items.items() if k[0] == user_id and n.category == category]
        for k in doomed:
            del self.items[k]
        return len(doomed)


class InMemoryRemoteStore:
    def __init__(self):
        self.docs: dict[tuple[str, str], dict] = {}
        self.fail_writes = False
        self.fail_reads = False
        self.fail_on_collection: Optional[str] = None

    def get(self, collection: str, doc_id: str) -> Optional[dict]:
        if self.fail_reads:
            raise RemoteUnavailableError("remote offline")
        doc = self.docs.get((collection, str(doc_id)))
        return json.loads(json.dumps(doc)) if doc is not None else None

    def set(self, collection: str, doc_id: str, data: dict) -> None:
        if self.fail_writes or collection == self.fail_on_collection:
            raise RemoteUnavailableError("remote offline")
        self.docs[(collection, str(doc_id))] = json.loads(dump_json(data))

    def delete(self, collection: str, doc_id: str) -> bool:
        if self.fail_writes:
            raise RemoteUnavailableError("remote offline")
        return self.docs.pop((collection, str(doc_id)), None) is not None

    def count_where(self, collection: str, field: str, value: Any) -> int:
        if self.fail_reads:
            raise RemoteUnavailableError("remote offline")
        return sum(1 for (c, _), d in self.docs.items() if c == collection and str(d.get(field)) == str(value))

    def collection(self, name: str) -> dict[str, dict]:
        return {doc_id: d for (c, doc_id), d in self.docs.items() if c == name}


class InMemoryUsers:
    def __init__(self):
        self._users: dict[int, User] = {}
        self._next_id = 1

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self._users.get(int(user_id))

    def get_by_email(self, email: str) -> Optional[User]:
        return next((u for u in self._users.values() if u.email == email), None)

    def create_user(self, *, first_name: str, last_name: str, email: str, password_hash: str, role: Role) -> int:
        user_id = self._next_id
        self._next_id += 1
        self._users[user_id] = User(
            user_id=user_id,
            first_name=first_name,
            last_name=last_name,
            email=email,
            password_hash=password_hash,
            role=role,
            created_at=datetime(2026, 1, 1, 9, 0),
        )
        return user_id


class InMemoryCourses:
    def __init__(self):
        self._courses: dict[int, Course] = {}
        self._enrollments: list[Enrollment] = []

    def get_by_id(self, course_id: int) -> Optional[Course]:
        return self._courses.get(int(course_id))

    def list_for_lecturer(self, lecturer_id: int):
        return [c for c in self._courses.values() if c.lecturer_id == lecturer_id]

    def create(self, *, name: str, lecturer_id: int) -> int:
        course_id = len(self._courses) + 1
        self._courses[course_id] = Course(course_id=course_id, name=name, lecturer_id=lecturer_id)
        return course_id

    def enroll(self, *, student_id: int, course_id: int) -> bool:
        e = Enrollment(student_id=student_id, course_id=course_id)
        if e in self._enrollments:
            return False
        self._enrollments.append(e)
        return True

    def list_enrollments(self, course_ids):
        return [e for e in self._enrollments if e.course_id in set(course_ids)]


class InMemoryCourseAttendance:
    def __init__(self):
        self._rows: list[CourseAttendance] = []

    def create(self, *, student_id: int, course_id: int, attendance_date: date, is_present: bool) -> CourseAttendance:
        for r in self._rows:
            if (r.student_id, r.course_id, r.attendance_date) == (student_id, course_id, attendance_date):
                raise ValidationError("Attendance record for this student, class, and date already exists.")
        row = CourseAttendance(
            attendance_id=len(self._rows) + 1,
            student_id=student_id,
            course_id=course_id,
            attendance_date=attendance_date,
            is_present=is_present,
        )
        self._rows.append(row)
        return row

    def list_for_courses(self, course_ids):
        return [r for r in self._rows if r.course_id in set(course_ids)]


class FixedClock:
    """Settable clock for services that take a `clock` callable."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


def offset_point(origin: GeoPoint, *, north_meters: float = 0.0, east_meters: float = 0.0) -> GeoPoint:
    """Point displaced from origin by a small planar offset."""
    dlat = math.degrees(north_meters / EARTH_RADIUS_METERS)
    dlon = math.degrees(east_meters / (EARTH_RADIUS_METERS * math.cos(math.radians(origin.latitude))))
    return GeoPoint(latitude=origin.latitude + dlat, longitude=origin.longitude + dlon)
