"""Remote document shapes: camelCase fields, ISO timestamps, user ids as strings."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from ..assignments.model import Assignment
from ..attendance.model import AttendanceRecord
from ..classes.model import ClassSession
from ..zones.model import SchoolZone


def _user(user_id: Optional[int]) -> str:
    return "" if user_id is None else str(user_id)


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def class_document(session: ClassSession) -> dict:
    anchor = (session.created_at or datetime.now()).date()
    doc = {
        "id": session.class_id,
        "userId": _user(session.user_id),
        "title": session.title,
        "startDate": datetime.combine(anchor, session.start_time).isoformat(),
        "endDate": datetime.combine(anchor, session.end_time).isoformat(),
        "dayOfWeek": session.day_of_week.value,
        "isRecurring": session.is_recurring,
        "createdAt": _iso(session.created_at),
    }
    if session.location is not None:
        doc["location"] = session.location
    if session.notes is not None:
        doc["notes"] = session.notes
    return doc


def assignment_document(assignment: Assignment) -> dict:
    doc = {
        "id": assignment.assignment_id,
        "userId": _user(assignment.user_id),
        "title": assignment.title,
        "dueDate": assignment.due_at.isoformat(),
        "isCompleted": assignment.is_completed,
        "priority": assignment.priority.value,
    }
    if assignment.details is not None:
        doc["details"] = assignment.details
    if assignment.class_id is not None:
        doc["classId"] = assignment.class_id
    return doc


def attendance_document(record: AttendanceRecord, *, created_at: Optional[datetime] = None) -> dict:
    return {
        "id": record.record_id,
        "userId": _user(record.user_id),
        "classId": record.class_id or "",
        "timestamp": record.timestamp.isoformat(),
        "status": record.status.value,
        "latitude": record.latitude,
        "longitude": record.longitude,
        "createdAt": (created_at or datetime.now()).isoformat(),
    }


def zone_document(user_id: int, zone: SchoolZone) -> dict:
    doc = zone.to_dict()
    doc["userId"] = _user(user_id)
    return doc
