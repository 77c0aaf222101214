from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one signed attendance. Never mutated after creation."""

    record_id: str
    user_id: Optional[int]
    timestamp: datetime
    status: AttendanceStatus
    latitude: float
    longitude: float
    class_id: Optional[str] = None

    @property
    def sign_date(self) -> date:
        return self.timestamp.date()

    def to_dict(self) -> dict:
        return {
            "id": self.record_id,
            "userId": self.user_id,
            "classId": self.class_id,
            "timestamp": self.timestamp.isoformat(),
            "status": self.status.value,
            "latitude": self.latitude,
            "longitude": self.longitude,
        }


@dataclass(frozen=True)
class AttendanceStats:
    """Read-model for the dashboard counters."""

    total_days: int
    monthly_count: int
    current_streak: int
    signed_today: bool

    def to_dict(self) -> dict:
        return {
            "totalDays": self.total_days,
            "monthlyCount": self.monthly_count,
            "currentStreak": self.current_streak,
            "signedToday": self.signed_today,
        }
