from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from ..classes.model import ClassSession
from .strategies.base import AttendanceStrategy
from .strategies.late_strategy import LateStrategy
from .strategies.normal_strategy import NormalStrategy


@dataclass
class AttendanceStrategyFactory:
    """Factory Pattern: choose appropriate strategy based on rules.

    Without a late threshold every sign is on time.
    """

    late_after_minutes: Optional[int] = None

    def for_signing(self, *, now: datetime, session: Optional[ClassSession]) -> AttendanceStrategy:
        if session is None or self.late_after_minutes is None:
            return NormalStrategy()

        class_start = datetime.combine(now.date(), session.start_time)
        if now <= class_start + timedelta(minutes=self.late_after_minutes):
            return NormalStrategy()
        return LateStrategy()
