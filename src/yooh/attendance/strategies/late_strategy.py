from __future__ import annotations

from datetime import datetime
from typing import Optional

from ...classes.model import ClassSession
from ...core.enums import AttendanceStatus
from .base import AttendanceStrategy, StatusDecision


class LateStrategy(AttendanceStrategy):
    """Sign after the class start plus grace period."""

    def decide_sign(self, *, now: datetime, session: Optional[ClassSession]) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.LATE)
