from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import Priority


@dataclass(frozen=True)
class Assignment:
    assignment_id: str
    user_id: Optional[int]
    title: str
    due_at: datetime
    is_completed: bool = False
    priority: Priority = Priority.MEDIUM
    details: Optional[str] = None
    class_id: Optional[str] = None
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.assignment_id,
            "title": self.title,
            "dueDate": self.due_at.isoformat(),
            "isCompleted": self.is_completed,
            "priority": self.priority.value,
            "details": self.details,
            "classId": self.class_id,
        }
