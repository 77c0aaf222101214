from __future__ import annotations

import uuid
from dataclasses import replace
from datetime import datetime
from typing import TYPE_CHECKING, Callable, Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.validators import optional_text, require_non_empty
from ..core.enums import Priority, parse_enum
from ..core.exceptions import NotFoundError, ValidationError
from ..classes.repository import ClassRepository
from .model import Assignment
from .repository import AssignmentRepository

if TYPE_CHECKING:
    from ..sync.service import SyncService


class AssignmentService:
    def __init__(
        self,
        assignments: AssignmentRepository,
        classes: Optional[ClassRepository] = None,
        *,
        sync: Optional["SyncService"] = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._assignments = assignments
        self._classes = classes
        self._sync = sync
        self._clock = clock

    def list_assignments(self, user_id: int) -> Sequence[Assignment]:
        return self._assignments.list_for_user(user_id)

    def get_assignment(self, user_id: int, assignment_id: str) -> Assignment:
        assignment = self._assignments.get_by_id(assignment_id)
        if not assignment or assignment.user_id != user_id:
            raise NotFoundError("Assignment not found")
        return assignment

    def create_assignment(
        self,
        *,
        user_id: int,
        title: str,
        due_at: datetime,
        priority=Priority.MEDIUM,
        details: Optional[str] = None,
        class_id: Optional[str] = None,
    ) -> Assignment:
        assignment = Assignment(
            assignment_id=str(uuid.uuid4()),
            user_id=int(user_id),
            title=require_non_empty(title, "title"),
            due_at=due_at,
            is_completed=False,
            priority=parse_enum(Priority, priority, "priority"),
            details=optional_text(details),
            class_id=self._check_class(user_id, class_id),
            created_at=self._clock(),
        )
        self._assignments.create(assignment)
        if self._sync:
            self._sync.push_assignment(assignment)
        return assignment

    def update_assignment(
        self,
        *,
        user_id: int,
        assignment_id: str,
        title: Optional[str] = None,
        due_at: Optional[datetime] = None,
        priority=None,
        details: Optional[str] = None,
        class_id: Optional[str] = None,
    ) -> Assignment:
        current = self.get_assignment(user_id, assignment_id)
        updated = replace(
            current,
            title=require_non_empty(title, "title") if title is not None else current.title,
            due_at=due_at or current.due_at,
            priority=parse_enum(Priority, priority, "priority") if priority is not None else current.priority,
            details=optional_text(details) if details is not None else current.details,
            class_id=self._check_class(user_id, class_id) if class_id is not None else current.class_id,
        )
        return self._save(updated)

    def toggle_completed(self, *, user_id: int, assignment_id: str) -> Assignment:
        current = self.get_assignment(user_id, assignment_id)
        return self._save(replace(current, is_completed=not current.is_completed))

    def delete_assignment(self, *, user_id: int, assignment_id: str) -> None:
        self.get_assignment(user_id, assignment_id)
        if not self._assignments.delete(assignment_id):
            raise ValidationError("Deleting the assignment failed")
        if self._sync:
            self._sync.delete_assignment(assignment_id)

    def _save(self, assignment: Assignment) -> Assignment:
        if not self._assignments.update(assignment):
            raise NotFoundError("Assignment not found")
        if self._sync:
            self._sync.push_assignment(assignment)
        return assignment

    def _check_class(self, user_id: int, class_id: Optional[str]) -> Optional[str]:
        class_id = optional_text(class_id)
        if class_id is None or self._classes is None:
            return class_id
        session = self._classes.get_by_id(class_id)
        if not session or session.user_id != user_id:
            raise ValidationError("Unknown class for assignment")
        return class_id
