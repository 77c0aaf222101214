from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Assignment


class AssignmentRepository(Protocol):
    def list_for_user(self, user_id: int) -> Sequence[Assignment]:
        """Ordered by due date."""

        raise NotImplementedError

    def get_by_id(self, assignment_id: str) -> Optional[Assignment]:
        raise NotImplementedError

    def create(self, assignment: Assignment) -> None:
        raise NotImplementedError

    def update(self, assignment: Assignment) -> bool:
        raise NotImplementedError

    def delete(self, assignment_id: str) -> bool:
        raise NotImplementedError

    def list_for_migration(self, user_id: int) -> Sequence[Assignment]:
        raise NotImplementedError

    def backfill_owner(self, user_id: int) -> int:
        raise NotImplementedError
