from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import ClassSession


class ClassRepository(Protocol):
    def list_for_user(self, user_id: int) -> Sequence[ClassSession]:
        """Templates in insertion order."""

        raise NotImplementedError

    def get_by_id(self, class_id: str) -> Optional[ClassSession]:
        raise NotImplementedError

    def create(self, session: ClassSession) -> None:
        raise NotImplementedError

    def update(self, session: ClassSession) -> bool:
        raise NotImplementedError

    def delete(self, class_id: str) -> bool:
        raise NotImplementedError

    def list_for_migration(self, user_id: int) -> Sequence[ClassSession]:
        """Rows owned by the user plus rows with no owner yet."""

        raise NotImplementedError

    def backfill_owner(self, user_id: int) -> int:
        """Assign rows without an owner to the user. Returns the number of rows changed."""

        raise NotImplementedError
