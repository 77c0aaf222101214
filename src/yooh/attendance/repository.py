from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def exists_for(self, *, user_id: int, class_id: Optional[str], sign_date: date) -> bool:
        raise NotImplementedError

    def create(self, record: AttendanceRecord) -> None:
        """Insert a record.

        Raises AlreadySignedError when the (user, class, day) slot is already taken.
        """

        raise NotImplementedError

    def list_for_user(self, user_id: int, *, limit: Optional[int] = None) -> Sequence[AttendanceRecord]:
        """Most recent first."""

        raise NotImplementedError

    def clear_for_user(self, user_id: int) -> int:
        raise NotImplementedError

    def list_for_migration(self, user_id: int) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def backfill_owner(self, user_id: int) -> int:
        raise NotImplementedError
