from __future__ import annotations

from typing import Protocol, Sequence

from ..core.enums import ReminderCategory
from .model import ScheduledNotification


class NotificationCenter(Protocol):
    """Pending local notifications, keyed by (user, identifier)."""

    def pending(self, user_id: int) -> Sequence[ScheduledNotification]:
        raise NotImplementedError

    def add(self, notification: ScheduledNotification) -> None:
        """Register a notification; an existing identifier is replaced."""

        raise NotImplementedError

    def remove_category(self, user_id: int, category: ReminderCategory) -> int:
        raise NotImplementedError
