from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Iterable, Sequence

from ..assignments.model import Assignment
from ..classes import resolver
from ..classes.model import ClassSession
from ..core.enums import ReminderCategory
from .model import ReminderPreferences, ScheduledNotification
from .repository import NotificationCenter

logger = logging.getLogger(__name__)


def notification_id(category: ReminderCategory, item_id: str, offset_minutes: int) -> str:
    return f"{category.value}-{item_id}-{offset_minutes}"


def describe_offset(minutes: int) -> str:
    if minutes % 60 == 0:
        hours = minutes // 60
        return f"{hours} hour" if hours == 1 else f"{hours} hours"
    return f"{minutes} minute" if minutes == 1 else f"{minutes} minutes"


class ReminderScheduler:
    """Rebuilds a user's pending notifications from templates, assignments and preferences.

    Each category is cancelled first and then re-registered, so running it
    twice with the same inputs leaves the same pending set.
    """

    def __init__(self, center: NotificationCenter):
        self._center = center

    def reschedule(
        self,
        user_id: int,
        templates: Sequence[ClassSession],
        assignments: Sequence[Assignment],
        prefs: ReminderPreferences,
        now: datetime,
    ) -> list[ScheduledNotification]:
        scheduled: list[ScheduledNotification] = []

        self._center.remove_category(user_id, ReminderCategory.CLASS)
        if prefs.class_reminders.enabled:
            for template in templates:
                starts_at = resolver.next_occurrence(template, now)
                if starts_at is None:
                    continue
                scheduled.extend(
                    self._schedule_item(
                        user_id,
                        ReminderCategory.CLASS,
                        template.class_id,
                        starts_at,
                        prefs.class_reminders.offsets,
                        now,
                        title="Class Reminder",
                        body=lambda offset, t=template: (
                            f"You have '{t.title}' starting in {describe_offset(offset)}. "
                            "Don't forget to sign attendance!"
                        ),
                    )
                )

        self._center.remove_category(user_id, ReminderCategory.ASSIGNMENT)
        if prefs.assignment_reminders.enabled:
            for assignment in assignments:
                if assignment.is_completed or assignment.due_at <= now:
                    continue
                scheduled.extend(
                    self._schedule_item(
                        user_id,
                        ReminderCategory.ASSIGNMENT,
                        assignment.assignment_id,
                        assignment.due_at,
                        prefs.assignment_reminders.offsets,
                        now,
                        title="Assignment Due",
                        body=lambda offset, a=assignment: f"'{a.title}' is due in {describe_offset(offset)}.",
                    )
                )

        logger.info("Scheduled %s reminders for user %s", len(scheduled), user_id)
        return scheduled

    def _schedule_item(
        self,
        user_id: int,
        category: ReminderCategory,
        item_id: str,
        item_at: datetime,
        offsets: Iterable[int],
        now: datetime,
        *,
        title: str,
        body,
    ) -> list[ScheduledNotification]:
        out: list[ScheduledNotification] = []
        for offset in offsets:
            fire_at = item_at - timedelta(minutes=offset)
            if fire_at <= now:
                continue
            notification = ScheduledNotification(
                user_id=int(user_id),
                identifier=notification_id(category, item_id, offset),
                category=category,
                fire_at=fire_at,
                title=title,
                body=body(offset),
            )
            self._center.add(notification)
            out.append(notification)
        return out
