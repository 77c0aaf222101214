from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Iterable, Optional

from ..core.constants import (
    DEFAULT_ASSIGNMENT_REMINDER_MINUTES,
    DEFAULT_CLASS_REMINDER_MINUTES,
    MAX_REMINDERS_PER_CATEGORY,
)
from ..common.validators import as_bool
from ..core.enums import ReminderCategory
from ..core.exceptions import ValidationError


def normalize_offsets(offsets: Iterable[Any], *, strict: bool = False) -> tuple[int, ...]:
    """Positive, deduplicated, ascending; at most MAX_REMINDERS_PER_CATEGORY kept.

    With ``strict`` a longer list is rejected instead of truncated.
    """
    cleaned: set[int] = set()
    for raw in offsets:
        if isinstance(raw, bool):
            raise ValidationError(f"Invalid reminder offset: {raw!r}")
        try:
            minutes = int(raw)
        except (TypeError, ValueError):
            raise ValidationError(f"Invalid reminder offset: {raw!r}")
        if minutes <= 0:
            raise ValidationError("Reminder offsets must be positive")
        cleaned.add(minutes)
    if strict and len(cleaned) > MAX_REMINDERS_PER_CATEGORY:
        raise ValidationError(f"Maximum {MAX_REMINDERS_PER_CATEGORY} reminders allowed per type")
    return tuple(sorted(cleaned)[:MAX_REMINDERS_PER_CATEGORY])


@dataclass(frozen=True)
class CategoryPreference:
    enabled: bool = True
    offsets: tuple[int, ...] = ()


@dataclass(frozen=True)
class ReminderPreferences:
    """Per-category reminder switches and lead times (minutes before the item)."""

    class_reminders: CategoryPreference = field(
        default_factory=lambda: CategoryPreference(True, DEFAULT_CLASS_REMINDER_MINUTES)
    )
    assignment_reminders: CategoryPreference = field(
        default_factory=lambda: CategoryPreference(True, DEFAULT_ASSIGNMENT_REMINDER_MINUTES)
    )

    def for_category(self, category: ReminderCategory) -> CategoryPreference:
        if category == ReminderCategory.CLASS:
            return self.class_reminders
        return self.assignment_reminders

    def with_category(self, category: ReminderCategory, pref: CategoryPreference) -> "ReminderPreferences":
        pref = replace(pref, offsets=normalize_offsets(pref.offsets))
        if category == ReminderCategory.CLASS:
            return replace(self, class_reminders=pref)
        return replace(self, assignment_reminders=pref)

    def to_dict(self) -> dict:
        return {
            "classEnabled": self.class_reminders.enabled,
            "classOffsetsMinutes": list(self.class_reminders.offsets),
            "assignmentEnabled": self.assignment_reminders.enabled,
            "assignmentOffsetsMinutes": list(self.assignment_reminders.offsets),
        }

    @classmethod
    def from_dict(cls, data: Optional[dict], *, strict: bool = False) -> "ReminderPreferences":
        if not data:
            return cls()
        if not isinstance(data, dict):
            raise ValidationError("Reminder preferences must be an object")
        defaults = cls()
        return cls(
            class_reminders=_category_from_dict(data, "class", defaults.class_reminders, strict),
            assignment_reminders=_category_from_dict(data, "assignment", defaults.assignment_reminders, strict),
        )


def _category_from_dict(data: dict, prefix: str, default: CategoryPreference, strict: bool) -> CategoryPreference:
    enabled = data.get(f"{prefix}Enabled", default.enabled)
    offsets = data.get(f"{prefix}OffsetsMinutes", default.offsets)
    if not isinstance(offsets, (list, tuple)):
        raise ValidationError(f"{prefix}OffsetsMinutes must be a list of minutes")
    return CategoryPreference(
        enabled=as_bool(enabled, f"{prefix}Enabled"),
        offsets=normalize_offsets(offsets, strict=strict),
    )


@dataclass(frozen=True)
class ScheduledNotification:
    user_id: int
    identifier: str
    category: ReminderCategory
    fire_at: datetime
    title: str
    body: str
