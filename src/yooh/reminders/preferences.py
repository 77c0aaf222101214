from __future__ import annotations

import logging
from dataclasses import replace

from ..core.constants import MAX_REMINDERS_PER_CATEGORY, SETTING_REMINDER_PREFERENCES
from ..core.enums import ReminderCategory, parse_enum
from ..core.exceptions import ValidationError
from ..settings.repository import SettingsRepository
from .model import ReminderPreferences

logger = logging.getLogger(__name__)

_UNIT_MINUTES = {"minutes": 1, "hours": 60}


class ReminderPreferencesService:
    """Load/save reminder preferences as a JSON blob in the settings store."""

    def __init__(self, settings: SettingsRepository):
        self._settings = settings

    def load(self, user_id: int) -> ReminderPreferences:
        return ReminderPreferences.from_dict(self._settings.get(user_id, SETTING_REMINDER_PREFERENCES))

    def save(self, user_id: int, prefs: ReminderPreferences) -> ReminderPreferences:
        self._settings.put(user_id, SETTING_REMINDER_PREFERENCES, prefs.to_dict())
        return prefs

    def replace_all(self, user_id: int, data: dict) -> ReminderPreferences:
        """Replace every preference from a request body; malformed fields are rejected, not coerced."""
        return self.save(user_id, ReminderPreferences.from_dict(data, strict=True))

    def add_offset(self, user_id: int, category, amount, unit: str = "minutes") -> ReminderPreferences:
        category = parse_enum(ReminderCategory, category, "category")
        factor = _UNIT_MINUTES.get(str(unit).lower())
        if factor is None:
            raise ValidationError(f"unit is invalid: {unit!r}")
        try:
            value = int(amount)
        except (TypeError, ValueError):
            raise ValidationError("amount must be an integer")
        if value <= 0:
            raise ValidationError("amount must be positive")

        prefs = self.load(user_id)
        current = prefs.for_category(category)
        minutes = value * factor
        if minutes in current.offsets:
            return prefs
        if len(current.offsets) >= MAX_REMINDERS_PER_CATEGORY:
            raise ValidationError(f"Maximum {MAX_REMINDERS_PER_CATEGORY} reminders allowed per type")

        prefs = prefs.with_category(category, replace(current, offsets=current.offsets + (minutes,)))
        return self.save(user_id, prefs)

    def remove_offset(self, user_id: int, category, minutes: int) -> ReminderPreferences:
        category = parse_enum(ReminderCategory, category, "category")
        prefs = self.load(user_id)
        current = prefs.for_category(category)
        remaining = tuple(m for m in current.offsets if m != int(minutes))
        return self.save(user_id, prefs.with_category(category, replace(current, offsets=remaining)))

    def set_enabled(self, user_id: int, category, enabled: bool) -> ReminderPreferences:
        category = parse_enum(ReminderCategory, category, "category")
        prefs = self.load(user_id)
        current = prefs.for_category(category)
        logger.info("User %s %s %s reminders", user_id, "enabled" if enabled else "disabled", category.value)
        return self.save(user_id, prefs.with_category(category, replace(current, enabled=bool(enabled))))
