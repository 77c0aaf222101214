from __future__ import annotations

from typing import Optional, Sequence

from ..core.constants import SETTING_SCHOOL_ZONES
from ..core.exceptions import ValidationError
from ..settings.repository import SettingsRepository
from .model import SchoolZone
from .repository import ZoneRepository


class SettingsZoneRepository(ZoneRepository):
    """Zones persisted as a single JSON list in the per-user settings store."""

    def __init__(self, settings: SettingsRepository):
        self._settings = settings

    def load(self, user_id: int) -> Optional[Sequence[SchoolZone]]:
        raw = self._settings.get(user_id, SETTING_SCHOOL_ZONES)
        if raw is None:
            return None
        if not isinstance(raw, list):
            raise ValidationError("Invalid stored school zones")
        return [SchoolZone.from_dict(item) for item in raw]

    def save(self, user_id: int, zones: Sequence[SchoolZone]) -> None:
        self._settings.put(user_id, SETTING_SCHOOL_ZONES, [z.to_dict() for z in zones])
