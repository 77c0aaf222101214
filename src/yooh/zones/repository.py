from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import SchoolZone


class ZoneRepository(Protocol):
    def load(self, user_id: int) -> Optional[Sequence[SchoolZone]]:
        """Return the persisted zone list, or None if the user never stored one."""

        raise NotImplementedError

    def save(self, user_id: int, zones: Sequence[SchoolZone]) -> None:
        """Replace the whole zone list in one write."""

        raise NotImplementedError
