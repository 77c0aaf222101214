from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any

from ..common.datetime_utils import parse_iso_datetime
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class SchoolZone:
    """Named circular region used to gate attendance."""

    zone_id: str
    name: str
    address: str
    latitude: float
    longitude: float
    radius: float
    is_active: bool
    created_at: datetime

    def with_active(self, is_active: bool) -> "SchoolZone":
        return replace(self, is_active=is_active)

    def to_dict(self) -> dict:
        return {
            "id": self.zone_id,
            "name": self.name,
            "address": self.address,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "radius": self.radius,
            "isActive": self.is_active,
            "createdAt": self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SchoolZone":
        try:
            return cls(
                zone_id=str(data["id"]),
                name=str(data["name"]),
                address=str(data.get("address") or ""),
                latitude=float(data["latitude"]),
                longitude=float(data["longitude"]),
                radius=float(data["radius"]),
                is_active=bool(data.get("isActive", False)),
                created_at=parse_iso_datetime(data["createdAt"]),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise ValidationError(f"Invalid stored school zone: {e}")
