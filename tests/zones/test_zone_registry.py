from __future__ import annotations

import pytest

from fakes import InMemorySettings
from yooh.core.exceptions import NotFoundError, ValidationError
from yooh.geo.geofence import GeoPoint
from yooh.zones.service import FALLBACK_ZONE, SchoolZoneRegistry
from yooh.zones.settings_zone_repository import SettingsZoneRepository


class RecordingSync:
    def __init__(self):
        self.pushed = []
        self.deleted = []

    def push_zone(self, user_id, zone):
        self.pushed.append((user_id, zone.zone_id))

    def delete_zone(self, zone_id):
        self.deleted.append(zone_id)


@pytest.fixture
def sync():
    return RecordingSync()


@pytest.fixture
def registry(clock, sync):
    return SchoolZoneRegistry(SettingsZoneRepository(InMemorySettings()), sync=sync, clock=clock)


def _active(registry, user_id=1):
    return [z for z in registry.list_zones(user_id) if z.is_active]


def test_first_listing_bootstraps_active_default_zone(registry, sync):
    zones = registry.list_zones(1)

    assert len(zones) == 1
    assert zones[0].is_active
    assert zones[0].radius == 500
    assert (zones[0].latitude, zones[0].longitude) == (FALLBACK_ZONE.latitude, FALLBACK_ZONE.longitude)
    assert sync.pushed == [(1, zones[0].zone_id)]
    # second listing reads the stored list
    assert registry.list_zones(1) == zones


def test_add_zone_becomes_the_only_active_zone(registry):
    registry.list_zones(1)
    added = registry.add_zone(1, name="Annex", address="Road 2", latitude=-1.2, longitude=36.7, radius=250)

    active = _active(registry)
    assert [z.zone_id for z in active] == [added.zone_id]
    assert len(registry.list_zones(1)) == 2


def test_set_active_switches_exclusively(registry):
    default = registry.list_zones(1)[0]
    registry.add_zone(1, name="Annex", latitude=-1.2, longitude=36.7)

    registry.set_active(1, default.zone_id)

    assert [z.zone_id for z in _active(registry)] == [default.zone_id]
    assert registry.active_zone(1).zone_id == default.zone_id


def test_set_active_unknown_zone(registry):
    with pytest.raises(NotFoundError):
        registry.set_active(1, "missing")


def test_deleting_active_zone_leaves_none_active(registry, sync):
    registry.list_zones(1)
    annex = registry.add_zone(1, name="Annex", latitude=-1.2, longitude=36.7)

    registry.delete(1, annex.zone_id)

    assert _active(registry) == []
    assert registry.geofence_zone(1) is None
    assert sync.deleted == [annex.zone_id]


def test_empty_zone_list_falls_back_to_default_zone(registry):
    only = registry.list_zones(1)[0]
    registry.delete(1, only.zone_id)

    assert registry.list_zones(1) == []
    assert registry.geofence_zone(1) == FALLBACK_ZONE
    assert registry.is_within(1, GeoPoint(FALLBACK_ZONE.latitude, FALLBACK_ZONE.longitude))


@pytest.mark.parametrize(
    "kwargs",
    [
        dict(name="", latitude=0, longitude=0, radius=100),
        dict(name="X", latitude=91, longitude=0, radius=100),
        dict(name="X", latitude=0, longitude=-181, radius=100),
        dict(name="X", latitude=0, longitude=0, radius=0),
        dict(name="X", latitude=0, longitude=0, radius=5001),
        dict(name="X", latitude="abc", longitude=0, radius=100),
    ],
)
def test_add_zone_rejects_invalid_input(registry, kwargs):
    with pytest.raises(ValidationError):
        registry.add_zone(1, **kwargs)
    assert len(registry.list_zones(1)) == 1


def test_update_zone_keeps_active_flag(registry):
    zone = registry.list_zones(1)[0]

    updated = registry.update_zone(1, zone.zone_id, name="Main Campus", radius=800)

    assert updated.name == "Main Campus"
    assert updated.radius == 800
    assert updated.is_active


def test_zones_are_scoped_per_user(registry):
    registry.add_zone(1, name="Mine", latitude=1, longitude=1)

    assert [z.name for z in registry.list_zones(2)] == ["My School"]
