from __future__ import annotations

import pytest

from fakes import offset_point
from yooh.geo.geofence import GeoPoint, distance_to_zone, haversine_meters, is_within_zone
from yooh.zones.service import FALLBACK_ZONE

SCHOOL = GeoPoint(FALLBACK_ZONE.latitude, FALLBACK_ZONE.longitude)


def test_point_100m_from_center_is_inside_500m_zone():
    point = offset_point(SCHOOL, north_meters=100)

    assert distance_to_zone(point, FALLBACK_ZONE) == pytest.approx(100, abs=0.5)
    assert is_within_zone(point, FALLBACK_ZONE)


def test_point_600m_from_center_is_outside_500m_zone():
    point = offset_point(SCHOOL, east_meters=600)

    assert distance_to_zone(point, FALLBACK_ZONE) == pytest.approx(600, abs=0.5)
    assert not is_within_zone(point, FALLBACK_ZONE)


def test_boundary_is_inclusive():
    point = offset_point(SCHOOL, north_meters=400)
    distance = distance_to_zone(point, FALLBACK_ZONE)

    class Exact:
        latitude = FALLBACK_ZONE.latitude
        longitude = FALLBACK_ZONE.longitude
        radius = distance

    assert is_within_zone(point, Exact())


def test_absent_zone_is_never_contained():
    assert distance_to_zone(SCHOOL, None) is None
    assert not is_within_zone(SCHOOL, None)
    assert not is_within_zone(None, FALLBACK_ZONE)


def test_haversine_is_symmetric_and_zero_on_same_point():
    a = (-1.191397, 36.655940)
    b = (-1.286389, 36.817223)

    assert haversine_meters(*a, *a) == 0
    assert haversine_meters(*a, *b) == pytest.approx(haversine_meters(*b, *a))
    # Nairobi CBD is roughly 20 km from the default campus
    assert 19_000 < haversine_meters(*a, *b) < 22_000
