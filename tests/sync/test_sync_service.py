from __future__ import annotations

from datetime import datetime

import pytest

from fakes import InMemoryAssignments, InMemoryAttendance, InMemoryClasses, InMemorySettings
from yooh.assignments.model import Assignment
from yooh.core.exceptions import RemoteUnavailableError
from yooh.sync.service import SyncService
from yooh.zones.settings_zone_repository import SettingsZoneRepository
from yooh.zones.service import SchoolZoneRegistry


@pytest.fixture
def classes(make_class):
    return InMemoryClasses([make_class("c1"), make_class("c2", title="Physics")])


@pytest.fixture
def assignments():
    return InMemoryAssignments(
        [Assignment(assignment_id="a1", user_id=1, title="Essay", due_at=datetime(2026, 2, 5, 17, 0))]
    )


@pytest.fixture
def zones_repo():
    return SettingsZoneRepository(InMemorySettings())


@pytest.fixture
def sync(remote_store, classes, assignments, zones_repo, clock):
    service = SyncService(
        remote_store,
        classes=classes,
        assignments=assignments,
        attendance=InMemoryAttendance(),
        zones=zones_repo,
        workers=1,
        clock=clock,
    )
    yield service
    service.close()


def test_push_class_writes_camel_case_document(sync, remote_store, make_class):
    sync.push_class(make_class("c1"))
    sync.flush()

    doc = remote_store.collection("classes")["c1"]
    assert doc["userId"] == "1"
    assert doc["dayOfWeek"] == "monday"
    assert doc["startDate"] == "2026-01-05T08:00:00"
    assert doc["endDate"] == "2026-01-05T09:00:00"
    assert "location" not in doc
    assert sync.last_error is None
    assert not sync.is_syncing


def test_failed_push_only_sets_last_error(sync, remote_store, make_class):
    remote_store.fail_writes = True

    sync.push_class(make_class("c1"))
    sync.flush()

    assert "remote offline" in sync.last_error
    assert remote_store.docs == {}


def test_delete_removes_document(sync, remote_store, make_class):
    sync.push_class(make_class("c1"))
    sync.delete_class("c1")
    sync.flush()

    assert remote_store.collection("classes") == {}


def test_sync_all_pushes_everything_and_clears_error(sync, remote_store, zones_repo, clock):
    SchoolZoneRegistry(zones_repo, clock=clock).list_zones(1)
    remote_store.fail_writes = True
    with pytest.raises(RemoteUnavailableError):
        sync.sync_all(1)
    assert sync.last_error

    remote_store.fail_writes = False
    pushed = sync.sync_all(1)

    assert pushed == 4
    assert set(remote_store.collection("classes")) == {"c1", "c2"}
    assert set(remote_store.collection("assignments")) == {"a1"}
    assert len(remote_store.collection("locations")) == 1
    assert sync.last_error is None
    assert sync.last_synced_at is not None


def test_pushes_after_close_are_dropped(sync, remote_store, make_class):
    sync.close()

    sync.push_class(make_class("c1"))

    assert remote_store.docs == {}
