from __future__ import annotations

from dataclasses import replace
from datetime import datetime

import pytest

from fakes import InMemoryAssignments, InMemoryAttendance, InMemoryClasses
from yooh.assignments.model import Assignment
from yooh.attendance.model import AttendanceRecord
from yooh.core.enums import AttendanceStatus
from yooh.core.exceptions import MigrationError
from yooh.sync.migration import MigrationService


@pytest.fixture
def classes(make_class):
    return InMemoryClasses([make_class("c1"), replace(make_class("c2"), user_id=None)])


@pytest.fixture
def assignments():
    return InMemoryAssignments(
        [Assignment(assignment_id="a1", user_id=None, title="Essay", due_at=datetime(2026, 2, 5, 17, 0))]
    )


@pytest.fixture
def attendance():
    return InMemoryAttendance(
        [
            AttendanceRecord(
                record_id="r1",
                user_id=1,
                timestamp=datetime(2026, 1, 26, 8, 30),
                status=AttendanceStatus.ON_TIME,
                latitude=-1.19,
                longitude=36.65,
                class_id="c1",
            )
        ]
    )


@pytest.fixture
def migration(remote_store, classes, assignments, attendance, clock):
    return MigrationService(
        remote_store, classes=classes, assignments=assignments, attendance=attendance, clock=clock
    )


def test_migrate_copies_everything_and_writes_marker_last(migration, remote_store, classes, fixed_now):
    progress = []

    stats = migration.migrate(1, on_progress=progress.append)

    assert (stats.classes, stats.assignments, stats.attendance) == (2, 1, 1)
    assert progress == pytest.approx([0.0, 1 / 3, 2 / 3, 1.0])
    assert set(remote_store.collection("classes")) == {"c1", "c2"}
    assert remote_store.collection("attendance")["r1"]["classId"] == "c1"
    marker = remote_store.collection("migrations")["1"]
    assert marker["version"] == "1.0"
    assert marker["completedAt"] == fixed_now.isoformat()
    # rows without an owner were claimed locally
    assert classes.get_by_id("c2").user_id == 1
    assert migration.state.progress == 1.0
    assert not migration.state.is_migrating


def test_second_run_short_circuits(migration, remote_store):
    migration.migrate(1)
    before = dict(remote_store.docs)
    progress = []

    stats = migration.migrate(1, on_progress=progress.append)

    assert stats.skipped
    assert progress == [1.0]
    assert remote_store.docs == before


def test_failure_stops_remaining_phases_and_keeps_no_marker(migration, remote_store):
    remote_store.fail_on_collection = "assignments"

    with pytest.raises(MigrationError):
        migration.migrate(1)

    assert set(remote_store.collection("classes")) == {"c1", "c2"}
    assert remote_store.collection("attendance") == {}
    assert remote_store.collection("migrations") == {}
    assert migration.state.error.startswith("Migration failed")
    assert not migration.state.is_migrating

    remote_store.fail_on_collection = None
    stats = migration.migrate(1)
    assert stats.attendance == 1
    assert migration.is_migrated(1)


def test_unreadable_marker_is_a_migration_error(migration, remote_store):
    remote_store.fail_reads = True

    with pytest.raises(MigrationError):
        migration.migrate(1)


def test_force_migrate_reruns(migration, remote_store):
    migration.migrate(1)
    remote_store.docs.pop(("classes", "c1"))

    stats = migration.force_migrate(1)

    assert not stats.skipped
    assert "c1" in remote_store.collection("classes")


def test_remote_stats_and_reset(migration):
    migration.migrate(1)

    assert migration.remote_stats(1) == {"classes": 2, "assignments": 1, "attendance": 1}
    migration.reset_state()
    assert migration.state.progress == 0.0


def test_background_start(migration):
    assert migration.start(1)
    migration.join(5)

    assert migration.is_migrated(1)
