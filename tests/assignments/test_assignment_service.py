from __future__ import annotations

from datetime import datetime

import pytest

from fakes import InMemoryAssignments, InMemoryClasses
from yooh.assignments.service import AssignmentService
from yooh.core.enums import Priority
from yooh.core.exceptions import NotFoundError, ValidationError

DUE = datetime(2026, 2, 5, 17, 0)


class RecordingSync:
    def __init__(self):
        self.pushed = []

    def push_assignment(self, assignment):
        self.pushed.append(assignment.assignment_id)


class RowVanishesOnUpdate(InMemoryAssignments):
    def update(self, assignment):
        return False


@pytest.fixture
def sync():
    return RecordingSync()


@pytest.fixture
def service(clock, sync, make_class):
    return AssignmentService(InMemoryAssignments(), InMemoryClasses([make_class()]), sync=sync, clock=clock)


def test_create_links_an_owned_class(service, sync):
    created = service.create_assignment(user_id=1, title="Essay", due_at=DUE, priority="high", class_id="c1")

    assert created.priority is Priority.HIGH
    assert created.class_id == "c1"
    assert sync.pushed == [created.assignment_id]
    with pytest.raises(ValidationError):
        service.create_assignment(user_id=1, title="Essay", due_at=DUE, priority="urgent")


def test_update_with_unchanged_values_succeeds(service, sync):
    created = service.create_assignment(user_id=1, title="Essay", due_at=DUE)

    same = service.update_assignment(user_id=1, assignment_id=created.assignment_id, title="Essay", due_at=DUE)

    assert same == created
    assert sync.pushed == [created.assignment_id, created.assignment_id]


def test_toggle_flips_completion(service):
    created = service.create_assignment(user_id=1, title="Essay", due_at=DUE)

    assert service.toggle_completed(user_id=1, assignment_id=created.assignment_id).is_completed
    assert not service.toggle_completed(user_id=1, assignment_id=created.assignment_id).is_completed


def test_update_of_an_assignment_deleted_meanwhile_is_not_found(clock, sync):
    service = AssignmentService(RowVanishesOnUpdate(), sync=sync, clock=clock)
    created = service.create_assignment(user_id=1, title="Essay", due_at=DUE)

    with pytest.raises(NotFoundError):
        service.update_assignment(user_id=1, assignment_id=created.assignment_id, title="Report")
    assert sync.pushed == [created.assignment_id]
