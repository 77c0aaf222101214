from __future__ import annotations

from dataclasses import replace
from datetime import datetime, time

import pytest

from fakes import InMemoryNotificationCenter
from yooh.assignments.model import Assignment
from yooh.core.enums import ReminderCategory
from yooh.reminders.model import CategoryPreference, ReminderPreferences
from yooh.reminders.scheduler import ReminderScheduler, describe_offset


@pytest.fixture
def center():
    return InMemoryNotificationCenter()


@pytest.fixture
def scheduler(center):
    return ReminderScheduler(center)


def _assignment(assignment_id: str, due: datetime, *, done: bool = False) -> Assignment:
    return Assignment(assignment_id=assignment_id, user_id=1, title="Essay", due_at=due, is_completed=done)


def _prefs(class_offsets=(15,), assignment_offsets=(60,), *, class_enabled=True, assignment_enabled=True):
    return ReminderPreferences(
        class_reminders=CategoryPreference(class_enabled, tuple(class_offsets)),
        assignment_reminders=CategoryPreference(assignment_enabled, tuple(assignment_offsets)),
    )


def test_class_reminder_uses_next_occurrence(scheduler, center, make_class, fixed_now):
    maths = make_class("m", start=time(8, 0))

    scheduled = scheduler.reschedule(1, [maths], [], _prefs(), fixed_now)

    assert [(n.identifier, n.fire_at) for n in scheduled] == [("class-m-15", datetime(2026, 2, 9, 7, 45))]
    assert "Maths" in scheduled[0].body
    assert len(center.pending(1)) == 1


def test_past_fire_times_and_completed_items_are_skipped(scheduler, fixed_now):
    due_soon = _assignment("a1", datetime(2026, 2, 2, 9, 0))
    done = _assignment("a2", datetime(2026, 2, 3, 12, 0), done=True)
    overdue = _assignment("a3", datetime(2026, 2, 1, 12, 0))
    later = _assignment("a4", datetime(2026, 2, 3, 12, 0))

    scheduled = scheduler.reschedule(1, [], [due_soon, done, overdue, later], _prefs(assignment_offsets=(15, 60)), fixed_now)

    assert sorted(n.identifier for n in scheduled) == [
        "assignment-a1-15",
        "assignment-a4-15",
        "assignment-a4-60",
    ]


def test_reschedule_is_idempotent(scheduler, center, make_class, fixed_now):
    maths = make_class("m")
    essay = _assignment("a1", datetime(2026, 2, 5, 17, 0))

    scheduler.reschedule(1, [maths], [essay], _prefs(), fixed_now)
    first = center.pending(1)
    scheduler.reschedule(1, [maths], [essay], _prefs(), fixed_now)

    assert center.pending(1) == first


def test_disabled_category_is_cleared(scheduler, center, make_class, fixed_now):
    maths = make_class("m")
    essay = _assignment("a1", datetime(2026, 2, 5, 17, 0))
    scheduler.reschedule(1, [maths], [essay], _prefs(), fixed_now)

    scheduler.reschedule(1, [maths], [essay], _prefs(class_enabled=False), fixed_now)

    assert {n.category for n in center.pending(1)} == {ReminderCategory.ASSIGNMENT}


def test_removed_items_lose_their_reminders(scheduler, center, fixed_now):
    essay = _assignment("a1", datetime(2026, 2, 5, 17, 0))
    scheduler.reschedule(1, [], [essay], _prefs(), fixed_now)

    scheduler.reschedule(1, [], [replace(essay, is_completed=True)], _prefs(), fixed_now)

    assert center.pending(1) == []


def test_other_users_are_untouched(scheduler, center, fixed_now):
    essay = _assignment("a1", datetime(2026, 2, 5, 17, 0))
    scheduler.reschedule(2, [], [replace(essay, user_id=2)], _prefs(), fixed_now)

    scheduler.reschedule(1, [], [], _prefs(), fixed_now)

    assert len(center.pending(2)) == 1


@pytest.mark.parametrize("minutes, label", [(1, "1 minute"), (15, "15 minutes"), (60, "1 hour"), (180, "3 hours")])
def test_describe_offset(minutes, label):
    assert describe_offset(minutes) == label
