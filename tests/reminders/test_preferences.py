from __future__ import annotations

import pytest

from fakes import InMemorySettings
from yooh.core.enums import ReminderCategory
from yooh.core.exceptions import ValidationError
from yooh.reminders.model import ReminderPreferences, normalize_offsets
from yooh.reminders.preferences import ReminderPreferencesService


@pytest.fixture
def service():
    return ReminderPreferencesService(InMemorySettings())


def test_defaults_when_nothing_stored(service):
    prefs = service.load(1)

    assert prefs.class_reminders.enabled
    assert prefs.class_reminders.offsets == (15,)
    assert prefs.assignment_reminders.offsets == (60,)


def test_offsets_are_sorted_deduplicated_and_capped():
    assert normalize_offsets([60, 15, 60, 5, 120]) == (5, 15, 60)


def test_add_offset_in_hours(service):
    prefs = service.add_offset(1, "assignment", 2, "hours")

    assert prefs.assignment_reminders.offsets == (60, 120)
    assert service.load(1) == prefs


def test_adding_an_existing_offset_is_a_no_op(service):
    service.add_offset(1, ReminderCategory.CLASS, 15)

    assert service.load(1).class_reminders.offsets == (15,)


def test_fourth_offset_is_rejected(service):
    service.add_offset(1, "class", 30)
    service.add_offset(1, "class", 1, "hours")

    with pytest.raises(ValidationError):
        service.add_offset(1, "class", 5)
    assert service.load(1).class_reminders.offsets == (15, 30, 60)


@pytest.mark.parametrize("amount, unit", [(0, "minutes"), (-5, "minutes"), ("x", "minutes"), (5, "days")])
def test_add_offset_rejects_bad_input(service, amount, unit):
    with pytest.raises(ValidationError):
        service.add_offset(1, "class", amount, unit)


def test_unknown_category_is_rejected(service):
    with pytest.raises(ValidationError):
        service.add_offset(1, "exam", 5)


def test_remove_offset_and_disable(service):
    service.remove_offset(1, "class", 15)
    prefs = service.set_enabled(1, "assignment", False)

    assert prefs.class_reminders.offsets == ()
    assert not prefs.assignment_reminders.enabled
    assert service.load(1) == prefs


def test_round_trip_through_dict():
    prefs = ReminderPreferences.from_dict(
        {"classEnabled": False, "classOffsetsMinutes": [30, 10], "assignmentOffsetsMinutes": [1440]}
    )

    assert prefs.to_dict() == {
        "classEnabled": False,
        "classOffsetsMinutes": [10, 30],
        "assignmentEnabled": True,
        "assignmentOffsetsMinutes": [1440],
    }


@pytest.mark.parametrize(
    "body",
    [
        {"classOffsetsMinutes": 15},
        {"assignmentOffsetsMinutes": "60"},
        {"classOffsetsMinutes": [{"minutes": 15}]},
        {"classOffsetsMinutes": [True]},
        {"classEnabled": "false"},
        {"assignmentEnabled": 0},
        {"classOffsetsMinutes": [5, 10, 15, 20]},
    ],
)
def test_replace_all_rejects_malformed_body(service, body):
    with pytest.raises(ValidationError):
        service.replace_all(1, body)

    assert service.load(1) == ReminderPreferences()


def test_replace_all_stores_valid_body(service):
    prefs = service.replace_all(1, {"classEnabled": False, "assignmentOffsetsMinutes": [60, 1440, 60]})

    assert not prefs.class_reminders.enabled
    assert prefs.class_reminders.offsets == (15,)
    assert prefs.assignment_reminders.offsets == (60, 1440)
    assert service.load(1) == prefs
