from __future__ import annotations

from datetime import date

import pytest

from src.ministry_system.ministry_system.core.enums import Role
from src.ministry_system.ministry_system.core.exceptions import AuthorizationError, ValidationError
from src.ministry_system.ministry_system.schedules.model import ActivitySchedule
from src.ministry_system.ministry_system.schedules.service import ActivityScheduleService, sunday_index
from tests.fakes import FakeScheduleRepo


@pytest.mark.parametrize(
    "day, expected",
    [(date(2026, 3, 1), 1), (date(2026, 3, 7), 1), (date(2026, 3, 8), 2), (date(2026, 3, 29), 5)],
)
def test_sunday_index(day, expected):
    assert sunday_index(day) == expected


def test_current_activity_prefers_stored_row():
    repo = FakeScheduleRepo([ActivitySchedule(1, 2, "Puppet Show")])
    service = ActivityScheduleService(repo)

    assert service.current_activity(today=date(2026, 3, 8)) == {"sunday_index": 2, "title": "Puppet Show"}
    assert service.current_activity(today=date(2026, 3, 15))["title"] == "Games & Quiz"


def test_inactive_row_falls_back():
    repo = FakeScheduleRepo([ActivitySchedule(1, 1, "Hidden", is_active=False)])
    assert ActivityScheduleService(repo).current_activity(today=date(2026, 3, 1))["title"] == "Bible Stories"


def test_assign_is_admin_only_and_validated():
    service = ActivityScheduleService(FakeScheduleRepo())
    with pytest.raises(AuthorizationError):
        service.assign(current_role=Role.TEACHER, sunday_index=1, title="X")
    with pytest.raises(ValidationError):
        service.assign(current_role=Role.ADMIN, sunday_index=6, title="X")

    service.assign(current_role=Role.ADMIN, sunday_index=3, title="Crafts")
    assert service.current_activity(today=date(2026, 3, 15))["title"] == "Crafts"


def test_assign_reads_string_false_as_inactive():
    repo = FakeScheduleRepo()
    service = ActivityScheduleService(repo)

    service.assign(current_role=Role.ADMIN, sunday_index=2, title="Games", is_active="false")

    assert repo.rows[2].is_active is False
    with pytest.raises(ValidationError):
        service.assign(current_role=Role.ADMIN, sunday_index=2, title="Games", is_active="off")
