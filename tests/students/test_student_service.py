from __future__ import annotations

import re
from datetime import date, datetime

import pytest

from src.ministry_system.ministry_system.core.enums import AgeGroup, Role, StudentStatus
from src.ministry_system.ministry_system.core.exceptions import AuthorizationError, ValidationError
from src.ministry_system.ministry_system.students.model import first_name_of
from src.ministry_system.ministry_system.students.service import StudentService, calculate_age


@pytest.fixture
def service(students_repo):
    return StudentService(students_repo)


def test_register_assigns_formatted_unique_key(service):
    kid = service.register(full_name="  Ana Cruz ", age_group="7-9", guardian_phone=" 0917 ")

    assert re.fullmatch(r"KK-\d{4}-\d{3}", kid.access_key)
    assert kid.full_name == "Ana Cruz"
    assert kid.age_group == AgeGroup.JUNIORS
    assert kid.guardian_phone == "0917"
    assert kid.consecutive_absences == 0
    assert kid.student_status == StudentStatus.ACTIVE


def test_access_key_retries_on_collision(service, students_repo, monkeypatch):
    students_repo.add("Taken", access_key="KK-2026-500")
    draws = iter([400, 400, 401])
    monkeypatch.setattr("src.ministry_system.ministry_system.students.service.secrets.randbelow", lambda n: next(draws))

    assert service.generate_access_key(year=2026) == "KK-2026-501"


def test_register_rejects_bad_input(service):
    with pytest.raises(ValidationError):
        service.register(full_name=" ", age_group="7-9")
    with pytest.raises(ValidationError):
        service.register(full_name="Ana", age_group="13-15")


def test_find_by_access_key_is_forgiving(service, students_repo):
    kid = students_repo.add("Ana", access_key="KK-2026-123")

    assert service.find_by_access_key("kk-2026-123").student_id == kid.student_id
    assert service.find_by_access_key(" KK 2026 123 ").student_id == kid.student_id
    assert service.find_by_access_key("KK2026123").student_id == kid.student_id
    assert service.find_by_access_key("KK-") is None
    assert service.find_by_access_key("") is None
    assert service.find_by_access_key("KK-2026-999") is None


def test_update_only_touches_registry_fields(service, students_repo):
    kid = students_repo.add("Ana")

    updated = service.update(kid.student_id, full_name="Ana Marie", age_group="10-12")
    assert updated.full_name == "Ana Marie"
    assert updated.age_group == AgeGroup.PRETEENS

    with pytest.raises(ValidationError):
        service.update(kid.student_id, consecutive_absences=0)
    with pytest.raises(ValidationError):
        service.update(kid.student_id, student_status="frozen")


def test_delete_requires_admin(service, students_repo):
    kid = students_repo.add("Ana")
    with pytest.raises(AuthorizationError):
        service.delete(current_role=Role.TEACHER, student_id=kid.student_id)

    service.delete(current_role=Role.ADMIN, student_id=kid.student_id)
    with pytest.raises(ValidationError):
        service.get(kid.student_id)


def test_reset_absences(service, students_repo):
    frozen = students_repo.add("Frozen", consecutive_absences=4, student_status=StudentStatus.FROZEN)
    alumni = students_repo.add("Alumni", consecutive_absences=2, student_status=StudentStatus.ALUMNI)

    service.reset_absences(frozen)
    service.reset_absences(alumni)

    assert students_repo.get_by_id(frozen.student_id).student_status == StudentStatus.ACTIVE
    assert students_repo.get_by_id(frozen.student_id).consecutive_absences == 0
    assert students_repo.get_by_id(alumni.student_id).student_status == StudentStatus.ALUMNI
    assert students_repo.get_by_id(alumni.student_id).consecutive_absences == 0


def test_calculate_age():
    assert calculate_age(date(2018, 3, 2), date(2026, 3, 1)) == 7
    assert calculate_age(date(2018, 3, 1), date(2026, 3, 1)) == 8
    assert calculate_age(None) == 0


def test_first_name_handles_roster_format():
    assert first_name_of("CRUZ, ana marie") == "Ana"
    assert first_name_of("Ben Diaz") == "Ben"
    assert first_name_of("") == ""


def test_birthdays_this_week_and_month(service, students_repo):
    # Sunday 2026-03-01 .. Saturday 2026-03-07
    in_week = students_repo.add("Week", birthday=date(2019, 3, 5))
    students_repo.add("Later", birthday=date(2019, 3, 20))
    students_repo.add("Before", birthday=date(2019, 2, 28))
    students_repo.add("None")

    week = service.birthdays_this_week(today=date(2026, 3, 3))
    month = service.birthdays_this_month(today=date(2026, 3, 3))

    assert [s.student_id for s in week] == [in_week.student_id]
    assert [s.full_name for s in month] == ["Week", "Later"]


def test_record_follow_up(service, students_repo):
    kid = students_repo.add("Ana")
    sent = datetime(2026, 3, 2, 18, 0)
    service.record_follow_up(kid.student_id, sent_at=sent)
    assert students_repo.get_by_id(kid.student_id).last_followup_sent == sent
