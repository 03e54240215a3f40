from __future__ import annotations

from datetime import timedelta

import pytest

from src.ministry_system.ministry_system.audit.service import AuditLogger
from src.ministry_system.ministry_system.core.constants import SEASON_RESET_REASON
from src.ministry_system.ministry_system.core.enums import AuditEvent, CategoryKind, Role
from src.ministry_system.ministry_system.core.exceptions import (
    AuthorizationError,
    CollaboratorError,
    DuplicateCategoryError,
    ValidationError,
)
from src.ministry_system.ministry_system.points.model import PointCategory, PointRule
from src.ministry_system.ministry_system.points.service import PointsService
from src.ministry_system.ministry_system.settings.model import AppSettings
from src.ministry_system.ministry_system.settings.service import SettingsService
from tests.fakes import FakeAuditRepo, FakeSettingsRepo


def test_classify_tags_corrections_manual_and_standard():
    assert PointCategory.classify("Attendance", 5).kind == CategoryKind.STANDARD
    assert PointCategory.classify("Manual Adjustment", 3).kind == CategoryKind.MANUAL
    assert PointCategory.classify("Attendance", -5).kind == CategoryKind.CORRECTION
    assert not PointCategory.classify("Manual Adjustment", 3).once_per_day


def test_second_standard_award_same_day_is_rejected(points, ledger_repo, fixed_now):
    points.add_points(1, "Attendance", 5, "teacher-ann", now=fixed_now)

    with pytest.raises(DuplicateCategoryError) as exc:
        points.add_points(1, "Attendance", 5, "teacher-ann", now=fixed_now)

    assert str(exc.value) == "Points already awarded for Attendance today."
    attendance_today = ledger_repo.list_active(start_date=fixed_now.date(), end_date=fixed_now.date(), category="Attendance")
    assert len(attendance_today) == 1


def test_same_category_next_day_is_allowed(points, fixed_now):
    points.add_points(1, "Memory Verse", 10, "t", now=fixed_now)
    entry = points.add_points(1, "Memory Verse", 10, "t", now=fixed_now + timedelta(days=7))
    assert entry.entry_date == (fixed_now + timedelta(days=7)).date()


def test_guard_is_per_student(points, fixed_now):
    points.add_points(1, "Recitation", 10, "t", now=fixed_now)
    points.add_points(2, "Recitation", 10, "t", now=fixed_now)
    assert points.total_points(1) == 10
    assert points.total_points(2) == 10


def test_corrections_and_manual_entries_bypass_guard(points, fixed_now):
    points.add_points(1, "Attendance", 5, "t", now=fixed_now)
    points.add_points(1, "Attendance", -5, "t", now=fixed_now)
    points.add_points(1, "Attendance", -5, "t", now=fixed_now)
    points.add_points(1, "Manual Adjustment", 2, "t", now=fixed_now)
    points.add_points(1, "Manual Adjustment", 2, "t", now=fixed_now)

    assert points.total_points(1) == -1


def test_allow_duplicate_points_setting_disables_guard(ledger_repo, audit, fixed_now):
    settings = SettingsService(FakeSettingsRepo(AppSettings(allow_duplicate_points=True)))
    service = PointsService(ledger_repo, settings, audit)

    service.add_points(1, "Attendance", 5, "t", now=fixed_now)
    service.add_points(1, "Attendance", 5, "t", now=fixed_now)

    assert service.total_points(1) == 10


def test_voided_entry_does_not_block_a_new_award(points, fixed_now):
    first = points.add_points(1, "Attendance", 5, "t", now=fixed_now)
    points.void_entry(first.entry_id, "wrong child", actor="t")

    points.add_points(1, "Attendance", 5, "t", now=fixed_now)
    assert points.total_points(1) == 5


def test_entry_uses_calendar_date_of_now_and_writes_audit(points, audit_repo, fixed_now):
    entry = points.add_points(3, "Presentation", 20, "teacher-bo", "great job", now=fixed_now)

    assert entry.entry_date == fixed_now.date()
    assert entry.recorded_by == "teacher-bo"
    assert entry.notes == "great job"
    assert audit_repo.events() == [AuditEvent.POINT_ADD]
    assert audit_repo.rows[0].entity_id == str(entry.entry_id)


def test_zero_points_are_accepted(points, fixed_now):
    entry = points.add_points(1, "Worksheet / Activities", 0, "t", now=fixed_now)
    assert entry.points == 0


def test_blank_category_or_actor_is_rejected(points, fixed_now):
    with pytest.raises(ValidationError):
        points.add_points(1, "  ", 5, "t", now=fixed_now)
    with pytest.raises(ValidationError):
        points.add_points(1, "Attendance", 5, "", now=fixed_now)
    with pytest.raises(ValidationError):
        points.add_points(1, "Attendance", "five", "t", now=fixed_now)


def test_audit_failure_does_not_fail_award(ledger_repo, settings, fixed_now):
    service = PointsService(ledger_repo, settings, AuditLogger(FakeAuditRepo(fail=True)))
    entry = service.add_points(1, "Attendance", 5, "t", now=fixed_now)
    assert ledger_repo.get_by_id(entry.entry_id) is not None


def test_ledger_failure_is_surfaced(settings, audit, fixed_now):
    class BrokenLedger:
        def find_active(self, **kwargs):
            return None

        def create_entry(self, **kwargs):
            raise CollaboratorError("Database error: connection lost")

    service = PointsService(BrokenLedger(), settings, audit)
    with pytest.raises(CollaboratorError, match="connection lost"):
        service.add_points(1, "Attendance", 5, "t", now=fixed_now)


def test_total_is_sum_of_non_voided_entries(points, ledger_repo, fixed_now):
    a = points.add_points(1, "Attendance", 5, "t", now=fixed_now)
    points.add_points(1, "Memory Verse", 10, "t", now=fixed_now)
    points.add_points(1, "Manual Adjustment", -3, "t", now=fixed_now)
    points.void_entry(a.entry_id, "duplicate scan", actor="t")

    expected = sum(e.points for e in ledger_repo.rows.values() if e.student_id == 1 and not e.voided)
    assert points.total_points(1) == expected == 7


def test_void_is_one_way_and_repeatable(points, ledger_repo, audit_repo, fixed_now):
    entry = points.add_points(1, "Attendance", 5, "t", now=fixed_now)

    points.void_entry(entry.entry_id, "mistake", actor="t")
    points.void_entry(entry.entry_id, "mistake again", actor="t")

    stored = ledger_repo.get_by_id(entry.entry_id)
    assert stored.voided is True
    assert points.total_points(1) == 0
    assert audit_repo.events().count(AuditEvent.POINT_VOID) == 2


def test_void_unknown_entry_or_blank_reason_is_rejected(points, fixed_now):
    with pytest.raises(ValidationError):
        points.void_entry(999, "reason", actor="t")
    entry = points.add_points(1, "Attendance", 5, "t", now=fixed_now)
    with pytest.raises(ValidationError):
        points.void_entry(entry.entry_id, " ", actor="t")


def test_reset_season_zeroes_totals_and_keeps_history(points, ledger_repo, audit_repo, fixed_now):
    points.add_points(1, "Attendance", 5, "t", now=fixed_now)
    points.add_points(2, "Memory Verse", 10, "t", now=fixed_now)
    points.add_points(2, "Recitation", 10, "t", now=fixed_now)

    voided = points.reset_season(current_role=Role.ADMIN, actor="admin")

    assert voided == 3
    assert points.total_points(1) == 0
    assert points.total_points(2) == 0
    assert len(ledger_repo.rows) == 3
    assert all(e.voided and e.void_reason == SEASON_RESET_REASON for e in ledger_repo.rows.values())
    assert audit_repo.events()[-1] == AuditEvent.AUDIT_WIPE


def test_reset_season_requires_admin(points):
    with pytest.raises(AuthorizationError):
        points.reset_season(current_role=Role.TEACHER, actor="t")


def test_recent_history_is_newest_first_and_limited(points, fixed_now):
    for i, cat in enumerate(["Attendance", "Memory Verse", "Recitation", "Presentation", "Worksheet / Activities", "Manual X"]):
        points.add_points(1, cat, i + 1, "t", now=fixed_now)

    history = points.recent_history(1, limit=5)
    assert [e.category for e in history] == [
        "Manual X",
        "Worksheet / Activities",
        "Presentation",
        "Recitation",
        "Memory Verse",
    ]


def test_rules_fall_back_to_defaults(points, ledger_repo):
    defaults = points.list_rules()
    assert ("Attendance", 5) in [(r.category, r.points) for r in defaults]

    ledger_repo.rules = [PointRule(rule_id=7, category="Bible Quiz", points=15)]
    assert [r.category for r in points.list_rules()] == ["Bible Quiz"]


def test_guard_compares_category_exactly(points, fixed_now):
    points.add_points(1, "Memory Verse", 10, "t", now=fixed_now)

    points.add_points(1, "memory verse", 10, "t", now=fixed_now)

    assert points.total_points(1) == 20
