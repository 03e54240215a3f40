from __future__ import annotations

from datetime import datetime, time, timedelta

import pytest

from src.ministry_system.ministry_system.attendance.service import AttendanceService
from src.ministry_system.ministry_system.core.enums import (
    AgeGroup,
    AuditEvent,
    CheckoutMode,
    PresenceStatus,
    SessionStatus,
    StudentStatus,
)
from src.ministry_system.ministry_system.core.exceptions import (
    AlreadyCheckedInError,
    CollaboratorError,
    SweepAlreadyRunError,
    ValidationError,
)
from src.ministry_system.ministry_system.settings.model import AppSettings
from src.ministry_system.ministry_system.settings.service import SettingsService
from tests.fakes import FakeSettingsRepo


def test_check_in_opens_session_awards_points_and_audits(attendance, students_repo, sessions_repo, points, audit_repo, fixed_now):
    kid = students_repo.add("Ana Cruz")

    session = attendance.check_in(kid.student_id, "teacher-ann", now=fixed_now)

    assert session.status == SessionStatus.OPEN
    assert session.check_in_time == fixed_now
    assert session.checked_in_by == "teacher-ann"
    assert len(sessions_repo.rows) == 1
    assert points.total_points(kid.student_id) == 5
    assert AuditEvent.CHECKIN in audit_repo.events()
    checkin_log = [r for r in audit_repo.rows if r.event_type == AuditEvent.CHECKIN][0]
    assert checkin_log.entity_id == str(session.session_id)


def test_second_check_in_same_day_reports_original_time(attendance, students_repo, sessions_repo, fixed_now):
    kid = students_repo.add("Ana Cruz")
    attendance.check_in(kid.student_id, "t", now=fixed_now)

    with pytest.raises(AlreadyCheckedInError) as exc:
        attendance.check_in(kid.student_id, "t", now=fixed_now + timedelta(minutes=20))

    assert exc.value.check_in_time == fixed_now
    assert len(sessions_repo.rows) == 1


def test_lost_insert_race_is_reported_as_already_checked_in(sessions_repo, students_repo, points, ledger_repo, settings, audit, fixed_now):
    kid = students_repo.add("Ben Diaz")

    class RacySessions(type(sessions_repo)):
        """First lookup misses the session a concurrent scanner just created."""

        def __init__(self):
            super().__init__()
            self.hide_once = True

        def list_for_date(self, session_date, *, status=None, student_id=None):
            if self.hide_once:
                self.hide_once = False
                super().create_session(
                    student_id=student_id, session_date=session_date, check_in_time=fixed_now, checked_in_by="other"
                )
                return []
            return super().list_for_date(session_date, status=status, student_id=student_id)

    racy = RacySessions()
    service = AttendanceService(racy, students_repo, points, ledger_repo, settings, audit)

    with pytest.raises(AlreadyCheckedInError):
        service.check_in(kid.student_id, "t", now=fixed_now)
    assert len(racy.rows) == 1


def test_check_in_unknown_student_is_rejected(attendance, fixed_now):
    with pytest.raises(ValidationError):
        attendance.check_in(42, "t", now=fixed_now)


def test_check_in_survives_duplicate_attendance_points(attendance, students_repo, points, sessions_repo, fixed_now):
    kid = students_repo.add("Cara Lim")
    points.add_points(kid.student_id, "Attendance", 5, "t", now=fixed_now)

    session = attendance.check_in(kid.student_id, "t", now=fixed_now)

    assert session.is_open
    assert points.total_points(kid.student_id) == 5


def test_check_in_resets_absences_and_unfreezes(attendance, students_repo, fixed_now):
    kid = students_repo.add("Dan Sy", consecutive_absences=5, student_status=StudentStatus.FROZEN)

    attendance.check_in(kid.student_id, "t", now=fixed_now)

    stored = students_repo.get_by_id(kid.student_id)
    assert stored.consecutive_absences == 0
    assert stored.student_status == StudentStatus.ACTIVE


def test_check_in_after_checkout_opens_new_session(attendance, students_repo, sessions_repo, fixed_now):
    kid = students_repo.add("Eli Tan")
    attendance.check_in(kid.student_id, "t", now=fixed_now)
    attendance.check_out(kid.student_id, "t", now=fixed_now + timedelta(hours=1))

    again = attendance.check_in(kid.student_id, "t", now=fixed_now + timedelta(hours=2))

    assert again.is_open
    assert len(sessions_repo.rows) == 2


def test_manual_check_out(attendance, students_repo, audit_repo, fixed_now):
    kid = students_repo.add("Fay Uy")
    attendance.check_in(kid.student_id, "t", now=fixed_now)

    closed = attendance.check_out(kid.student_id, "teacher-bo", now=fixed_now + timedelta(hours=2))

    assert closed.status == SessionStatus.CLOSED
    assert closed.checkout_mode == CheckoutMode.MANUAL
    assert closed.checked_out_by == "teacher-bo"
    assert AuditEvent.CHECKOUT_MANUAL in audit_repo.events()

    with pytest.raises(ValidationError):
        attendance.check_out(kid.student_id, "teacher-bo", now=fixed_now + timedelta(hours=3))


def test_auto_checkout_closes_open_sessions_at_configured_time(students_repo, sessions_repo, points, ledger_repo, audit, audit_repo, fixed_now):
    settings = SettingsService(FakeSettingsRepo(AppSettings(auto_checkout_time=time(12, 15))))
    service = AttendanceService(sessions_repo, students_repo, points, ledger_repo, settings, audit)
    a = students_repo.add("Gia Vo")
    b = students_repo.add("Hal Wu")
    service.check_in(a.student_id, "t", now=fixed_now)
    service.check_in(b.student_id, "t", now=fixed_now)
    service.check_out(b.student_id, "t", now=fixed_now + timedelta(minutes=30))

    closed = service.run_auto_checkout(now=fixed_now)

    assert closed == 1
    auto = [s for s in sessions_repo.rows.values() if s.checkout_mode == CheckoutMode.AUTO]
    assert len(auto) == 1
    assert auto[0].check_out_time == datetime.combine(fixed_now.date(), time(12, 15))
    assert auto[0].checked_out_by == "SYSTEM_AUTO"
    assert audit_repo.events().count(AuditEvent.CHECKOUT_AUTO) == 1

    assert service.run_auto_checkout(now=fixed_now) == 0


def test_absence_sweep_increments_absent_and_freezes_at_four(attendance, students_repo, fixed_now):
    present = students_repo.add("Ana Present", consecutive_absences=2)
    absent = students_repo.add("Ben Absent", consecutive_absences=3)
    attendance.check_in(present.student_id, "t", now=fixed_now)

    result = attendance.run_absence_sweep("admin", now=fixed_now)

    a = students_repo.get_by_id(present.student_id)
    b = students_repo.get_by_id(absent.student_id)
    assert a.consecutive_absences == 0  # reset by check-in, untouched by sweep
    assert b.consecutive_absences == 4
    assert b.student_status == StudentStatus.FROZEN
    assert result.absent_count == 1
    assert result.frozen_count == 1


def test_absence_sweep_counts_attendance_points_as_present(attendance, students_repo, points, fixed_now):
    kid = students_repo.add("Cara Points", consecutive_absences=1)
    points.add_points(kid.student_id, "Attendance", 5, "t", now=fixed_now)

    result = attendance.run_absence_sweep("admin", now=fixed_now)

    assert result.absent_count == 0
    assert students_repo.get_by_id(kid.student_id).consecutive_absences == 1


def test_absence_sweep_ignores_voided_attendance_points(attendance, students_repo, points, fixed_now):
    kid = students_repo.add("Dan Voided")
    entry = points.add_points(kid.student_id, "Attendance", 5, "t", now=fixed_now)
    points.void_entry(entry.entry_id, "wrong kid", actor="t")

    result = attendance.run_absence_sweep("admin", now=fixed_now)

    assert result.absent_count == 1


def test_absence_sweep_counts_closed_sessions_as_present(attendance, students_repo, fixed_now):
    kid = students_repo.add("Eve Closed")
    attendance.check_in(kid.student_id, "t", now=fixed_now)
    attendance.run_auto_checkout(now=fixed_now)

    assert attendance.run_absence_sweep("admin", now=fixed_now).absent_count == 0


def test_absence_sweep_skips_alumni_and_guests(attendance, students_repo, fixed_now):
    students_repo.add("Old Timer", student_status=StudentStatus.ALUMNI)
    students_repo.add("Visitor", age_group=AgeGroup.GUEST, student_status=StudentStatus.GUEST)

    assert attendance.run_absence_sweep("admin", now=fixed_now).absent_count == 0


def test_already_frozen_student_is_not_counted_again(attendance, students_repo, fixed_now):
    kid = students_repo.add("Fin Frozen", consecutive_absences=6, student_status=StudentStatus.FROZEN)

    result = attendance.run_absence_sweep("admin", now=fixed_now)

    assert students_repo.get_by_id(kid.student_id).consecutive_absences == 7
    assert result.frozen_count == 0


def test_second_sweep_same_day_is_refused_unless_forced(attendance, students_repo, sessions_repo, audit_repo, fixed_now):
    kid = students_repo.add("Gus Twice")
    attendance.run_absence_sweep("admin", now=fixed_now)

    with pytest.raises(SweepAlreadyRunError):
        attendance.run_absence_sweep("admin", now=fixed_now + timedelta(hours=1))
    assert students_repo.get_by_id(kid.student_id).consecutive_absences == 1

    attendance.run_absence_sweep("admin", now=fixed_now, force=True)
    assert students_repo.get_by_id(kid.student_id).consecutive_absences == 2
    assert sessions_repo.sweeps[fixed_now.date()]["absent_count"] == 2
    assert audit_repo.events().count(AuditEvent.ABSENCE_SWEEP) == 2


def test_sweep_failing_partway_keeps_marker_so_retry_does_not_recount(
    attendance, students_repo, sessions_repo, monkeypatch, fixed_now
):
    first = students_repo.add("Ann First")
    second = students_repo.add("Ben Second")
    real_update = students_repo.set_absence_state

    def fail_on_second(student_id, **kwargs):
        if student_id == second.student_id:
            raise CollaboratorError("Database error: connection lost")
        return real_update(student_id, **kwargs)

    monkeypatch.setattr(students_repo, "set_absence_state", fail_on_second)

    with pytest.raises(CollaboratorError):
        attendance.run_absence_sweep("admin", now=fixed_now)
    assert fixed_now.date() in sessions_repo.sweeps

    monkeypatch.setattr(students_repo, "set_absence_state", real_update)
    with pytest.raises(SweepAlreadyRunError):
        attendance.run_absence_sweep("admin", now=fixed_now)
    assert students_repo.get_by_id(first.student_id).consecutive_absences == 1


def test_next_week_sweep_runs_normally(attendance, students_repo, fixed_now):
    kid = students_repo.add("Hana Weekly")
    attendance.run_absence_sweep("admin", now=fixed_now)
    attendance.run_absence_sweep("admin", now=fixed_now + timedelta(days=7))
    assert students_repo.get_by_id(kid.student_id).consecutive_absences == 2


def test_attendance_report_lists_present_first(attendance, students_repo, points, fixed_now):
    zed = students_repo.add("Zed Early")
    amy = students_repo.add("amy Absent")
    bob = students_repo.add("Bob Points")
    attendance.check_in(zed.student_id, "t", now=fixed_now)
    points.add_points(bob.student_id, "Attendance", 5, "t", now=fixed_now)

    rows = attendance.attendance_report(fixed_now.date())

    assert [(r.student.full_name, r.status) for r in rows] == [
        ("Bob Points", PresenceStatus.PRESENT),
        ("Zed Early", PresenceStatus.PRESENT),
        ("amy Absent", PresenceStatus.ABSENT),
    ]
    assert rows[0].check_in_time is None and rows[0].points_awarded
    assert rows[1].check_in_time == fixed_now
    assert not rows[2].points_awarded


def test_classroom_stats_count_open_sessions(attendance, students_repo, fixed_now):
    a = students_repo.add("Tiny One", AgeGroup.TODDLERS)
    students_repo.add("Tiny Two", AgeGroup.TODDLERS)
    b = students_repo.add("Big One", AgeGroup.PRETEENS)
    students_repo.add("Grown Up", AgeGroup.ADULT)
    attendance.check_in(a.student_id, "t", now=fixed_now)
    attendance.check_in(b.student_id, "t", now=fixed_now)
    attendance.check_out(b.student_id, "t", now=fixed_now)

    stats = {s.group: (s.total, s.present) for s in attendance.classroom_stats(fixed_now.date())}

    assert stats == {
        AgeGroup.TODDLERS: (2, 1),
        AgeGroup.JUNIORS: (0, 0),
        AgeGroup.PRETEENS: (1, 0),
    }


def test_today_session_prefers_open_session(attendance, students_repo, fixed_now):
    kid = students_repo.add("Ivy Today")
    assert attendance.today_session(kid.student_id, now=fixed_now) is None

    attendance.check_in(kid.student_id, "t", now=fixed_now)
    attendance.check_out(kid.student_id, "t", now=fixed_now)
    closed = attendance.today_session(kid.student_id, now=fixed_now)
    assert closed.status == SessionStatus.CLOSED

    attendance.check_in(kid.student_id, "t", now=fixed_now + timedelta(minutes=5))
    assert attendance.today_session(kid.student_id, now=fixed_now).is_open
