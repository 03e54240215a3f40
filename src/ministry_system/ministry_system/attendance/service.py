from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional, Sequence

from ..audit.service import AuditLogger
from ..common.datetime_utils import now_local
from ..common.validators import require_non_empty
from ..core.constants import (
    ATTENDANCE_CATEGORY,
    ATTENDANCE_NOTE,
    ATTENDANCE_POINTS,
    FREEZE_ABSENCE_THRESHOLD,
    SYSTEM_ACTOR,
    SYSTEM_AUTO_ACTOR,
)
from ..core.enums import AgeGroup, AuditEvent, CheckoutMode, PresenceStatus, SessionStatus, StudentStatus
from ..core.exceptions import (
    AlreadyCheckedInError,
    CollaboratorError,
    DomainError,
    SweepAlreadyRunError,
    ValidationError,
)
from ..points.repository import LedgerRepository
from ..points.service import PointsService
from ..settings.service import SettingsService
from ..students.repository import StudentRepository
from ..students.service import StudentService
from .model import AttendanceSession, AttendanceStatusEntry, ClassroomStat, SweepResult
from .repository import SessionRepository

logger = logging.getLogger(__name__)

# Students the absence sweep keeps counting; alumni and guests are left alone.
SWEEP_STATUSES = frozenset({StudentStatus.ACTIVE, StudentStatus.STUDENT, StudentStatus.FROZEN})


class AttendanceService:
    """Attendance engine: per-day session state machine NONE -> OPEN -> CLOSED."""

    def __init__(
        self,
        sessions: SessionRepository,
        students: StudentRepository,
        points: PointsService,
        ledger: LedgerRepository,
        settings: SettingsService,
        audit: AuditLogger,
    ):
        self._sessions = sessions
        self._students = students
        self._student_service = StudentService(students)
        self._points = points
        self._ledger = ledger
        self._settings = settings
        self._audit = audit

    def _open_session(self, student_id: int, today: date) -> Optional[AttendanceSession]:
        rows = self._sessions.list_for_date(today, status=SessionStatus.OPEN, student_id=student_id)
        return rows[0] if rows else None

    def check_in(self, student_id: int, actor: str, *, now: Optional[datetime] = None) -> AttendanceSession:
        now = now or now_local()
        today = now.date()
        actor = require_non_empty(actor, "Actor")

        student = self._student_service.get(student_id)

        existing = self._open_session(student.student_id, today)
        if existing:
            raise AlreadyCheckedInError(existing.check_in_time, existing.session_id)

        session_id = self._sessions.create_session(
            student_id=student.student_id,
            session_date=today,
            check_in_time=now,
            checked_in_by=actor,
        )
        if session_id is None:
            # Lost a race with another scanner; the store kept the first session.
            winner = self._open_session(student.student_id, today)
            raise AlreadyCheckedInError(winner.check_in_time if winner else now, winner.session_id if winner else None)

        self._audit.log(
            AuditEvent.CHECKIN,
            actor,
            entity_id=session_id,
            payload={"student_id": student.student_id, "session_date": today.isoformat()},
        )

        self._student_service.reset_absences(student)

        try:
            self._points.add_points(
                student.student_id,
                ATTENDANCE_CATEGORY,
                ATTENDANCE_POINTS,
                actor,
                ATTENDANCE_NOTE,
                now=now,
            )
        except DomainError as e:
            logger.warning("Attendance points skipped for student %s: %s", student.student_id, e)

        return AttendanceSession(
            session_id=session_id,
            student_id=student.student_id,
            session_date=today,
            check_in_time=now,
            checked_in_by=actor,
            status=SessionStatus.OPEN,
        )

    def check_out(self, student_id: int, actor: str, *, now: Optional[datetime] = None) -> AttendanceSession:
        now = now or now_local()
        today = now.date()
        actor = require_non_empty(actor, "Actor")

        session = self._open_session(int(student_id), today)
        if not session:
            raise ValidationError("Student has no open session today")

        if not self._sessions.close_session(
            session_id=session.session_id,
            check_out_time=now,
            checkout_mode=CheckoutMode.MANUAL,
            checked_out_by=actor,
        ):
            raise ValidationError("Session was already closed")

        self._audit.log(
            AuditEvent.CHECKOUT_MANUAL,
            actor,
            entity_id=session.session_id,
            payload={"student_id": session.student_id},
        )
        return AttendanceSession(
            session_id=session.session_id,
            student_id=session.student_id,
            session_date=session.session_date,
            check_in_time=session.check_in_time,
            checked_in_by=session.checked_in_by,
            status=SessionStatus.CLOSED,
            check_out_time=now,
            checkout_mode=CheckoutMode.MANUAL,
            checked_out_by=actor,
        )

    def run_auto_checkout(self, *, now: Optional[datetime] = None) -> int:
        """Close every OPEN session of today at the configured checkout time.

        Not time-aware: whoever triggers it decides when.
        """
        today = (now or now_local()).date()
        checkout_at = datetime.combine(today, self._settings.current().auto_checkout_time)

        closed = 0
        for session in self._sessions.list_for_date(today, status=SessionStatus.OPEN):
            if not self._sessions.close_session(
                session_id=session.session_id,
                check_out_time=checkout_at,
                checkout_mode=CheckoutMode.AUTO,
                checked_out_by=SYSTEM_AUTO_ACTOR,
            ):
                continue
            closed += 1
            self._audit.log(
                AuditEvent.CHECKOUT_AUTO,
                SYSTEM_ACTOR,
                entity_id=session.session_id,
                payload={"student_id": session.student_id},
            )

        logger.info("Auto checkout closed %s sessions for %s", closed, today)
        return closed

    def _present_ids(self, day: date) -> set[int]:
        present = {s.student_id for s in self._sessions.list_for_date(day)}
        present.update(
            e.student_id
            for e in self._ledger.list_active(start_date=day, end_date=day, category=ATTENDANCE_CATEGORY)
        )
        return present

    def run_absence_sweep(self, actor: str, *, now: Optional[datetime] = None, force: bool = False) -> SweepResult:
        """End-of-service sweep: count one more absence for everyone not present today.

        The day's marker is claimed before any student is touched, so a
        concurrent or repeated sweep is refused. A sweep that fails partway
        keeps its marker: students already counted stay counted, and a rerun
        needs `force=True`, which counts everyone absent again.
        """
        today = (now or now_local()).date()
        actor = require_non_empty(actor, "Actor")

        claimed = self._sessions.claim_sweep(sweep_date=today, actor=actor)
        if not claimed and not force:
            raise SweepAlreadyRunError(f"Absence sweep already ran for {today.isoformat()}")

        present = self._present_ids(today)
        absent_count = 0
        frozen_count = 0

        try:
            for student in self._students.list_all():
                if student.student_status not in SWEEP_STATUSES or student.student_id in present:
                    continue

                absences = student.consecutive_absences + 1
                status = student.student_status
                if absences >= FREEZE_ABSENCE_THRESHOLD and status != StudentStatus.FROZEN:
                    status = StudentStatus.FROZEN
                    frozen_count += 1

                self._students.set_absence_state(student.student_id, consecutive_absences=absences, status=status)
                absent_count += 1
        except CollaboratorError:
            logger.error("Absence sweep %s stopped after %s students; marker kept", today, absent_count)
            raise

        self._sessions.record_sweep(
            sweep_date=today,
            actor=actor,
            absent_count=absent_count,
            frozen_count=frozen_count,
        )
        self._audit.log(
            AuditEvent.ABSENCE_SWEEP,
            actor,
            payload={"date": today.isoformat(), "absent_count": absent_count, "frozen_count": frozen_count},
        )
        logger.info("Absence sweep %s: %s absent, %s frozen", today, absent_count, frozen_count)
        return SweepResult(absent_count=absent_count, frozen_count=frozen_count)

    def attendance_report(self, day: Optional[date] = None) -> list[AttendanceStatusEntry]:
        day = day or now_local().date()
        sessions = {}
        for s in self._sessions.list_for_date(day):
            sessions.setdefault(s.student_id, s)
        awarded = {
            e.student_id
            for e in self._ledger.list_active(start_date=day, end_date=day, category=ATTENDANCE_CATEGORY)
        }

        rows = []
        for student in self._students.list_all():
            session = sessions.get(student.student_id)
            present = session is not None or student.student_id in awarded
            rows.append(
                AttendanceStatusEntry(
                    student=student,
                    status=PresenceStatus.PRESENT if present else PresenceStatus.ABSENT,
                    points_awarded=student.student_id in awarded,
                    check_in_time=session.check_in_time if session else None,
                )
            )

        rows.sort(key=lambda r: (r.status != PresenceStatus.PRESENT, r.student.full_name.casefold()))
        return rows

    def classroom_stats(self, day: Optional[date] = None) -> list[ClassroomStat]:
        day = day or now_local().date()
        open_ids = {s.student_id for s in self._sessions.list_for_date(day, status=SessionStatus.OPEN)}
        students = self._students.list_all()

        stats = []
        for group in AgeGroup.standard():
            members = [s for s in students if s.age_group == group]
            stats.append(
                ClassroomStat(
                    group=group,
                    total=len(members),
                    present=sum(1 for s in members if s.student_id in open_ids),
                )
            )
        return stats

    def today_session(self, student_id: int, *, now: Optional[datetime] = None) -> Optional[AttendanceSession]:
        today = (now or now_local()).date()
        rows = self._sessions.list_for_date(today, student_id=int(student_id))
        open_rows = [r for r in rows if r.is_open]
        if open_rows:
            return open_rows[0]
        return rows[-1] if rows else None

    def attendance_logs(self, *, limit: int = 500) -> Sequence[AttendanceSession]:
        return self._sessions.list_recent(limit=int(limit))
