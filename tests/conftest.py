from __future__ import annotations

from datetime import datetime

import pytest

from src.ministry_system.ministry_system.attendance.service import AttendanceService
from src.ministry_system.ministry_system.audit.service import AuditLogger
from src.ministry_system.ministry_system.points.service import PointsService
from src.ministry_system.ministry_system.settings.service import SettingsService
from tests.fakes import FakeAuditRepo, FakeClock, FakeLedgerRepo, FakeSessionsRepo, FakeSettingsRepo, FakeStudentsRepo


@pytest.fixture
def fixed_now() -> datetime:
    # a Sunday morning
    return datetime(2026, 3, 1, 9, 30)


@pytest.fixture
def students_repo():
    return FakeStudentsRepo()


@pytest.fixture
def ledger_repo(fixed_now):
    return FakeLedgerRepo(FakeClock(fixed_now))


@pytest.fixture
def sessions_repo():
    return FakeSessionsRepo()


@pytest.fixture
def settings_repo():
    return FakeSettingsRepo()


@pytest.fixture
def audit_repo():
    return FakeAuditRepo()


@pytest.fixture
def settings(settings_repo):
    return SettingsService(settings_repo)


@pytest.fixture
def audit(audit_repo):
    return AuditLogger(audit_repo)


@pytest.fixture
def points(ledger_repo, settings, audit):
    return PointsService(ledger_repo, settings, audit)


@pytest.fixture
def attendance(sessions_repo, students_repo, points, ledger_repo, settings, audit):
    return AttendanceService(sessions_repo, students_repo, points, ledger_repo, settings, audit)
