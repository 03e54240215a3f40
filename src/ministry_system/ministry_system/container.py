from __future__ import annotations

from dataclasses import dataclass

from .ai.gemini import build_text_generator
from .ai.service import MentorService
from .assignments.mysql_assignment_repository import MySQLAssignmentRepository
from .assignments.service import AssignmentService
from .attendance.mysql_attendance_repository import MySQLSessionRepository
from .attendance.service import AttendanceService
from .audit.mysql_audit_repository import MySQLAuditLogRepository
from .audit.service import AuditLogger
from .database.connection import DBConfig, DatabaseConnection
from .fairness.service import FairnessService
from .followups.service import FollowUpService
from .leaderboard.service import LeaderboardService
from .points.mysql_ledger_repository import MySQLLedgerRepository
from .points.service import PointsService
from .portal.mysql_story_repository import MySQLStoryHistoryRepository
from .portal.service import PortalService
from .recognition.embedder import FaceRecognitionEmbedder
from .recognition.mysql_embedding_repository import MySQLEmbeddingRepository
from .recognition.service import RecognitionService
from .schedules.mysql_schedule_repository import MySQLActivityScheduleRepository
from .schedules.service import ActivityScheduleService
from .settings.mysql_settings_repository import MySQLSettingsRepository
from .settings.service import SettingsService
from .students.mysql_student_repository import MySQLStudentRepository
from .students.service import StudentService
from .users.model import Credentials
from .users.service import AuthService


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    students_repo: MySQLStudentRepository
    ledger_repo: MySQLLedgerRepository
    sessions_repo: MySQLSessionRepository
    settings_repo: MySQLSettingsRepository
    audit_repo: MySQLAuditLogRepository
    embeddings_repo: MySQLEmbeddingRepository
    schedule_repo: MySQLActivityScheduleRepository
    stories_repo: MySQLStoryHistoryRepository
    assignments_repo: MySQLAssignmentRepository

    audit: AuditLogger
    settings_service: SettingsService
    auth_service: AuthService
    student_service: StudentService
    points_service: PointsService
    attendance_service: AttendanceService
    leaderboard_service: LeaderboardService
    fairness_service: FairnessService
    followup_service: FollowUpService
    recognition_service: RecognitionService
    schedule_service: ActivityScheduleService
    assignment_service: AssignmentService
    mentor_service: MentorService
    portal_service: PortalService


def build_container(
    *,
    db_config: dict,
    credentials: Credentials,
    gemini_api_key: str = "",
    gemini_model: str = "gemini-2.5-flash",
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    students_repo = MySQLStudentRepository(conn)
    ledger_repo = MySQLLedgerRepository(conn)
    sessions_repo = MySQLSessionRepository(conn)
    settings_repo = MySQLSettingsRepository(conn)
    audit_repo = MySQLAuditLogRepository(conn)
    embeddings_repo = MySQLEmbeddingRepository(conn)
    schedule_repo = MySQLActivityScheduleRepository(conn)
    stories_repo = MySQLStoryHistoryRepository(conn)
    assignments_repo = MySQLAssignmentRepository(conn)

    audit = AuditLogger(audit_repo)
    settings_service = SettingsService(settings_repo)
    points_service = PointsService(ledger_repo, settings_service, audit)
    attendance_service = AttendanceService(
        sessions_repo,
        students_repo,
        points_service,
        ledger_repo,
        settings_service,
        audit,
    )
    leaderboard_service = LeaderboardService(students_repo, ledger_repo)
    mentor_service = MentorService(build_text_generator(gemini_api_key, gemini_model))

    return Container(
        conn=conn,
        students_repo=students_repo,
        ledger_repo=ledger_repo,
        sessions_repo=sessions_repo,
        settings_repo=settings_repo,
        audit_repo=audit_repo,
        embeddings_repo=embeddings_repo,
        schedule_repo=schedule_repo,
        stories_repo=stories_repo,
        assignments_repo=assignments_repo,
        audit=audit,
        settings_service=settings_service,
        auth_service=AuthService(credentials, students_repo),
        student_service=StudentService(students_repo),
        points_service=points_service,
        attendance_service=attendance_service,
        leaderboard_service=leaderboard_service,
        fairness_service=FairnessService(students_repo, ledger_repo),
        followup_service=FollowUpService(students_repo, audit),
        recognition_service=RecognitionService(
            embeddings_repo,
            students_repo,
            FaceRecognitionEmbedder(),
            settings_service,
            attendance_service,
            audit,
        ),
        schedule_service=ActivityScheduleService(schedule_repo),
        assignment_service=AssignmentService(assignments_repo),
        mentor_service=mentor_service,
        portal_service=PortalService(
            students_repo,
            points_service,
            leaderboard_service,
            mentor_service,
            stories_repo,
        ),
    )
