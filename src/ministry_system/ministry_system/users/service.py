from __future__ import annotations

from werkzeug.security import check_password_hash, generate_password_hash

from ..core.enums import Role
from ..core.exceptions import AuthenticationError
from ..students.repository import StudentRepository
from ..students.service import StudentService
from .model import Credentials, SessionUser


def build_credentials(*, admin_username: str, admin_password: str, teacher_password: str) -> Credentials:
    return Credentials(
        admin_username=(admin_username or "").strip(),
        admin_password_hash=generate_password_hash(admin_password or ""),
        teacher_password_hash=generate_password_hash(teacher_password or ""),
    )


def _password_matches(password_hash: str, password: str) -> bool:
    # an unset password never logs anyone in
    if not password:
        return False
    try:
        return check_password_hash(password_hash, password)
    except ValueError:
        # unknown hash method in configuration
        return False


class AuthService:
    """Use case: authenticate admins, teachers and parents."""

    def __init__(self, credentials: Credentials, students: StudentRepository):
        self._credentials = credentials
        self._student_service = StudentService(students)

    def login_admin(self, username: str, password: str) -> SessionUser:
        username = (username or "").strip()
        if (
            not username
            or username != self._credentials.admin_username
            or not _password_matches(self._credentials.admin_password_hash, password or "")
        ):
            raise AuthenticationError("Invalid username or password")
        return SessionUser(username=username, role=Role.ADMIN)

    def login_teacher(self, username: str, password: str) -> SessionUser:
        username = (username or "").strip()
        if not username or not _password_matches(self._credentials.teacher_password_hash, password or ""):
            raise AuthenticationError("Invalid username or password")
        return SessionUser(username=username, role=Role.TEACHER)

    def login_parent(self, access_key: str) -> SessionUser:
        student = self._student_service.find_by_access_key(access_key)
        if not student:
            raise AuthenticationError("Access key not recognised")
        return SessionUser(username=student.access_key, role=Role.PARENTS, student_id=student.student_id)

    def authenticate(self, role: str, username: str = "", password: str = "", access_key: str = "") -> SessionUser:
        try:
            wanted = Role(str(role).upper())
        except ValueError:
            raise AuthenticationError("Unknown login type")

        if wanted == Role.ADMIN:
            return self.login_admin(username, password)
        if wanted == Role.TEACHER:
            return self.login_teacher(username, password)
        return self.login_parent(access_key)
