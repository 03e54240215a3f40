from __future__ import annotations

import logging
from datetime import datetime
from typing import Mapping, Optional, Union

from ..attendance.model import AttendanceSession
from ..attendance.service import AttendanceService
from ..audit.service import AuditLogger
from ..common.validators import require_non_empty
from ..core.enums import AuditEvent, FaceAngle
from ..core.exceptions import ValidationError
from ..settings.service import SettingsService
from ..students.model import Student
from ..students.repository import StudentRepository
from ..students.service import StudentService
from .matcher import best_match
from .model import MatchResult
from .qr import decode_qr, render_qr_png
from .repository import EmbeddingRepository, FaceEmbedder

logger = logging.getLogger(__name__)


def _parse_angle(value: Union[FaceAngle, str]) -> FaceAngle:
    try:
        return value if isinstance(value, FaceAngle) else FaceAngle(str(value).strip().lower())
    except ValueError:
        raise ValidationError(f"Invalid face angle: {value}")


class RecognitionService:
    """Face enrollment and identification, plus QR scanning, feeding check-in."""

    def __init__(
        self,
        embeddings: EmbeddingRepository,
        students: StudentRepository,
        embedder: FaceEmbedder,
        settings: SettingsService,
        attendance: AttendanceService,
        audit: AuditLogger,
    ):
        self._embeddings = embeddings
        self._student_service = StudentService(students)
        self._embedder = embedder
        self._settings = settings
        self._attendance = attendance
        self._audit = audit

    def enroll(self, student_id: int, images: Mapping[Union[FaceAngle, str], bytes], actor: str) -> int:
        """Replace a student's face profile with one embedding per captured angle."""
        actor = require_non_empty(actor, "Actor")
        student = self._student_service.get(student_id)
        if not images:
            raise ValidationError("At least one face image is required")

        vectors = {_parse_angle(angle): self._embedder.embed(data) for angle, data in images.items()}

        self._embeddings.delete_for_student(student.student_id)
        for angle, vector in vectors.items():
            self._embeddings.add(student_id=student.student_id, vector=vector, angle=angle)
        self._student_service.mark_enrolled(student.student_id)

        self._audit.log(
            AuditEvent.ENROLLMENT,
            actor,
            entity_id=student.student_id,
            payload={"angles": sorted(a.value for a in vectors)},
        )
        logger.info("Enrolled %s face angles for student %s", len(vectors), student.student_id)
        return len(vectors)

    def identify(self, image_bytes: bytes, actor: str) -> MatchResult:
        probe = self._embedder.embed(image_bytes)
        threshold = self._settings.current().match_threshold
        match, score = best_match(probe, self._embeddings.list_all(), threshold=threshold)

        student: Optional[Student] = None
        if match is not None:
            student = self._student_service.get(match.student_id)
        else:
            self._audit.log(AuditEvent.FACE_UNKNOWN, actor, payload={"best_score": round(score, 4)})
        return MatchResult(student=student, score=score)

    def scan_check_in(
        self, image_bytes: bytes, actor: str, *, now: Optional[datetime] = None
    ) -> tuple[MatchResult, Optional[AttendanceSession]]:
        result = self.identify(image_bytes, actor)
        if not result.matched:
            return result, None
        return result, self._attendance.check_in(result.student.student_id, actor, now=now)

    def resolve_qr(self, image_bytes: bytes) -> Student:
        key = decode_qr(image_bytes)
        if not key:
            raise ValidationError("No QR code found in image")
        student = self._student_service.find_by_access_key(key)
        if not student:
            raise ValidationError("QR code does not match any student")
        return student

    def qr_check_in(
        self, image_bytes: bytes, actor: str, *, now: Optional[datetime] = None
    ) -> tuple[Student, AttendanceSession]:
        student = self.resolve_qr(image_bytes)
        return student, self._attendance.check_in(student.student_id, actor, now=now)

    def student_qr_png(self, student_id: int) -> bytes:
        student = self._student_service.get(student_id)
        return render_qr_png(student.access_key)
