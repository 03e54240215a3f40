from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User roles used for authorization."""

    ADMIN = "ADMIN"
    TEACHER = "TEACHER"
    PARENTS = "PARENTS"


class AgeGroup(str, Enum):
    TODDLERS = "3-6"
    JUNIORS = "7-9"
    PRETEENS = "10-12"
    ADULT = "Adult"
    GUEST = "Guest"

    @classmethod
    def standard(cls) -> tuple["AgeGroup", ...]:
        return (cls.TODDLERS, cls.JUNIORS, cls.PRETEENS)


class StudentStatus(str, Enum):
    ACTIVE = "active"
    FROZEN = "frozen"
    ALUMNI = "alumni"
    GUEST = "guest"
    STUDENT = "student"


class SessionStatus(str, Enum):
    """Attendance session lifecycle: created OPEN, closed once."""

    OPEN = "OPEN"
    CLOSED = "CLOSED"


class CheckoutMode(str, Enum):
    MANUAL = "MANUAL"
    AUTO = "AUTO"


class CategoryKind(str, Enum):
    """How a ledger entry is treated by the daily duplicate guard."""

    STANDARD = "STANDARD"
    MANUAL = "MANUAL"
    CORRECTION = "CORRECTION"


class FaceAngle(str, Enum):
    FRONT = "front"
    LEFT = "left"
    RIGHT = "right"


class AuditEvent(str, Enum):
    CHECKIN = "CHECKIN"
    CHECKOUT_AUTO = "CHECKOUT_AUTO"
    CHECKOUT_MANUAL = "CHECKOUT_MANUAL"
    FACE_UNKNOWN = "FACE_UNKNOWN"
    POINT_ADD = "POINT_ADD"
    POINT_VOID = "POINT_VOID"
    ENROLLMENT = "ENROLLMENT"
    AUDIT_WIPE = "AUDIT_WIPE"
    ABSENCE_SWEEP = "ABSENCE_SWEEP"
    FOLLOWUP_SENT = "FOLLOWUP_SENT"


class PresenceStatus(str, Enum):
    PRESENT = "PRESENT"
    ABSENT = "ABSENT"
