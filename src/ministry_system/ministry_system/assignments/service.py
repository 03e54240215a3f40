from __future__ import annotations

import logging
from datetime import date
from typing import Optional, Union

from ..common.datetime_utils import parse_iso_date
from ..common.validators import require_non_empty
from ..core.enums import AgeGroup, Role
from ..core.exceptions import AuthorizationError, ValidationError
from ..students.service import parse_age_group
from .model import Assignment
from .repository import AssignmentRepository

logger = logging.getLogger(__name__)

ALL_GROUPS = "ALL"
STAFF_ROLES = {Role.ADMIN, Role.TEACHER}


def _parse_deadline(value: Union[date, str, None]) -> date:
    if isinstance(value, date):
        return value
    if not value or not str(value).strip():
        raise ValidationError("Deadline is required")
    return parse_iso_date(str(value))


def _parse_target_group(value) -> Optional[AgeGroup]:
    if value is None or str(value).strip().upper() in {"", ALL_GROUPS}:
        return None
    return parse_age_group(value)


class AssignmentService:
    """Use case: teachers post homework, everyone reads it."""

    def __init__(self, assignments: AssignmentRepository):
        self._assignments = assignments

    def _require_staff(self, current_role: Role, action: str) -> None:
        if current_role not in STAFF_ROLES:
            raise AuthorizationError(f"Only teachers and admins can {action} assignments")

    def post(
        self,
        *,
        current_role: Role,
        teacher_name: str,
        title: str,
        deadline: Union[date, str, None],
        task_details: str = "",
        age_group=None,
    ) -> Assignment:
        self._require_staff(current_role, "post")

        title = require_non_empty(title, "Title").upper()
        teacher_name = require_non_empty(teacher_name, "Teacher name")
        due = _parse_deadline(deadline)
        target = _parse_target_group(age_group)

        assignment_id = self._assignments.create(
            teacher_name=teacher_name,
            title=title,
            deadline=due,
            task_details=(task_details or "").strip(),
            age_group=target,
        )
        logger.info("Assignment %s '%s' posted by %s", assignment_id, title, teacher_name)
        return self._assignments.get_by_id(assignment_id)

    def list_assignments(self):
        return self._assignments.list_all()

    def delete(self, *, current_role: Role, assignment_id: int) -> None:
        self._require_staff(current_role, "delete")
        if not self._assignments.delete_by_id(int(assignment_id)):
            raise ValidationError("Assignment not found")
