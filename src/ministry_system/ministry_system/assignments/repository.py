from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import AgeGroup
from .model import Assignment


class AssignmentRepository(Protocol):
    def create(
        self,
        *,
        teacher_name: str,
        title: str,
        deadline: date,
        task_details: str,
        age_group: Optional[AgeGroup],
    ) -> int:
        raise NotImplementedError

    def get_by_id(self, assignment_id: int) -> Optional[Assignment]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Assignment]:
        """Newest first."""

        raise NotImplementedError

    def delete_by_id(self, assignment_id: int) -> bool:
        raise NotImplementedError
