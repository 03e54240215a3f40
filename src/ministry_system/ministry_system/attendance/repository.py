from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import CheckoutMode, SessionStatus
from .model import AttendanceSession


class SessionRepository(Protocol):
    def list_for_date(
        self,
        session_date: date,
        *,
        status: Optional[SessionStatus] = None,
        student_id: Optional[int] = None,
    ) -> Sequence[AttendanceSession]:
        raise NotImplementedError

    def create_session(
        self,
        *,
        student_id: int,
        session_date: date,
        check_in_time: datetime,
        checked_in_by: str,
    ) -> Optional[int]:
        """Insert an OPEN session.

        Returns None when the store rejects a second OPEN session for the same
        (student, day).
        """

        raise NotImplementedError

    def close_session(
        self,
        *,
        session_id: int,
        check_out_time: datetime,
        checkout_mode: CheckoutMode,
        checked_out_by: str,
    ) -> bool:
        raise NotImplementedError

    def list_recent(self, *, limit: int) -> Sequence[AttendanceSession]:
        raise NotImplementedError

    def claim_sweep(self, *, sweep_date: date, actor: str) -> bool:
        """Insert the day's sweep marker. False when it already exists."""
        raise NotImplementedError

    def record_sweep(self, *, sweep_date: date, actor: str, absent_count: int, frozen_count: int) -> None:
        raise NotImplementedError
