from __future__ import annotations

from datetime import datetime
from typing import Optional


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class DuplicateCategoryError(ValidationError):
    """Raised when a standard category was already scored for the student today."""

    def __init__(self, category: str):
        super().__init__(f"Points already awarded for {category} today.")
        self.category = category


class AlreadyCheckedInError(DomainError):
    """Raised when the student already has an OPEN session today.

    Callers treat this as a soft success ("already present").
    """

    def __init__(self, check_in_time: datetime, session_id: Optional[int] = None):
        super().__init__(f"Student already checked in at {check_in_time.strftime('%H:%M:%S')}")
        self.check_in_time = check_in_time
        self.session_id = session_id


class SweepAlreadyRunError(ValidationError):
    """Raised when the absence sweep already ran for the given service day."""


class CollaboratorError(DomainError):
    """Raised when the store or an AI collaborator fails."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""
