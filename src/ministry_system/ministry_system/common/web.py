from __future__ import annotations

import logging
from datetime import date
from functools import wraps
from typing import Optional

from flask import Flask, jsonify, request, session

from ..core.enums import AgeGroup, Role
from ..core.exceptions import (
    AlreadyCheckedInError,
    AuthenticationError,
    AuthorizationError,
    CollaboratorError,
    DomainError,
    DuplicateCategoryError,
    ValidationError,
)
from ..students.service import parse_age_group
from ..users.model import SessionUser
from .datetime_utils import parse_iso_date

logger = logging.getLogger(__name__)

SESSION_KEY = "user"


def current_user() -> Optional[SessionUser]:
    data = session.get(SESSION_KEY)
    return SessionUser.from_dict(data) if data else None


def store_user(user: SessionUser) -> None:
    session[SESSION_KEY] = user.to_dict()


def role_required(*roles: Role):
    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            user = current_user()
            if user is None:
                return jsonify({"success": False, "message": "Please log in to continue"}), 401
            if roles and user.role not in roles:
                return jsonify({"success": False, "message": "You do not have permission for this action"}), 403
            return view(*args, **kwargs)

        return wrapper

    return decorator


login_required = role_required()
staff_required = role_required(Role.ADMIN, Role.TEACHER)
admin_required = role_required(Role.ADMIN)


def json_body() -> dict:
    return request.get_json(silent=True) or {}


def query_age_group() -> Optional[AgeGroup]:
    raw = request.args.get("age_group")
    return parse_age_group(raw) if raw else None


def query_date(name: str) -> Optional[date]:
    raw = request.args.get(name)
    return parse_iso_date(raw) if raw else None


def error_response(e: Exception):
    if isinstance(e, AlreadyCheckedInError):
        return jsonify({
            "success": True,
            "already_present": True,
            "check_in_time": e.check_in_time.isoformat(),
            "session_id": e.session_id,
            "message": str(e),
        }), 200
    if isinstance(e, DuplicateCategoryError):
        return jsonify({
            "success": False,
            "message": f"{e} Enable duplicate points in settings or choose another category.",
        }), 409
    if isinstance(e, ValidationError):
        return jsonify({"success": False, "message": str(e)}), 400
    if isinstance(e, AuthenticationError):
        return jsonify({"success": False, "message": str(e)}), 401
    if isinstance(e, AuthorizationError):
        return jsonify({"success": False, "message": str(e)}), 403
    if isinstance(e, CollaboratorError):
        logger.error("Collaborator failure: %s", e)
        return jsonify({"success": False, "message": str(e)}), 502

    logger.exception("Unhandled error")
    return jsonify({"success": False, "message": "Internal server error"}), 500


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        return error_response(e)
