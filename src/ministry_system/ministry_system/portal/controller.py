from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.validators import require_int
from ..common.web import current_user, login_required
from ..container import Container
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, ValidationError


def register(app: Flask, container: Container) -> None:
    def _portal_student_id() -> int:
        """Parents see their own child; staff may pass ?student_id=."""
        user = current_user()
        if user.role == Role.PARENTS:
            if user.student_id is None:
                raise AuthorizationError("Parent session is not bound to a student")
            return user.student_id
        raw = request.args.get("student_id")
        if not raw:
            raise ValidationError("student_id is required")
        return require_int(raw, "Student")

    @app.route("/api/portal/profile", endpoint="portal_profile")
    @login_required
    def portal_profile():
        return jsonify({"success": True, **container.portal_service.profile(_portal_student_id())})

    @app.route("/api/portal/advice", endpoint="portal_advice")
    @login_required
    def portal_advice():
        return jsonify({"success": True, "advice": container.portal_service.advice(_portal_student_id())})

    @app.route("/api/portal/story", methods=["POST"], endpoint="portal_story")
    @login_required
    def portal_story():
        story = container.portal_service.story(_portal_student_id())
        return jsonify({"success": True, "story": story.to_dict()})
