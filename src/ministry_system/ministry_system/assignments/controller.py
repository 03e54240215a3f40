from __future__ import annotations

from flask import Flask, jsonify

from ..common.web import current_user, json_body, login_required, staff_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/assignments", endpoint="assignments_list")
    @login_required
    def assignments_list():
        rows = container.assignment_service.list_assignments()
        return jsonify({"success": True, "assignments": [a.to_dict() for a in rows]})

    @app.route("/api/assignments", methods=["POST"], endpoint="assignments_post")
    @staff_required
    def assignments_post():
        data = json_body()
        user = current_user()
        assignment = container.assignment_service.post(
            current_role=user.role,
            teacher_name=data.get("teacher_name") or user.username,
            title=data.get("title", ""),
            deadline=data.get("deadline"),
            task_details=data.get("task_details", ""),
            age_group=data.get("age_group"),
        )
        return jsonify({"success": True, "assignment": assignment.to_dict()}), 201

    @app.route("/api/assignments/<int:assignment_id>", methods=["DELETE"], endpoint="assignments_delete")
    @staff_required
    def assignments_delete(assignment_id: int):
        container.assignment_service.delete(current_role=current_user().role, assignment_id=assignment_id)
        return jsonify({"success": True})
