from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.validators import require_int
from ..common.web import admin_required, current_user, json_body, staff_required
from ..container import Container
from .history import PointAdjustmentHistory


def register(app: Flask, container: Container) -> None:
    # One undo/redo stack per logged-in teacher, kept for the life of the process.
    histories: dict[str, PointAdjustmentHistory] = {}

    def _history() -> PointAdjustmentHistory:
        username = current_user().username
        if username not in histories:
            histories[username] = PointAdjustmentHistory(container.points_service, username)
        return histories[username]

    def _history_state(h: PointAdjustmentHistory) -> dict:
        return {"can_undo": h.can_undo, "can_redo": h.can_redo}

    @app.route("/api/points", methods=["POST"], endpoint="points_add")
    @staff_required
    def points_add():
        data = json_body()
        history = _history()
        entry = history.award(
            require_int(data.get("student_id"), "Student"),
            data.get("category", ""),
            data.get("points"),
            data.get("notes"),
        )
        return jsonify({"success": True, "entry": entry.to_dict(), **_history_state(history)}), 201

    @app.route("/api/points/undo", methods=["POST"], endpoint="points_undo")
    @staff_required
    def points_undo():
        history = _history()
        entry = history.undo()
        return jsonify({"success": True, "entry": entry.to_dict(), **_history_state(history)})

    @app.route("/api/points/redo", methods=["POST"], endpoint="points_redo")
    @staff_required
    def points_redo():
        history = _history()
        entry = history.redo()
        return jsonify({"success": True, "entry": entry.to_dict(), **_history_state(history)})

    @app.route("/api/points/<int:entry_id>/void", methods=["POST"], endpoint="points_void")
    @staff_required
    def points_void(entry_id: int):
        data = json_body()
        container.points_service.void_entry(entry_id, data.get("reason", ""), actor=current_user().username)
        return jsonify({"success": True})

    @app.route("/api/points/reset-season", methods=["POST"], endpoint="points_reset_season")
    @admin_required
    def points_reset_season():
        user = current_user()
        voided = container.points_service.reset_season(current_role=user.role, actor=user.username)
        return jsonify({"success": True, "voided": voided})

    @app.route("/api/points/ledger", endpoint="points_ledger")
    @staff_required
    def points_ledger():
        limit = require_int(request.args.get("limit", 500), "Limit")
        entries = container.points_service.list_ledger(limit=limit)
        return jsonify({"success": True, "entries": [e.to_dict() for e in entries]})

    @app.route("/api/points/rules", endpoint="points_rules")
    @staff_required
    def points_rules():
        return jsonify({"success": True, "rules": [r.to_dict() for r in container.points_service.list_rules()]})

    @app.route("/api/students/<int:student_id>/points", endpoint="student_points")
    @staff_required
    def student_points(student_id: int):
        limit = require_int(request.args.get("limit", 5), "Limit")
        return jsonify({
            "success": True,
            "total_points": container.points_service.total_points(student_id),
            "history": [e.to_dict() for e in container.points_service.recent_history(student_id, limit=limit)],
        })
