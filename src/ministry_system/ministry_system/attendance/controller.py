from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.validators import require_bool, require_int
from ..common.web import admin_required, current_user, json_body, query_date, staff_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/attendance/check-in", methods=["POST"], endpoint="attendance_check_in")
    @staff_required
    def attendance_check_in():
        data = json_body()
        session_row = container.attendance_service.check_in(
            require_int(data.get("student_id"), "Student"), current_user().username
        )
        return jsonify({"success": True, "already_present": False, "session": session_row.to_dict()})

    @app.route("/api/attendance/check-out", methods=["POST"], endpoint="attendance_check_out")
    @staff_required
    def attendance_check_out():
        data = json_body()
        session_row = container.attendance_service.check_out(
            require_int(data.get("student_id"), "Student"), current_user().username
        )
        return jsonify({"success": True, "session": session_row.to_dict()})

    @app.route("/api/attendance/auto-checkout", methods=["POST"], endpoint="attendance_auto_checkout")
    @admin_required
    def attendance_auto_checkout():
        closed = container.attendance_service.run_auto_checkout()
        return jsonify({"success": True, "closed": closed})

    @app.route("/api/attendance/absence-sweep", methods=["POST"], endpoint="attendance_absence_sweep")
    @admin_required
    def attendance_absence_sweep():
        data = json_body()
        result = container.attendance_service.run_absence_sweep(
            current_user().username, force=require_bool(data.get("force", False), "Force")
        )
        return jsonify({"success": True, **result.to_dict()})

    @app.route("/api/attendance/report", endpoint="attendance_report")
    @staff_required
    def attendance_report():
        rows = container.attendance_service.attendance_report(query_date("date"))
        return jsonify({"success": True, "rows": [r.to_dict() for r in rows]})

    @app.route("/api/attendance/classrooms", endpoint="attendance_classrooms")
    @staff_required
    def attendance_classrooms():
        stats = container.attendance_service.classroom_stats(query_date("date"))
        return jsonify({"success": True, "classrooms": [s.to_dict() for s in stats]})

    @app.route("/api/attendance/logs", endpoint="attendance_logs")
    @staff_required
    def attendance_logs():
        limit = require_int(request.args.get("limit", 500), "Limit")
        sessions = container.attendance_service.attendance_logs(limit=limit)
        return jsonify({"success": True, "sessions": [s.to_dict() for s in sessions]})

    @app.route("/api/students/<int:student_id>/session", endpoint="attendance_today_session")
    @staff_required
    def attendance_today_session(student_id: int):
        session_row = container.attendance_service.today_session(student_id)
        return jsonify({"success": True, "session": session_row.to_dict() if session_row else None})
