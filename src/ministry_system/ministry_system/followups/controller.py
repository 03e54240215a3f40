from __future__ import annotations

from flask import Flask, jsonify

from ..common.web import current_user, staff_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/followups", endpoint="followups_list")
    @staff_required
    def followups_list():
        return jsonify({"success": True, "buckets": container.followup_service.candidates().to_dict()})

    @app.route("/api/followups/<int:student_id>/message", endpoint="followups_message")
    @staff_required
    def followups_message(student_id: int):
        return jsonify({"success": True, **container.followup_service.compose(student_id)})

    @app.route("/api/followups/<int:student_id>/sent", methods=["POST"], endpoint="followups_sent")
    @staff_required
    def followups_sent(student_id: int):
        sent_at = container.followup_service.record_follow_up(student_id, current_user().username)
        return jsonify({"success": True, "sent_at": sent_at.isoformat()})
