from __future__ import annotations

from flask import Flask, jsonify

from ..common.web import admin_required, current_user, json_body, login_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/activities/current", endpoint="activities_current")
    @login_required
    def activities_current():
        return jsonify({"success": True, "activity": container.schedule_service.current_activity()})

    @app.route("/api/activities", endpoint="activities_list")
    @login_required
    def activities_list():
        rows = container.schedule_service.list_schedule()
        return jsonify({"success": True, "activities": [r.to_dict() for r in rows]})

    @app.route("/api/activities/<int:sunday_index>", methods=["PUT"], endpoint="activities_assign")
    @admin_required
    def activities_assign(sunday_index: int):
        data = json_body()
        activity_id = container.schedule_service.assign(
            current_role=current_user().role,
            sunday_index=sunday_index,
            title=data.get("title", ""),
            is_active=data.get("is_active", True),
        )
        return jsonify({"success": True, "activity_id": activity_id})
