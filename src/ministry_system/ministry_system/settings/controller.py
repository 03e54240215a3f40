from __future__ import annotations

from flask import Flask, jsonify

from ..common.web import admin_required, current_user, json_body, staff_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/settings", endpoint="settings_get")
    @staff_required
    def settings_get():
        return jsonify({"success": True, "settings": container.settings_service.current().to_dict()})

    @app.route("/api/settings", methods=["PUT"], endpoint="settings_update")
    @admin_required
    def settings_update():
        data = json_body()
        updated = container.settings_service.update(
            current_role=current_user().role,
            match_threshold=data.get("match_threshold"),
            auto_checkout_time=data.get("auto_checkout_time"),
            allow_duplicate_points=data.get("allow_duplicate_points"),
        )
        return jsonify({"success": True, "settings": updated.to_dict()})
