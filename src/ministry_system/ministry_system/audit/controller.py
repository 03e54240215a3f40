from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.validators import require_int
from ..common.web import admin_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/audit", endpoint="audit_list")
    @admin_required
    def audit_list():
        limit = require_int(request.args.get("limit", 200), "Limit")
        return jsonify({"success": True, "logs": [e.to_dict() for e in container.audit.list_logs(limit=limit)]})
