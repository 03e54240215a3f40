from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import now_local
from ..common.validators import require_int
from ..common.web import query_age_group, staff_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/fairness", endpoint="fairness_report")
    @staff_required
    def fairness_report():
        today = now_local().date()
        report = container.fairness_service.build_report(
            month=require_int(request.args.get("month", today.month), "Month"),
            year=require_int(request.args.get("year", today.year), "Year"),
            age_group=query_age_group(),
        )
        return jsonify({"success": True, "report": report.to_dict()})
