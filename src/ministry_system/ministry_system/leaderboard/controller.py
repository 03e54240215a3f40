from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.validators import require_int
from ..common.web import login_required, query_age_group
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/leaderboard", endpoint="leaderboard")
    @login_required
    def leaderboard():
        age_group = query_age_group()
        month = request.args.get("month")
        if month:
            year = require_int(request.args.get("year"), "Year")
            board = container.leaderboard_service.get_monthly_leaderboard(
                require_int(month, "Month"), year, age_group
            )
        else:
            board = container.leaderboard_service.get_leaderboard(age_group)
        return jsonify({
            "success": True,
            "entries": [e.to_dict(rank=i) for i, e in enumerate(board, start=1)],
        })
