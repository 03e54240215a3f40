from __future__ import annotations

from flask import Flask, jsonify, session

from ..common.web import current_user, json_body, login_required, store_user
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/auth/login", methods=["POST"], endpoint="login")
    def login():
        data = json_body()
        user = container.auth_service.authenticate(
            data.get("role", ""),
            username=data.get("username", ""),
            password=data.get("password", ""),
            access_key=data.get("access_key", ""),
        )
        session.clear()
        store_user(user)
        return jsonify({"success": True, "user": user.to_dict()})

    @app.route("/api/auth/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return jsonify({"success": True})

    @app.route("/api/auth/me", endpoint="me")
    @login_required
    def me():
        return jsonify({"success": True, "user": current_user().to_dict()})
