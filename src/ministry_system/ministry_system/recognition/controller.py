from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.web import current_user, staff_required
from ..container import Container
from ..core.enums import FaceAngle
from ..core.exceptions import ValidationError


def _uploaded_image(field: str = "image") -> bytes:
    if field not in request.files:
        raise ValidationError("Missing image file")
    return request.files[field].read()


def register(app: Flask, container: Container) -> None:
    @app.route("/api/faces/<int:student_id>/enroll", methods=["POST"], endpoint="faces_enroll")
    @staff_required
    def faces_enroll(student_id: int):
        images = {a: request.files[a.value].read() for a in FaceAngle if a.value in request.files}
        stored = container.recognition_service.enroll(student_id, images, current_user().username)
        return jsonify({"success": True, "angles": stored})

    @app.route("/api/faces/identify", methods=["POST"], endpoint="faces_identify")
    @staff_required
    def faces_identify():
        result = container.recognition_service.identify(_uploaded_image(), current_user().username)
        return jsonify({"success": True, **result.to_dict()})

    @app.route("/api/faces/check-in", methods=["POST"], endpoint="faces_check_in")
    @staff_required
    def faces_check_in():
        result, session_row = container.recognition_service.scan_check_in(_uploaded_image(), current_user().username)
        if not result.matched:
            return jsonify({"success": False, "message": "Face not recognised", **result.to_dict()}), 404
        return jsonify({
            "success": True,
            "already_present": False,
            **result.to_dict(),
            "session": session_row.to_dict(),
        })

    @app.route("/api/qr/check-in", methods=["POST"], endpoint="qr_check_in")
    @staff_required
    def qr_check_in():
        student, session_row = container.recognition_service.qr_check_in(_uploaded_image(), current_user().username)
        return jsonify({
            "success": True,
            "already_present": False,
            "student": student.to_dict(),
            "session": session_row.to_dict(),
        })
