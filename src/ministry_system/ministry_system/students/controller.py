from __future__ import annotations

import io

from flask import Flask, jsonify, request, send_file

from ..common.datetime_utils import now_local, parse_iso_date
from ..common.web import admin_required, current_user, json_body, query_age_group, staff_required
from ..container import Container
from ..core.exceptions import ValidationError
from .service import calculate_age

EDITABLE_FIELDS = (
    "full_name",
    "birthday",
    "age_group",
    "guardian_name",
    "guardian_phone",
    "guardian_nickname",
    "photo_url",
    "notes",
)


def register(app: Flask, container: Container) -> None:
    def _student_json(student) -> dict:
        data = student.to_dict()
        data["age"] = calculate_age(student.birthday, now_local().date())
        return data

    @app.route("/api/students", endpoint="students_list")
    @staff_required
    def students_list():
        students = container.student_service.list_students(age_group=query_age_group())
        return jsonify({"success": True, "students": [_student_json(s) for s in students]})

    @app.route("/api/students", methods=["POST"], endpoint="students_create")
    @staff_required
    def students_create():
        data = json_body()
        birthday = data.get("birthday")
        student = container.student_service.register(
            full_name=data.get("full_name", ""),
            age_group=data.get("age_group", ""),
            birthday=parse_iso_date(birthday) if birthday else None,
            guardian_name=data.get("guardian_name"),
            guardian_phone=data.get("guardian_phone"),
            guardian_nickname=data.get("guardian_nickname"),
            photo_url=data.get("photo_url"),
            notes=data.get("notes"),
        )
        return jsonify({"success": True, "student": _student_json(student)}), 201

    @app.route("/api/students/<int:student_id>", endpoint="students_get")
    @staff_required
    def students_get(student_id: int):
        return jsonify({"success": True, "student": _student_json(container.student_service.get(student_id))})

    @app.route("/api/students/<int:student_id>", methods=["PATCH"], endpoint="students_update")
    @staff_required
    def students_update(student_id: int):
        data = json_body()
        changes = {k: data[k] for k in EDITABLE_FIELDS if k in data}
        if changes.get("birthday"):
            changes["birthday"] = parse_iso_date(changes["birthday"])
        student = container.student_service.update(student_id, **changes)
        return jsonify({"success": True, "student": _student_json(student)})

    @app.route("/api/students/<int:student_id>", methods=["DELETE"], endpoint="students_delete")
    @admin_required
    def students_delete(student_id: int):
        container.student_service.delete(current_role=current_user().role, student_id=student_id)
        return jsonify({"success": True})

    @app.route("/api/students/lookup", endpoint="students_lookup")
    @staff_required
    def students_lookup():
        student = container.student_service.find_by_access_key(request.args.get("key", ""))
        if not student:
            raise ValidationError("No student with that access key")
        return jsonify({"success": True, "student": _student_json(student)})

    @app.route("/api/students/birthdays", endpoint="students_birthdays")
    @staff_required
    def students_birthdays():
        today = now_local().date()
        return jsonify({
            "success": True,
            "this_week": [_student_json(s) for s in container.student_service.birthdays_this_week(today=today)],
            "this_month": [_student_json(s) for s in container.student_service.birthdays_this_month(today=today)],
        })

    @app.route("/api/students/<int:student_id>/qr", endpoint="students_qr")
    @staff_required
    def students_qr(student_id: int):
        png = container.recognition_service.student_qr_png(student_id)
        return send_file(io.BytesIO(png), mimetype="image/png")
