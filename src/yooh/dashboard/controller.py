from __future__ import annotations

from functools import wraps

from flask import Flask, jsonify
from flask_jwt_extended import get_jwt, jwt_required

from ..common.http import current_user_id, domain_error, error, json_body
from ..container import Container
from ..core.enums import Role
from ..core.exceptions import DomainError


def register(app: Flask, container: Container) -> None:
    def lecturer_required(view):
        @wraps(view)
        @jwt_required()
        def wrapper(*args, **kwargs):
            if get_jwt().get("role") != Role.LECTURER.value:
                return error("Lecturer access required", 403)
            return view(*args, **kwargs)

        return wrapper

    def actor():
        return container.auth_service.me(current_user_id())

    @app.route("/api/dashboard/attendance", methods=["GET"], endpoint="dashboard_attendance")
    @lecturer_required
    def dashboard_attendance():
        try:
            rows = container.dashboard_service.attendance_overview(actor())
        except DomainError as e:
            return domain_error(e)
        return jsonify([r.to_dict() for r in rows])

    @app.route("/api/dashboard/courses", methods=["POST"], endpoint="dashboard_create_course")
    @lecturer_required
    def dashboard_create_course():
        try:
            course = container.dashboard_service.create_course(actor(), json_body().get("name", ""))
        except DomainError as e:
            return domain_error(e)
        return jsonify({"id": course.course_id, "name": course.name, "lecturerId": course.lecturer_id}), 201

    @app.route(
        "/api/dashboard/courses/<int:course_id>/enrollments",
        methods=["POST"],
        endpoint="dashboard_enroll",
    )
    @lecturer_required
    def dashboard_enroll(course_id: int):
        try:
            created = container.dashboard_service.enroll(
                actor(), course_id=course_id, student_id=json_body().get("studentId")
            )
        except DomainError as e:
            return domain_error(e)
        return jsonify({"enrolled": True, "created": created}), 201 if created else 200

    @app.route("/api/attendance", methods=["POST"], endpoint="course_attendance_create")
    @jwt_required()
    def course_attendance_create():
        try:
            data = json_body()
            row = container.dashboard_service.record_attendance(
                actor(),
                course_id=data.get("classId"),
                attendance_date=data.get("attendanceDate"),
                is_present=data.get("isPresent"),
                student_id=data.get("studentId"),
            )
            return jsonify(row.to_dict()), 201
        except DomainError as e:
            return domain_error(e)
