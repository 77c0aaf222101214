from __future__ import annotations

from flask import Flask, jsonify
from flask_jwt_extended import jwt_required

from ..common.datetime_utils import parse_iso_datetime
from ..common.http import current_user_id, domain_error, json_body
from ..container import Container
from ..core.exceptions import DomainError, ValidationError


def register(app: Flask, container: Container) -> None:
    @app.route("/api/assignments", methods=["GET"], endpoint="assignments_list")
    @jwt_required()
    def assignments_list():
        items = container.assignment_service.list_assignments(current_user_id())
        return jsonify([a.to_dict() for a in items])

    @app.route("/api/assignments", methods=["POST"], endpoint="assignments_create")
    @jwt_required()
    def assignments_create():
        try:
            data = json_body()
            if not data.get("dueDate"):
                raise ValidationError("dueDate is required")
            assignment = container.assignment_service.create_assignment(
                user_id=current_user_id(),
                title=data.get("title", ""),
                due_at=parse_iso_datetime(data["dueDate"]),
                priority=data.get("priority", "medium"),
                details=data.get("details"),
                class_id=data.get("classId"),
            )
            return jsonify(assignment.to_dict()), 201
        except DomainError as e:
            return domain_error(e)

    @app.route("/api/assignments/<assignment_id>", methods=["PUT"], endpoint="assignments_update")
    @jwt_required()
    def assignments_update(assignment_id: str):
        try:
            data = json_body()
            assignment = container.assignment_service.update_assignment(
                user_id=current_user_id(),
                assignment_id=assignment_id,
                title=data.get("title"),
                due_at=parse_iso_datetime(data["dueDate"]) if data.get("dueDate") else None,
                priority=data.get("priority"),
                details=data.get("details"),
                class_id=data.get("classId"),
            )
            return jsonify(assignment.to_dict())
        except DomainError as e:
            return domain_error(e)

    @app.route("/api/assignments/<assignment_id>/toggle", methods=["POST"], endpoint="assignments_toggle")
    @jwt_required()
    def assignments_toggle(assignment_id: str):
        try:
            assignment = container.assignment_service.toggle_completed(
                user_id=current_user_id(), assignment_id=assignment_id
            )
            return jsonify(assignment.to_dict())
        except DomainError as e:
            return domain_error(e)

    @app.route("/api/assignments/<assignment_id>", methods=["DELETE"], endpoint="assignments_delete")
    @jwt_required()
    def assignments_delete(assignment_id: str):
        try:
            container.assignment_service.delete_assignment(user_id=current_user_id(), assignment_id=assignment_id)
        except DomainError as e:
            return domain_error(e)
        return jsonify({"success": True})
