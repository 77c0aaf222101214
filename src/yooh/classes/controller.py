from __future__ import annotations

from flask import Flask, jsonify, request
from flask_jwt_extended import jwt_required

from ..common.datetime_utils import parse_iso_date, parse_iso_datetime, parse_time_of_day
from ..common.http import current_user_id, domain_error, json_body, query_int
from ..container import Container
from ..core.constants import DEFAULT_UPCOMING_DAYS
from ..core.exceptions import DomainError, ValidationError


def _date_or_datetime(raw, field_name: str):
    if not raw:
        raise ValidationError(f"{field_name} is required")
    return parse_iso_date(raw) if len(raw) == 10 else parse_iso_datetime(raw)


def _optional_time(data: dict, key: str):
    return parse_time_of_day(data[key]) if data.get(key) else None


def register(app: Flask, container: Container) -> None:
    @app.route("/api/classes", methods=["GET"], endpoint="classes_list")
    @jwt_required()
    def classes_list():
        return jsonify([c.to_dict() for c in container.class_service.list_classes(current_user_id())])

    @app.route("/api/classes", methods=["POST"], endpoint="classes_create")
    @jwt_required()
    def classes_create():
        try:
            data = json_body()
            start_time = _optional_time(data, "startTime")
            end_time = _optional_time(data, "endTime")
            if start_time is None or end_time is None:
                raise ValidationError("startTime and endTime are required")
            session = container.class_service.create_class(
                user_id=current_user_id(),
                title=data.get("title", ""),
                day_of_week=data.get("dayOfWeek"),
                start_time=start_time,
                end_time=end_time,
                location=data.get("location"),
                notes=data.get("notes"),
                is_recurring=data.get("isRecurring", True),
            )
            return jsonify(session.to_dict()), 201
        except DomainError as e:
            return domain_error(e)

    @app.route("/api/classes/<class_id>", methods=["PUT"], endpoint="classes_update")
    @jwt_required()
    def classes_update(class_id: str):
        try:
            data = json_body()
            session = container.class_service.update_class(
                user_id=current_user_id(),
                class_id=class_id,
                title=data.get("title"),
                day_of_week=data.get("dayOfWeek"),
                start_time=_optional_time(data, "startTime"),
                end_time=_optional_time(data, "endTime"),
                location=data.get("location"),
                notes=data.get("notes"),
                is_recurring=data.get("isRecurring"),
            )
            return jsonify(session.to_dict())
        except DomainError as e:
            return domain_error(e)

    @app.route("/api/classes/<class_id>", methods=["DELETE"], endpoint="classes_delete")
    @jwt_required()
    def classes_delete(class_id: str):
        try:
            container.class_service.delete_class(user_id=current_user_id(), class_id=class_id)
        except DomainError as e:
            return domain_error(e)
        return jsonify({"success": True})

    @app.route("/api/classes/active", methods=["GET"], endpoint="classes_active")
    @jwt_required()
    def classes_active():
        session = container.class_service.active_class(current_user_id())
        return jsonify({"activeClass": session.to_dict() if session else None})

    @app.route("/api/calendar/occurrences", methods=["GET"], endpoint="calendar_occurrences")
    @jwt_required()
    def calendar_occurrences():
        try:
            occurrences = container.class_service.occurrences(
                current_user_id(),
                start=_date_or_datetime(request.args.get("start"), "start"),
                end=_date_or_datetime(request.args.get("end"), "end"),
            )
        except DomainError as e:
            return domain_error(e)
        return jsonify([o.isoformat() for o in occurrences])

    @app.route("/api/calendar/upcoming", methods=["GET"], endpoint="calendar_upcoming")
    @jwt_required()
    def calendar_upcoming():
        try:
            days = query_int("days", DEFAULT_UPCOMING_DAYS)
            if days <= 0:
                raise ValidationError("days must be positive")
        except ValidationError as e:
            return domain_error(e)
        upcoming = container.class_service.upcoming(current_user_id(), days=days)
        return jsonify([o.to_dict() for o in upcoming])
