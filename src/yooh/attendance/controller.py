from __future__ import annotations

from datetime import date, datetime

from flask import Flask, jsonify, request
from flask_jwt_extended import jwt_required

from ..common.http import current_user_id, domain_error, json_body, query_int
from ..common.validators import require_latitude, require_longitude
from ..container import Container
from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..core.exceptions import DomainError, ValidationError
from ..geo.geofence import GeoPoint
from .checker import SignEligibility


def _eligibility_dict(e: SignEligibility) -> dict:
    return {
        "canSign": e.can_sign,
        "reason": e.reason,
        "withinZone": e.within_zone,
        "alreadySigned": e.already_signed,
        "distanceMeters": round(e.distance_meters, 1) if e.distance_meters is not None else None,
        "zone": e.zone.to_dict() if e.zone else None,
        "activeClass": e.active_class.to_dict() if e.active_class else None,
    }


def _parse_month(raw: str) -> date:
    try:
        return datetime.strptime(raw, "%Y-%m").date()
    except ValueError:
        raise ValidationError(f"Invalid month: {raw!r}")


def register(app: Flask, container: Container) -> None:
    def update_location(user_id: int, data: dict) -> None:
        if data.get("denied"):
            container.tracker.deny(user_id)
            return
        point = GeoPoint(require_latitude(data.get("latitude")), require_longitude(data.get("longitude")))
        container.tracker.update(user_id, point)

    @app.route("/api/location", methods=["POST"], endpoint="location_update")
    @jwt_required()
    def location_update():
        try:
            user_id = current_user_id()
            update_location(user_id, json_body())
            return jsonify(_eligibility_dict(container.checker.evaluate(user_id)))
        except DomainError as e:
            return domain_error(e)

    @app.route("/api/attendance/status", methods=["GET"], endpoint="attendance_status")
    @jwt_required()
    def attendance_status():
        try:
            return jsonify(_eligibility_dict(container.checker.evaluate(current_user_id())))
        except DomainError as e:
            return domain_error(e)

    @app.route("/api/attendance/sign", methods=["POST"], endpoint="attendance_sign")
    @jwt_required()
    def attendance_sign():
        try:
            user_id = current_user_id()
            data = json_body()
            if "latitude" in data or "longitude" in data:
                update_location(user_id, data)
            record = container.checker.sign_now(user_id)
            return jsonify({"success": True, "record": record.to_dict()}), 201
        except DomainError as e:
            return domain_error(e)

    @app.route("/api/attendance/stats", methods=["GET"], endpoint="attendance_stats")
    @jwt_required()
    def attendance_stats():
        user_id = current_user_id()
        payload = container.ledger.stats(user_id).to_dict()
        month = request.args.get("month")
        if month:
            try:
                month_start = _parse_month(month)
            except ValidationError as e:
                return domain_error(e)
            payload["month"] = month
            payload["monthlyCount"] = container.ledger.monthly_count(user_id, month_start)
            payload["monthRecords"] = [r.to_dict() for r in container.ledger.records_for_month(user_id, month_start)]
        return jsonify(payload)

    @app.route("/api/attendance/history", methods=["GET"], endpoint="attendance_history")
    @jwt_required()
    def attendance_history():
        try:
            limit = query_int("limit", DEFAULT_HISTORY_LIMIT)
            if limit <= 0:
                raise ValidationError("limit must be positive")
        except ValidationError as e:
            return domain_error(e)
        records = container.ledger.history(current_user_id(), limit=limit)
        return jsonify([r.to_dict() for r in records])

    @app.route("/api/attendance/records", methods=["DELETE"], endpoint="attendance_clear")
    @jwt_required()
    def attendance_clear():
        removed = container.ledger.clear_all(current_user_id())
        return jsonify({"success": True, "removed": removed})
