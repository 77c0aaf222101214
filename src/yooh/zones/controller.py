from __future__ import annotations

from flask import Flask, jsonify
from flask_jwt_extended import jwt_required

from ..common.http import current_user_id, domain_error, json_body
from ..container import Container
from ..core.constants import DEFAULT_ZONE_RADIUS_METERS
from ..core.exceptions import DomainError


def register(app: Flask, container: Container) -> None:
    @app.route("/api/zones", methods=["GET"], endpoint="zones_list")
    @jwt_required()
    def zones_list():
        user_id = current_user_id()
        return jsonify(
            {
                "zones": [z.to_dict() for z in container.zone_registry.list_zones(user_id)],
                "geofence": _zone_or_none(container.zone_registry.geofence_zone(user_id)),
            }
        )

    @app.route("/api/zones", methods=["POST"], endpoint="zones_add")
    @jwt_required()
    def zones_add():
        try:
            data = json_body()
            zone = container.zone_registry.add_zone(
                current_user_id(),
                name=data.get("name", ""),
                address=data.get("address", ""),
                latitude=data.get("latitude"),
                longitude=data.get("longitude"),
                radius=data.get("radius", DEFAULT_ZONE_RADIUS_METERS),
            )
            return jsonify(zone.to_dict()), 201
        except DomainError as e:
            return domain_error(e)

    @app.route("/api/zones/<zone_id>", methods=["PUT"], endpoint="zones_update")
    @jwt_required()
    def zones_update(zone_id: str):
        try:
            data = json_body()
            zone = container.zone_registry.update_zone(
                current_user_id(),
                zone_id,
                name=data.get("name"),
                address=data.get("address"),
                latitude=data.get("latitude"),
                longitude=data.get("longitude"),
                radius=data.get("radius"),
            )
            return jsonify(zone.to_dict())
        except DomainError as e:
            return domain_error(e)

    @app.route("/api/zones/<zone_id>/activate", methods=["POST"], endpoint="zones_activate")
    @jwt_required()
    def zones_activate(zone_id: str):
        try:
            return jsonify(container.zone_registry.set_active(current_user_id(), zone_id).to_dict())
        except DomainError as e:
            return domain_error(e)

    @app.route("/api/zones/<zone_id>", methods=["DELETE"], endpoint="zones_delete")
    @jwt_required()
    def zones_delete(zone_id: str):
        try:
            container.zone_registry.delete(current_user_id(), zone_id)
        except DomainError as e:
            return domain_error(e)
        return jsonify({"success": True})


def _zone_or_none(zone):
    return zone.to_dict() if zone else None
