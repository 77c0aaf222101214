from __future__ import annotations

from flask import Flask, jsonify
from flask_jwt_extended import jwt_required

from ..common.http import current_user_id, domain_error, json_body
from ..common.validators import as_bool
from ..container import Container
from ..core.exceptions import DomainError
from .model import ScheduledNotification


def _notification_dict(n: ScheduledNotification) -> dict:
    return {
        "identifier": n.identifier,
        "category": n.category.value,
        "fireAt": n.fire_at.isoformat(),
        "title": n.title,
        "body": n.body,
    }


def register(app: Flask, container: Container) -> None:
    def saved(user_id: int, prefs):
        # every preference change rebuilds the pending reminders
        container.reminder_service.reschedule(user_id)
        return jsonify(prefs.to_dict())

    @app.route("/api/reminders/preferences", methods=["GET"], endpoint="reminders_preferences")
    @jwt_required()
    def reminders_preferences():
        try:
            return jsonify(container.reminder_preferences.load(current_user_id()).to_dict())
        except DomainError as e:
            return domain_error(e)

    @app.route("/api/reminders/preferences", methods=["PUT"], endpoint="reminders_preferences_replace")
    @jwt_required()
    def reminders_preferences_replace():
        try:
            user_id = current_user_id()
            return saved(user_id, container.reminder_preferences.replace_all(user_id, json_body()))
        except DomainError as e:
            return domain_error(e)

    @app.route("/api/reminders/offsets", methods=["POST"], endpoint="reminders_add_offset")
    @jwt_required()
    def reminders_add_offset():
        try:
            user_id = current_user_id()
            data = json_body()
            prefs = container.reminder_preferences.add_offset(
                user_id, data.get("category"), data.get("amount"), data.get("unit", "minutes")
            )
            return saved(user_id, prefs)
        except DomainError as e:
            return domain_error(e)

    @app.route(
        "/api/reminders/offsets/<category>/<int:minutes>",
        methods=["DELETE"],
        endpoint="reminders_remove_offset",
    )
    @jwt_required()
    def reminders_remove_offset(category: str, minutes: int):
        try:
            user_id = current_user_id()
            return saved(user_id, container.reminder_preferences.remove_offset(user_id, category, minutes))
        except DomainError as e:
            return domain_error(e)

    @app.route("/api/reminders/<category>/enabled", methods=["PUT"], endpoint="reminders_set_enabled")
    @jwt_required()
    def reminders_set_enabled(category: str):
        try:
            user_id = current_user_id()
            enabled = as_bool(json_body().get("enabled"), "enabled")
            return saved(user_id, container.reminder_preferences.set_enabled(user_id, category, enabled))
        except DomainError as e:
            return domain_error(e)

    @app.route("/api/reminders/reschedule", methods=["POST"], endpoint="reminders_reschedule")
    @jwt_required()
    def reminders_reschedule():
        try:
            scheduled = container.reminder_service.reschedule(current_user_id())
        except DomainError as e:
            return domain_error(e)
        return jsonify([_notification_dict(n) for n in scheduled])

    @app.route("/api/reminders/pending", methods=["GET"], endpoint="reminders_pending")
    @jwt_required()
    def reminders_pending():
        pending = container.notifications_repo.pending(current_user_id())
        return jsonify([_notification_dict(n) for n in pending])
