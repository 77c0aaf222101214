from __future__ import annotations

from flask import Flask, jsonify
from flask_jwt_extended import jwt_required

from ..common.http import current_user_id, domain_error, json_body
from ..container import Container
from ..core.exceptions import DomainError


def register(app: Flask, container: Container) -> None:
    @app.route("/api/sync", methods=["POST"], endpoint="sync_all")
    @jwt_required()
    def sync_all():
        try:
            pushed = container.sync_service.sync_all(current_user_id())
        except DomainError as e:
            return domain_error(e)
        return jsonify({"success": True, "pushed": pushed})

    @app.route("/api/sync/status", methods=["GET"], endpoint="sync_status")
    @jwt_required()
    def sync_status():
        sync = container.sync_service
        return jsonify(
            {
                "isSyncing": sync.is_syncing,
                "lastError": sync.last_error,
                "lastSyncedAt": sync.last_synced_at.isoformat() if sync.last_synced_at else None,
            }
        )

    @app.route("/api/migration", methods=["GET"], endpoint="migration_status")
    @jwt_required()
    def migration_status():
        user_id = current_user_id()
        migration = container.migration_service
        try:
            migrated = migration.is_migrated(user_id)
            remote = migration.remote_stats(user_id)
        except DomainError as e:
            return domain_error(e)
        return jsonify({"migrated": migrated, "state": migration.state.to_dict(), "remote": remote})

    @app.route("/api/migration", methods=["POST"], endpoint="migration_start")
    @jwt_required()
    def migration_start():
        user_id = current_user_id()
        migration = container.migration_service
        try:
            data = json_body()
            force = bool(data.get("force", False))
            if data.get("background"):
                started = migration.start(user_id, force=force)
                return jsonify({"started": started, "state": migration.state.to_dict()}), 202
            stats = migration.force_migrate(user_id) if force else migration.migrate(user_id)
        except DomainError as e:
            return domain_error(e)
        return jsonify(
            {
                "skipped": stats.skipped,
                "classes": stats.classes,
                "assignments": stats.assignments,
                "attendance": stats.attendance,
                "state": migration.state.to_dict(),
            }
        )
