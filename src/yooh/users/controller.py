from __future__ import annotations

from flask import Flask, jsonify
from flask_jwt_extended import create_access_token, jwt_required

from ..common.http import current_user_id, domain_error, json_body
from ..container import Container
from ..core.exceptions import DomainError


def register(app: Flask, container: Container) -> None:
    @app.route("/api/auth/register", methods=["POST"], endpoint="auth_register")
    def auth_register():
        try:
            data = json_body()
            user = container.auth_service.register(
                first_name=data.get("firstName", ""),
                last_name=data.get("lastName", ""),
                email=data.get("email", ""),
                password=data.get("password", ""),
                role=data.get("role", "student"),
            )
            return jsonify(user.to_public_dict()), 201
        except DomainError as e:
            return domain_error(e)

    @app.route("/api/auth/login", methods=["POST"], endpoint="auth_login")
    def auth_login():
        try:
            data = json_body()
            user = container.auth_service.authenticate(data.get("email", ""), data.get("password", ""))
        except DomainError as e:
            return domain_error(e)
        token = create_access_token(identity=str(user.user_id), additional_claims={"role": user.role.value})
        return jsonify({"token": token})

    @app.route("/api/auth/me", methods=["GET"], endpoint="auth_me")
    @jwt_required()
    def auth_me():
        try:
            return jsonify(container.auth_service.me(current_user_id()).to_public_dict())
        except DomainError as e:
            return domain_error(e)
