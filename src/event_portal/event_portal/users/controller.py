from __future__ import annotations

from flask import Flask, request

from ..common.responses import domain_error, ok, server_error
from ..core.exceptions import DomainError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/auth/login", methods=["POST"], endpoint="login")
    def login():
        data = request.get_json(silent=True) or {}
        try:
            user = container.auth_service.authenticate(
                data.get("email", ""),
                data.get("role", ""),
                data.get("password"),
            )
            return ok({"user": user.to_public_dict()})
        except DomainError as e:
            return domain_error(e)
        except Exception:
            return server_error("logging in")

    @app.route("/auth/signup", methods=["POST"], endpoint="signup")
    def signup():
        data = request.get_json(silent=True) or {}
        try:
            user = container.auth_service.register(
                name=data.get("name", ""),
                email=data.get("email", ""),
                role=data.get("role", ""),
                identifier=data.get("identifier", ""),
                details=data.get("details", ""),
                password=data.get("password"),
            )
            return ok({"user": user.to_public_dict()}, 201)
        except DomainError as e:
            return domain_error(e)
        except Exception:
            return server_error("creating the account")

    @app.route("/auth/logout", methods=["POST"], endpoint="logout")
    def logout():
        container.auth_service.end_session()
        return ok({"message": "Logged out"})

    @app.route("/auth/me", methods=["GET"], endpoint="me")
    def me():
        try:
            user = container.auth_service.require_session()
            return ok({"user": user.to_public_dict()})
        except DomainError as e:
            return domain_error(e)
