from __future__ import annotations

import io

import qrcode
from flask import Flask, request, send_file

from ..common.datetime_utils import combine_date_time
from ..common.responses import domain_error, ok, server_error
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, DomainError
from ..container import Container


def _truthy(value) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return bool(value)


def register(app: Flask, container: Container) -> None:
    @app.route("/events", methods=["GET"], endpoint="list_events")
    def list_events():
        try:
            container.auth_service.require_session()
            events = container.event_service.list_events()
            return ok({"events": [e.to_dict() for e in events]})
        except DomainError as e:
            return domain_error(e)

    @app.route("/events/upcoming", methods=["GET"], endpoint="upcoming_events")
    def upcoming_events():
        try:
            container.auth_service.require_session()
            events = container.event_service.list_upcoming()
            return ok({"events": [e.to_dict() for e in events]})
        except DomainError as e:
            return domain_error(e)

    @app.route("/faculty/events", methods=["GET"], endpoint="faculty_events")
    def faculty_events():
        try:
            user = container.auth_service.require_session(Role.FACULTY)
            events = container.event_service.list_for_faculty(user.user_id)
            return ok({"events": [e.to_dict(include_qr=True) for e in events]})
        except DomainError as e:
            return domain_error(e)

    @app.route("/events", methods=["POST"], endpoint="create_event")
    def create_event():
        data = request.get_json(silent=True) or {}
        try:
            user = container.auth_service.require_session(Role.FACULTY)
            # The form sends date and time separately; API clients may send one ISO "start_time".
            start_time = data.get("start_time")
            if not start_time and data.get("date"):
                start_time = combine_date_time(data.get("date", ""), data.get("time", ""))

            event = container.event_service.create_event(
                current_role=user.role,
                created_by=user.user_id,
                title=data.get("title", ""),
                description=data.get("description", ""),
                start_time=start_time or "",
                venue=data.get("venue", ""),
                is_required=_truthy(data.get("is_required", False)),
                penalty_amount=data.get("penalty_amount", 0),
            )
            return ok({"event": event.to_dict(include_qr=True)}, 201)
        except DomainError as e:
            return domain_error(e)
        except Exception:
            return server_error("creating the event")

    @app.route("/events/<event_id>/finalize", methods=["POST"], endpoint="finalize_event")
    def finalize_event(event_id: str):
        try:
            user = container.auth_service.require_session(Role.FACULTY)
            created = container.event_service.finalize(event_id, current_role=user.role, user_id=user.user_id)
            event = container.event_service.get_event(event_id)
            return ok({"event": event.to_dict(), "absences_created": created})
        except DomainError as e:
            return domain_error(e)
        except Exception:
            return server_error("finalizing the event")

    @app.route("/events/<event_id>/qr.png", methods=["GET"], endpoint="event_qr")
    def event_qr(event_id: str):
        try:
            user = container.auth_service.require_session(Role.FACULTY)
            event = container.event_service.get_event(event_id)
            if event.created_by != user.user_id:
                raise AuthorizationError("Only the event owner can display its QR code")
        except DomainError as e:
            return domain_error(e)

        img = qrcode.make(event.qr_code_data)
        buf = io.BytesIO()
        img.save(buf, format="PNG")
        buf.seek(0)
        return send_file(buf, mimetype="image/png", download_name=f"event-{event_id}.png")
