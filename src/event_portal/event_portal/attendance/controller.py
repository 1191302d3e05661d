from __future__ import annotations

from flask import Flask, request

from ..common.responses import domain_error, ok, server_error
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, DomainError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/checkin", methods=["POST"], endpoint="checkin")
    def checkin():
        """QR check-in: the body carries the scanned token, the student comes from the session."""
        data = request.get_json(silent=True) or {}
        try:
            user = container.auth_service.require_session(Role.STUDENT)
            record = container.attendance_service.check_in_with_token(
                data.get("qr_code", ""), user.user_id, current_role=user.role
            )
            return ok({"record": record.to_dict(), "message": "Attendance recorded"})
        except DomainError as e:
            return domain_error(e)
        except Exception:
            return server_error("recording attendance")

    @app.route("/me/attendance", methods=["GET"], endpoint="my_attendance")
    def my_attendance():
        try:
            user = container.auth_service.require_session(Role.STUDENT)
            records = container.attendance_service.records_for_student(user.user_id)
            return ok({"records": [r.to_dict() for r in records]})
        except DomainError as e:
            return domain_error(e)

    @app.route("/me/fines", methods=["GET"], endpoint="my_fines")
    def my_fines():
        try:
            user = container.auth_service.require_session(Role.STUDENT)
            fines = container.attendance_service.outstanding_fines(user.user_id)
            return ok(
                {
                    "fines": [
                        {"record": f.record.to_dict(), "event": f.event.to_dict(), "amount": f"{f.amount:.2f}"}
                        for f in fines
                    ]
                }
            )
        except DomainError as e:
            return domain_error(e)

    @app.route("/me/summary", methods=["GET"], endpoint="my_summary")
    def my_summary():
        try:
            user = container.auth_service.require_session(Role.STUDENT)
            s = container.attendance_service.attendance_summary(user.user_id)
            return ok(
                {
                    "present": s.present,
                    "absent": s.absent,
                    "pending": s.pending,
                    "outstanding_total": f"{s.outstanding_total:.2f}",
                }
            )
        except DomainError as e:
            return domain_error(e)

    @app.route("/events/<event_id>/attendance", methods=["GET"], endpoint="event_attendance")
    def event_attendance(event_id: str):
        try:
            user = container.auth_service.require_session(Role.FACULTY)
            event = container.event_service.get_event(event_id)
            if event.created_by != user.user_id:
                raise AuthorizationError("Only the event owner can view its attendance")
            rows = container.attendance_service.records_for_event(event_id)
            return ok({"attendance": [{"record": r.record.to_dict(), "student_name": r.student_name} for r in rows]})
        except DomainError as e:
            return domain_error(e)

    @app.route("/fines/<record_id>/pay", methods=["POST"], endpoint="pay_fine")
    def pay_fine(record_id: str):
        try:
            user = container.auth_service.require_session()
            record = container.attendance_service.settle_fine(record_id, current_role=user.role, user_id=user.user_id)
            return ok({"record": record.to_dict()})
        except DomainError as e:
            return domain_error(e)
        except Exception:
            return server_error("settling the fine")
