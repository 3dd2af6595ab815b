from __future__ import annotations

import re

from flask import Flask, current_app, jsonify, request
from flask_limiter import Limiter

from ..branches.model import Coordinate
from ..common.rate_limit import validate_limit
from ..common.responses import require_bearer
from ..core.enums import AttendanceAction
from ..core.exceptions import EmployeeNotFoundError, ValidationError
from ..container import Container

PHONE_RE = re.compile(r"^\+[1-9]\d{1,14}$")


def _parse_phone(value) -> str:
    if not isinstance(value, str) or not PHONE_RE.match(value):
        raise ValidationError("phone must be in E.164 format, e.g. +5215512345678")
    return value


def _parse_action(value):
    if value in (None, ""):
        return None
    try:
        return AttendanceAction(value)
    except ValueError as exc:
        raise ValidationError("action must be 'check_in' or 'check_out'") from exc


def register(app: Flask, container: Container, *, limiter: Limiter) -> None:
    @app.route("/api/attendance/validate", methods=["POST"], endpoint="attendance_validate")
    @limiter.limit(validate_limit)
    def attendance_validate():
        """Geofenced check-in/out for a phone-identified employee."""
        require_bearer(current_app.config.get("API_SECRET"))

        data = request.get_json(silent=True) or {}
        phone = _parse_phone(data.get("phone"))
        coordinate = Coordinate(latitude=data.get("latitude"), longitude=data.get("longitude"))
        action = _parse_action(data.get("action"))

        service = container.attendance_service
        employee = service.get_employee_by_phone(phone)
        result = service.register(employee.employee_id, coordinate, action=action)

        session = result.session
        body = {
            "valid": True,
            "action": result.action.value,
            "session_id": session.session_id,
            "branch_id": result.branch.branch_id,
            "branch_name": result.branch.name,
            "distance_meters": round(result.distance_meters, 1),
        }
        if result.action == AttendanceAction.CHECK_IN:
            body["time"] = session.check_in.isoformat()
            body["is_late"] = session.is_late
            body["message"] = (
                f"Check-in registered at {result.branch.name} at {session.check_in.local.strftime('%H:%M')}"
            )
        else:
            hours = result.hours_worked
            body["time"] = session.check_out.isoformat()
            body["hours_worked"] = round(hours, 2)
            body["message"] = f"Check-out registered at {result.branch.name}. You worked {hours:.2f} hours."
        return jsonify(body), 200

    @app.route("/api/attendance/last-action", methods=["GET"], endpoint="attendance_last_action")
    def attendance_last_action():
        require_bearer(current_app.config.get("API_SECRET"))

        phone = request.args.get("phone")
        if not phone:
            raise ValidationError("phone is required")

        try:
            employee = container.attendance_service.get_employee_by_phone(phone)
        except EmployeeNotFoundError:
            return jsonify({"has_active_checkin": False, "active_record": None}), 200

        active = container.attendance_service.get_active_session(employee.employee_id)
        record = None
        if active is not None:
            record = {
                "session_id": active.session_id,
                "branch_id": active.branch_id,
                "check_in_time": active.check_in.isoformat(),
            }
        return jsonify({"has_active_checkin": active is not None, "active_record": record}), 200

    @app.route("/api/cron/auto-checkout", methods=["GET", "POST"], endpoint="cron_auto_checkout")
    def cron_auto_checkout():
        require_bearer(current_app.config.get("CRON_SECRET"))
        result = container.auto_close_service.run()
        return jsonify({"success": True, **result.as_dict()}), 200
