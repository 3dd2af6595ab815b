from __future__ import annotations

from typing import List, Optional

from flask import Flask, current_app, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..common.responses import require_bearer
from ..core.exceptions import ValidationError
from ..container import Container
from .model import DateRange


def _parse_id(value: str, field_name: str) -> int:
    if not value.isdigit():
        raise ValidationError(f"{field_name} must be an integer")
    return int(value)


def register(app: Flask, container: Container) -> None:
    @app.route("/api/reports/summary", methods=["GET"], endpoint="reports_summary")
    def reports_summary():
        """Per-employee period summary plus the daily rows behind it.

        `branch_id` may be repeated to scope the report to several branches.
        """
        require_bearer(current_app.config.get("API_SECRET"))

        start = parse_iso_date(request.args.get("start", ""))
        end = parse_iso_date(request.args.get("end", ""))
        employee_id: Optional[int] = None
        if request.args.get("employee_id") is not None:
            employee_id = _parse_id(request.args["employee_id"], "employee_id")
        branch_ids: List[int] = [_parse_id(v, "branch_id") for v in request.args.getlist("branch_id")]

        report = container.payroll_report_service.build_period_report(
            DateRange(start=start, end=end),
            employee_id=employee_id,
            branch_ids=branch_ids or None,
        )
        return jsonify(report.to_dict()), 200
