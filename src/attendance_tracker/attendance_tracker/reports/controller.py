from __future__ import annotations

from flask import Flask, jsonify

from ..common.web import admin_required, period_from_args, store_failure
from ..core.exceptions import StoreError, ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/admin/attendance/report", methods=["GET"], endpoint="admin_attendance_report")
    @admin_required
    def admin_attendance_report():
        try:
            month, year = period_from_args(container.clock())
            rows = container.report_service.monthly_report_ui(month=month, year=year)
        except ValidationError as e:
            return jsonify({"success": False, "message": str(e)}), 400
        except StoreError as e:
            return store_failure("build attendance report", e)

        return jsonify({"month": month, "year": year, "rows": rows})
