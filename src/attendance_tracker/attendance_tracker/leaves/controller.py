from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..common.web import admin_required, current_employee_id, current_role, login_required, store_failure
from ..core.exceptions import AuthorizationError, StoreError, ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    def _payload() -> dict:
        return request.get_json(silent=True) or request.form.to_dict()

    @app.route("/leaves", methods=["POST"], endpoint="leave_submit")
    @login_required
    def leave_submit():
        data = _payload()
        try:
            try:
                start = parse_iso_date(data.get("start_date") or "")
                end = parse_iso_date(data.get("end_date") or "")
            except ValueError as e:
                raise ValidationError("Dates must use YYYY-MM-DD") from e

            request_id = container.leave_service.submit(
                current_role=current_role(),
                employee_id=current_employee_id(),
                start_date=start,
                end_date=end,
                reason=data.get("reason") or "",
                description=data.get("description") or "",
            )
        except AuthorizationError as e:
            return jsonify({"success": False, "message": str(e)}), 403
        except ValidationError as e:
            return jsonify({"success": False, "message": str(e)}), 400
        except StoreError as e:
            return store_failure("submit leave request", e)

        return jsonify({"success": True, "request_id": request_id}), 201

    @app.route("/leaves/mine", methods=["GET"], endpoint="leave_history")
    @login_required
    def leave_history():
        try:
            rows = container.leave_service.list_mine(employee_id=current_employee_id())
        except StoreError as e:
            return store_failure("load leave requests", e)
        return jsonify({"requests": [container.leave_service.to_ui(r) for r in rows]})

    @app.route("/admin/leaves", methods=["GET"], endpoint="admin_leaves")
    @admin_required
    def admin_leaves():
        try:
            rows = container.leave_service.list_pending()
        except StoreError as e:
            return store_failure("load leave requests", e)
        return jsonify({"requests": [container.leave_service.to_ui(r) for r in rows]})

    @app.route("/admin/leaves/<int:request_id>/<action>", methods=["POST"], endpoint="admin_leave_decide")
    @admin_required
    def admin_leave_decide(request_id: int, action: str):
        decide = {
            "approve": container.leave_service.approve,
            "reject": container.leave_service.reject,
        }.get(action)
        if decide is None:
            return jsonify({"success": False, "message": f"Unknown action: {action}"}), 404

        try:
            decide(
                current_role=current_role(),
                admin_id=current_employee_id(),
                request_id=request_id,
                admin_note=_payload().get("admin_note") or "",
            )
        except (ValidationError, AuthorizationError) as e:
            return jsonify({"success": False, "message": str(e)}), 400
        except StoreError as e:
            return store_failure("update leave request", e)

        return jsonify({"success": True})
