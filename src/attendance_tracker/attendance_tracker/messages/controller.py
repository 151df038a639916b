from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.web import admin_required, current_employee_id, current_role, login_required, store_failure
from ..core.exceptions import AuthorizationError, StoreError, ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/admin/messages", methods=["POST"], endpoint="message_send")
    @admin_required
    def message_send():
        data = request.get_json(silent=True) or request.form.to_dict()
        try:
            sent = container.message_service.send(
                current_role=current_role(),
                sender_id=current_employee_id(),
                content=data.get("content") or "",
                recipient_id=data.get("recipient_id") or None,
            )
        except AuthorizationError as e:
            return jsonify({"success": False, "message": str(e)}), 403
        except ValidationError as e:
            return jsonify({"success": False, "message": str(e)}), 400
        except StoreError as e:
            return store_failure("send message", e)

        return jsonify({"success": True, "sent": sent}), 201

    @app.route("/admin/messages", methods=["GET"], endpoint="message_sent")
    @admin_required
    def message_sent():
        try:
            rows = container.message_service.sent(current_role=current_role())
        except StoreError as e:
            return store_failure("load messages", e)
        return jsonify({"messages": [container.message_service.to_ui(m) for m in rows]})

    @app.route("/messages", methods=["GET"], endpoint="message_inbox")
    @login_required
    def message_inbox():
        employee_id = current_employee_id()
        try:
            rows = container.message_service.inbox(employee_id=employee_id)
            unread = container.message_service.unread_count(employee_id=employee_id)
        except StoreError as e:
            return store_failure("load messages", e)
        return jsonify({
            "messages": [container.message_service.to_ui(m) for m in rows],
            "unread": unread,
        })

    @app.route("/messages/<int:message_id>/read", methods=["POST"], endpoint="message_read")
    @login_required
    def message_read(message_id: int):
        try:
            container.message_service.mark_read(employee_id=current_employee_id(), message_id=message_id)
        except ValidationError as e:
            return jsonify({"success": False, "message": str(e)}), 404
        except StoreError as e:
            return store_failure("update message", e)
        return jsonify({"success": True})
