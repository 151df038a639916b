from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.validators import require_non_empty
from ..core.constants import DEFAULT_MESSAGE_LIST_LIMIT
from ..core.enums import MessageKind, Role
from ..core.exceptions import AuthorizationError, ValidationError
from ..employees.repository import EmployeeRepository
from .model import Message, Recipient
from .repository import MessageRepository

logger = logging.getLogger(__name__)

BROADCAST = "all"


class MessageService:
    """Admin-to-employee messaging.

    A broadcast fans out to every active employee except the sender, so each
    recipient keeps their own read flag.
    """

    def __init__(
        self,
        messages: MessageRepository,
        employees: EmployeeRepository,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._messages = messages
        self._employees = employees
        self._clock = clock

    def send(
        self,
        *,
        current_role: Role,
        sender_id: str,
        content: str,
        recipient_id: Optional[str] = None,
    ) -> int:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only admins can send messages")

        content = require_non_empty(content, "Message")
        sender = self._employees.get_by_id(str(sender_id))
        sender_name = sender.name if sender else "Admin"

        if not recipient_id or recipient_id == BROADCAST:
            kind = MessageKind.BROADCAST
            recipients = [
                Recipient(employee_id=e.employee_id, name=e.name)
                for e in self._employees.list_active()
                if e.employee_id != str(sender_id)
            ]
        else:
            kind = MessageKind.DIRECT
            employee = self._employees.get_by_id(str(recipient_id))
            if employee is None or not employee.is_active:
                raise ValidationError("Recipient not found")
            recipients = [Recipient(employee_id=employee.employee_id, name=employee.name)]

        sent = self._messages.create_many(
            sender_id=str(sender_id),
            sender_name=sender_name,
            recipients=recipients,
            content=content,
            kind=kind,
            sent_at=self._clock(),
        )
        logger.info("Sent %s message to %d recipient(s)", kind.value, sent, extra={"employee_id": str(sender_id)})
        return sent

    def inbox(self, *, employee_id: str) -> Sequence[Message]:
        return self._messages.list_for_recipient(recipient_id=str(employee_id), limit=DEFAULT_MESSAGE_LIST_LIMIT)

    def unread_count(self, *, employee_id: str) -> int:
        return self._messages.count_unread(recipient_id=str(employee_id))

    def sent(self, *, current_role: Role) -> Sequence[Message]:
        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission")
        return self._messages.list_sent(limit=DEFAULT_MESSAGE_LIST_LIMIT)

    def mark_read(self, *, employee_id: str, message_id: int) -> None:
        if not self._messages.mark_read(message_id=int(message_id), recipient_id=str(employee_id)):
            raise ValidationError("Message not found")

    @staticmethod
    def to_ui(msg: Message) -> dict:
        return {
            "message_id": msg.message_id,
            "from": msg.sender_name,
            "to": "All Employees" if msg.kind == MessageKind.BROADCAST else msg.recipient_name,
            "recipient_id": msg.recipient_id,
            "content": msg.content,
            "type": msg.kind.value,
            "sent_at": msg.sent_at.strftime("%Y-%m-%d %H:%M"),
            "is_read": msg.is_read,
        }
