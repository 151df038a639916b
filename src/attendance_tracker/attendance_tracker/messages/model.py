from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from ..core.enums import MessageKind


@dataclass(frozen=True)
class Message:
    """One delivered message; broadcasts are stored once per recipient."""

    message_id: int
    sender_id: str
    sender_name: str
    recipient_id: str
    recipient_name: str
    content: str
    kind: MessageKind
    sent_at: datetime
    is_read: bool = False


@dataclass(frozen=True)
class Recipient:
    employee_id: str
    name: str
