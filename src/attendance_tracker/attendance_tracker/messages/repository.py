from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import MessageKind
from .model import Message, Recipient


class MessageRepository(Protocol):
    def create_many(
        self,
        *,
        sender_id: str,
        sender_name: str,
        recipients: Sequence[Recipient],
        content: str,
        kind: MessageKind,
        sent_at: datetime,
    ) -> int:
        """Store one row per recipient; returns the number of rows written."""

        raise NotImplementedError

    def get(self, *, message_id: int) -> Optional[Message]:
        raise NotImplementedError

    def list_for_recipient(self, *, recipient_id: str, limit: int = 200) -> Sequence[Message]:
        raise NotImplementedError

    def list_sent(self, *, limit: int = 200) -> Sequence[Message]:
        raise NotImplementedError

    def count_unread(self, *, recipient_id: str) -> int:
        raise NotImplementedError

    def mark_read(self, *, message_id: int, recipient_id: str) -> bool:
        """False when the message does not exist for that recipient."""

        raise NotImplementedError
