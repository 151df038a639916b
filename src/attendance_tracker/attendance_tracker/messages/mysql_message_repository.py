from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional, Sequence

from ..core.enums import MessageKind
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, store_errors
from .model import Message, Recipient
from .repository import MessageRepository

_COLUMNS = """
    message_id, sender_id, sender_name, recipient_id, recipient_name, content,
    kind, sent_at, is_read
"""


def _row_to_message(r: Dict[str, Any]) -> Message:
    return Message(
        message_id=int(r["message_id"]),
        sender_id=str(r["sender_id"]),
        sender_name=r["sender_name"],
        recipient_id=str(r["recipient_id"]),
        recipient_name=r.get("recipient_name") or "",
        content=r["content"],
        kind=MessageKind(r["kind"]),
        sent_at=r["sent_at"],
        is_read=bool(r.get("is_read", 0)),
    )


class MySQLMessageRepository(MessageRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

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
        rows = [
            (str(sender_id), sender_name, r.employee_id, r.name, content, kind.value, sent_at)
            for r in recipients
        ]
        if not rows:
            return 0

        with store_errors("send message", write=True), db_cursor(self._conn_factory) as (_, cur):
            cur.executemany(
                """
                INSERT INTO messages(sender_id, sender_name, recipient_id, recipient_name, content, kind, sent_at)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                rows,
            )
        return len(rows)

    def get(self, *, message_id: int) -> Optional[Message]:
        with store_errors("load message"), db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM messages WHERE message_id=%s", (int(message_id),))
            r = fetchone(cur)
            return _row_to_message(r) if r else None

    def list_for_recipient(self, *, recipient_id: str, limit: int = 200) -> Sequence[Message]:
        with store_errors("load inbox"), db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM messages
                WHERE recipient_id=%s
                ORDER BY sent_at DESC, message_id DESC
                LIMIT %s
                """,
                (str(recipient_id), int(limit)),
            )
            return [_row_to_message(r) for r in fetchall(cur)]

    def list_sent(self, *, limit: int = 200) -> Sequence[Message]:
        with store_errors("list sent messages"), db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM messages
                ORDER BY sent_at DESC, message_id DESC
                LIMIT %s
                """,
                (int(limit),),
            )
            return [_row_to_message(r) for r in fetchall(cur)]

    def count_unread(self, *, recipient_id: str) -> int:
        with store_errors("count unread messages"), db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT COUNT(*) AS unread FROM messages WHERE recipient_id=%s AND is_read=0",
                (str(recipient_id),),
            )
            r = fetchone(cur)
            return int(r["unread"]) if r else 0

    def mark_read(self, *, message_id: int, recipient_id: str) -> bool:
        with store_errors("mark message read", write=True), db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT message_id FROM messages WHERE message_id=%s AND recipient_id=%s",
                (int(message_id), str(recipient_id)),
            )
            if fetchone(cur) is None:
                return False
            cur.execute("UPDATE messages SET is_read=1 WHERE message_id=%s", (int(message_id),))
            return True
