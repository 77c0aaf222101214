from __future__ import annotations

from typing import Sequence

from ..core.enums import ReminderCategory, parse_enum
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import ScheduledNotification
from .repository import NotificationCenter


class MySQLNotificationCenter(NotificationCenter):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def pending(self, user_id: int) -> Sequence[ScheduledNotification]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT user_id, identifier, category, fire_at, title, body
                FROM scheduled_notifications
                WHERE user_id=%s
                ORDER BY fire_at ASC, identifier ASC
                """,
                (int(user_id),),
            )
            rows = fetchall(cur)
            return [
                ScheduledNotification(
                    user_id=int(r["user_id"]),
                    identifier=r["identifier"],
                    category=parse_enum(ReminderCategory, r["category"], "category"),
                    fire_at=r["fire_at"],
                    title=r["title"],
                    body=r["body"],
                )
                for r in rows
            ]

    def add(self, notification: ScheduledNotification) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO scheduled_notifications(user_id, identifier, category, fire_at, title, body)
                VALUES(%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    category=VALUES(category), fire_at=VALUES(fire_at),
                    title=VALUES(title), body=VALUES(body)
                """,
                (
                    notification.user_id,
                    notification.identifier,
                    notification.category.value,
                    notification.fire_at,
                    notification.title,
                    notification.body,
                ),
            )

    def remove_category(self, user_id: int, category: ReminderCategory) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM scheduled_notifications WHERE user_id=%s AND category=%s",
                (int(user_id), category.value),
            )
            return int(cur.rowcount or 0)
