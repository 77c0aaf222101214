from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import DayOfWeek, parse_enum
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_time
from .model import ClassSession
from .repository import ClassRepository

_COLUMNS = "class_id, user_id, title, day_of_week, start_time, end_time, location, notes, is_recurring, created_at"


def _to_session(r: dict) -> ClassSession:
    return ClassSession(
        class_id=r["class_id"],
        user_id=int(r["user_id"]) if r.get("user_id") is not None else None,
        title=r["title"],
        day_of_week=parse_enum(DayOfWeek, r["day_of_week"], "day_of_week"),
        start_time=normalize_mysql_time(r["start_time"]),
        end_time=normalize_mysql_time(r["end_time"]),
        location=r.get("location"),
        notes=r.get("notes"),
        is_recurring=bool(r.get("is_recurring", True)),
        created_at=r.get("created_at"),
    )


class MySQLClassRepository(ClassRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_user(self, user_id: int) -> Sequence[ClassSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM class_sessions WHERE user_id=%s ORDER BY seq",
                (int(user_id),),
            )
            return [_to_session(r) for r in fetchall(cur)]

    def get_by_id(self, class_id: str) -> Optional[ClassSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM class_sessions WHERE class_id=%s", (class_id,))
            r = fetchone(cur)
            return _to_session(r) if r else None

    def create(self, session: ClassSession) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO class_sessions(class_id, user_id, title, day_of_week, start_time, end_time,
                                           location, notes, is_recurring, created_at)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    session.class_id,
                    session.user_id,
                    session.title,
                    session.day_of_week.value,
                    session.start_time,
                    session.end_time,
                    session.location,
                    session.notes,
                    int(session.is_recurring),
                    session.created_at,
                ),
            )

    def update(self, session: ClassSession) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE class_sessions
                SET title=%s, day_of_week=%s, start_time=%s, end_time=%s, location=%s, notes=%s, is_recurring=%s
                WHERE class_id=%s
                """,
                (
                    session.title,
                    session.day_of_week.value,
                    session.start_time,
                    session.end_time,
                    session.location,
                    session.notes,
                    int(session.is_recurring),
                    session.class_id,
                ),
            )
            return cur.rowcount > 0

    def delete(self, class_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM class_sessions WHERE class_id=%s", (class_id,))
            return cur.rowcount > 0

    def list_for_migration(self, user_id: int) -> Sequence[ClassSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM class_sessions WHERE user_id=%s OR user_id IS NULL ORDER BY seq",
                (int(user_id),),
            )
            return [_to_session(r) for r in fetchall(cur)]

    def backfill_owner(self, user_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE class_sessions SET user_id=%s WHERE user_id IS NULL", (int(user_id),))
            return cur.rowcount
