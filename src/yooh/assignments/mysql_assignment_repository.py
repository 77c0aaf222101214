from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import Priority, parse_enum
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Assignment
from .repository import AssignmentRepository

_COLUMNS = "assignment_id, user_id, title, due_at, is_completed, priority, details, class_id, created_at"


def _to_assignment(r: dict) -> Assignment:
    return Assignment(
        assignment_id=r["assignment_id"],
        user_id=int(r["user_id"]) if r.get("user_id") is not None else None,
        title=r["title"],
        due_at=r["due_at"],
        is_completed=bool(r.get("is_completed")),
        priority=parse_enum(Priority, r["priority"], "priority"),
        details=r.get("details"),
        class_id=r.get("class_id"),
        created_at=r.get("created_at"),
    )


class MySQLAssignmentRepository(AssignmentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_user(self, user_id: int) -> Sequence[Assignment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM assignments WHERE user_id=%s ORDER BY due_at ASC",
                (int(user_id),),
            )
            return [_to_assignment(r) for r in fetchall(cur)]

    def get_by_id(self, assignment_id: str) -> Optional[Assignment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM assignments WHERE assignment_id=%s", (assignment_id,))
            r = fetchone(cur)
            return _to_assignment(r) if r else None

    def create(self, assignment: Assignment) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO assignments(assignment_id, user_id, title, due_at, is_completed, priority,
                                        details, class_id, created_at)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    assignment.assignment_id,
                    assignment.user_id,
                    assignment.title,
                    assignment.due_at,
                    int(assignment.is_completed),
                    assignment.priority.value,
                    assignment.details,
                    assignment.class_id,
                    assignment.created_at,
                ),
            )

    def update(self, assignment: Assignment) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE assignments
                SET title=%s, due_at=%s, is_completed=%s, priority=%s, details=%s, class_id=%s
                WHERE assignment_id=%s
                """,
                (
                    assignment.title,
                    assignment.due_at,
                    int(assignment.is_completed),
                    assignment.priority.value,
                    assignment.details,
                    assignment.class_id,
                    assignment.assignment_id,
                ),
            )
            return cur.rowcount > 0

    def delete(self, assignment_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM assignments WHERE assignment_id=%s", (assignment_id,))
            return cur.rowcount > 0

    def list_for_migration(self, user_id: int) -> Sequence[Assignment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM assignments WHERE user_id=%s OR user_id IS NULL ORDER BY created_at",
                (int(user_id),),
            )
            return [_to_assignment(r) for r in fetchall(cur)]

    def backfill_owner(self, user_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE assignments SET user_id=%s WHERE user_id IS NULL", (int(user_id),))
            return cur.rowcount
