from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from mysql.connector.errors import IntegrityError

from ..core.enums import AttendanceStatus, parse_enum
from ..core.exceptions import AlreadySignedError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key
from .model import AttendanceRecord
from .repository import AttendanceRepository

_COLUMNS = "record_id, user_id, class_id, signed_at, status, latitude, longitude"


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        record_id=r["record_id"],
        user_id=int(r["user_id"]) if r.get("user_id") is not None else None,
        timestamp=r["signed_at"],
        status=parse_enum(AttendanceStatus, r["status"], "status"),
        latitude=float(r["latitude"]),
        longitude=float(r["longitude"]),
        class_id=r.get("class_id"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def exists_for(self, *, user_id: int, class_id: Optional[str], sign_date: date) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT 1 AS found
                FROM attendance_records
                WHERE user_id=%s AND class_key=%s AND sign_date=%s
                LIMIT 1
                """,
                (int(user_id), class_id or "", sign_date),
            )
            return fetchone(cur) is not None

    def create(self, record: AttendanceRecord) -> None:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO attendance_records(record_id, user_id, class_id, class_key, sign_date,
                                                   signed_at, status, latitude, longitude)
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        record.record_id,
                        record.user_id,
                        record.class_id,
                        record.class_id or "",
                        record.sign_date,
                        record.timestamp,
                        record.status.value,
                        record.latitude,
                        record.longitude,
                    ),
                )
        except IntegrityError as e:
            if is_duplicate_key(e):
                raise AlreadySignedError("Attendance already signed for this class today") from e
            raise

    def list_for_user(self, user_id: int, *, limit: Optional[int] = None) -> Sequence[AttendanceRecord]:
        sql = f"SELECT {_COLUMNS} FROM attendance_records WHERE user_id=%s ORDER BY signed_at DESC"
        params: list[object] = [int(user_id)]
        if limit is not None:
            sql += " LIMIT %s"
            params.append(int(limit))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [_to_record(r) for r in fetchall(cur)]

    def clear_for_user(self, user_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM attendance_records WHERE user_id=%s", (int(user_id),))
            return cur.rowcount

    def list_for_migration(self, user_id: int) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_records WHERE user_id=%s OR user_id IS NULL ORDER BY signed_at",
                (int(user_id),),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def backfill_owner(self, user_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE attendance_records SET user_id=%s WHERE user_id IS NULL", (int(user_id),))
            return cur.rowcount
