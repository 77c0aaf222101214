from __future__ import annotations

from typing import Any, Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, dump_json, fetchone, load_json
from .repository import SettingsRepository


class MySQLSettingsRepository(SettingsRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, user_id: int, key: str) -> Optional[Any]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT setting_value FROM user_settings WHERE user_id=%s AND setting_key=%s",
                (int(user_id), key),
            )
            r = fetchone(cur)
            return load_json(r["setting_value"]) if r else None

    def put(self, user_id: int, key: str, value: Any) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO user_settings(user_id, setting_key, setting_value)
                VALUES(%s,%s,%s)
                ON DUPLICATE KEY UPDATE setting_value=VALUES(setting_value)
                """,
                (int(user_id), key, dump_json(value)),
            )
