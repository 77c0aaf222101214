from __future__ import annotations

import logging
from typing import Any, Optional, Protocol

from mysql.connector import Error as MySQLError

from ..core.exceptions import RemoteUnavailableError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, dump_json, fetchone, load_json

logger = logging.getLogger(__name__)

CLASSES = "classes"
ASSIGNMENTS = "assignments"
ATTENDANCE = "attendance"
LOCATIONS = "locations"
MIGRATIONS = "migrations"


class RemoteStore(Protocol):
    """Document store addressed by (collection, document id). Writes are upserts."""

    def get(self, collection: str, doc_id: str) -> Optional[dict]:
        raise NotImplementedError

    def set(self, collection: str, doc_id: str, data: dict) -> None:
        raise NotImplementedError

    def delete(self, collection: str, doc_id: str) -> bool:
        raise NotImplementedError

    def count_where(self, collection: str, field: str, value: Any) -> int:
        raise NotImplementedError


class MySQLDocumentStore(RemoteStore):
    """Remote mirror kept as JSON documents in a separate MySQL database.

    Driver errors are reported as RemoteUnavailableError so callers can keep
    the local write and retry later.
    """

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, collection: str, doc_id: str) -> Optional[dict]:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    "SELECT payload FROM remote_documents WHERE collection=%s AND doc_id=%s",
                    (collection, str(doc_id)),
                )
                r = fetchone(cur)
                return load_json(r["payload"]) if r else None
        except MySQLError as e:
            raise RemoteUnavailableError(f"Remote read {collection}/{doc_id} failed: {e}") from e

    def set(self, collection: str, doc_id: str, data: dict) -> None:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO remote_documents(collection, doc_id, payload)
                    VALUES(%s,%s,%s)
                    ON DUPLICATE KEY UPDATE payload=VALUES(payload)
                    """,
                    (collection, str(doc_id), dump_json(data)),
                )
        except MySQLError as e:
            raise RemoteUnavailableError(f"Remote write {collection}/{doc_id} failed: {e}") from e

    def delete(self, collection: str, doc_id: str) -> bool:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    "DELETE FROM remote_documents WHERE collection=%s AND doc_id=%s",
                    (collection, str(doc_id)),
                )
                return cur.rowcount > 0
        except MySQLError as e:
            raise RemoteUnavailableError(f"Remote delete {collection}/{doc_id} failed: {e}") from e

    def count_where(self, collection: str, field: str, value: Any) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    SELECT COUNT(*) AS total FROM remote_documents
                    WHERE collection=%s AND JSON_UNQUOTE(JSON_EXTRACT(payload, %s))=%s
                    """,
                    (collection, f"$.{field}", str(value)),
                )
                r = fetchone(cur)
                return int(r["total"]) if r else 0
        except MySQLError as e:
            raise RemoteUnavailableError(f"Remote count on {collection} failed: {e}") from e
