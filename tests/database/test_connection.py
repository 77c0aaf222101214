from __future__ import annotations

import mysql.connector
from mysql.connector.constants import ClientFlag

from yooh.database.connection import DBConfig, DatabaseConnection


def test_connections_report_matched_rows(monkeypatch):
    captured = {}

    def fake_connect(**kwargs):
        captured.update(kwargs)
        return object()

    monkeypatch.setattr(mysql.connector, "connect", fake_connect)

    DatabaseConnection(DBConfig.from_dict({"database": "yooh_test"})).connect()

    assert captured["database"] == "yooh_test"
    assert ClientFlag.FOUND_ROWS in captured["client_flags"]
