from __future__ import annotations

import importlib
from pathlib import Path

from dotenv import load_dotenv

from yooh.config import get_settings_module
from yooh.database.bootstrap import apply_schema, list_tables

DATABASE_DIR = Path(__file__).resolve().parents[1] / "database"


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())

    for db_config, schema in (
        (dict(settings.DB_CONFIG), "schema.sql"),
        (dict(settings.REMOTE_DB_CONFIG), "remote_schema.sql"),
    ):
        apply_schema(db_config, schema_path=DATABASE_DIR / schema)
        tables = list_tables(db_config)
        print(
            f"OK: Applied {schema} -> "
            f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')} "
            f"(tables={len(tables)})"
        )


if __name__ == "__main__":
    main()
