import os
from datetime import timedelta


def _db_config(prefix: str, default_name: str) -> dict:
    return {
        "host": os.getenv(f"{prefix}_HOST", "localhost"),
        "port": int(os.getenv(f"{prefix}_PORT", "3306")),
        "user": os.getenv(f"{prefix}_USER", "root"),
        "password": os.getenv(f"{prefix}_PASSWORD", ""),
        "database": os.getenv(f"{prefix}_NAME", default_name),
    }


def _optional_int(name: str):
    raw = os.getenv(name)
    return int(raw) if raw not in (None, "") else None


DB_CONFIG = _db_config("DB", "yooh")

# Mirror database holding the remote document collections
REMOTE_DB_CONFIG = _db_config("REMOTE_DB", "yooh_remote")

JWT_ACCESS_TOKEN_EXPIRES = timedelta(hours=1)

ATTENDANCE_CHECK_INTERVAL_SECONDS = int(os.getenv("ATTENDANCE_CHECK_INTERVAL_SECONDS", "60"))
AUTO_ATTENDANCE_ENABLED = bool(int(os.getenv("AUTO_ATTENDANCE_ENABLED", "1")))
LOCATION_MAX_AGE_SECONDS = int(os.getenv("LOCATION_MAX_AGE_SECONDS", "300"))

# Unset: every sign is on time
LATE_AFTER_MINUTES = _optional_int("LATE_AFTER_MINUTES")

SYNC_WORKERS = int(os.getenv("SYNC_WORKERS", "2"))
