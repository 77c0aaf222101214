import os

from .base import *  # noqa: F401,F403

SECRET_KEY = "test-secret"
JWT_SECRET_KEY = "test-jwt-secret"

DEBUG = False
TESTING = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "WARNING")

AUTO_INIT_DB = False
AUTO_ATTENDANCE_ENABLED = False
SYNC_WORKERS = 1
