import os

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "attendance_db_test"),
}

TIMEZONE = "Asia/Kolkata"

DEBUG = False
TESTING = True

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))

BACKFILL_RUN_ID = "TEST_BACKFILL"
BACKFILL_VERSION = "test"
BACKFILL_REASON = "Test run"
BACKFILL_BATCH_SIZE = 10
