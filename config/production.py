import os

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "attendance_db"),
}

TIMEZONE = os.getenv("TIMEZONE", "Asia/Kolkata")

DEBUG = False

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))

BACKFILL_RUN_ID = os.getenv("BACKFILL_RUN_ID", "SYSTEM_BACKFILL")
BACKFILL_VERSION = os.getenv("BACKFILL_VERSION", "v1.0")
BACKFILL_REASON = os.getenv("BACKFILL_REASON", "Historical attendance classification correction")
BACKFILL_BATCH_SIZE = int(os.getenv("BACKFILL_BATCH_SIZE", "100"))
