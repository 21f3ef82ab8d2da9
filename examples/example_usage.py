"""Example: evaluate one employee-day through the service layer (no Flask)."""

import importlib
import sys

from dotenv import load_dotenv

from config import get_settings_module

from src.attendance_engine.attendance_engine.container import build_container


def main():
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG, timezone=getattr(settings, "TIMEZONE", None))
    try:
        user_id = int(sys.argv[1]) if len(sys.argv) > 1 else 1
        status = container.daily_status_service.get_daily_status(user_id)
        print(status.to_dict())
    finally:
        container.close()


if __name__ == "__main__":
    main()
