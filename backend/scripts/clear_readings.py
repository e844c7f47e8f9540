#!/usr/bin/env python3
"""
Delete all stored readings (game_readings, games). Recipients and notification_logs are kept.
Run with the backend stopped: cd backend && python scripts/clear_readings.py
"""
import sys
from pathlib import Path

# backend/scripts/ -> backend/
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from sqlalchemy import text

from speetto_monitor.db.session import engine
from speetto_monitor.db.tables import READING_TABLE_NAMES


def main():
    print(f"Deleting rows from {', '.join(READING_TABLE_NAMES)} ...")
    with engine.connect() as conn:
        for table in READING_TABLE_NAMES:
            conn.execute(text(f"DELETE FROM {table}"))
        conn.commit()
    print("Done. The next monitoring run records fresh readings.")


if __name__ == "__main__":
    main()
