#!/usr/bin/env python3
"""
Quick checks so the backend can start. Run from backend/:
  python scripts/check_backend.py
"""
import os
import sys
from pathlib import Path

# Run from backend/
backend_dir = Path(__file__).resolve().parent.parent
os.chdir(backend_dir)
if str(backend_dir) not in sys.path:
    sys.path.insert(0, str(backend_dir))


def main():
    errors = []

    # 1) .env
    env_file = backend_dir / ".env"
    if not env_file.exists():
        print("WARN backend/.env missing; using defaults (copy .env.example to set SOLAPI keys)")
    else:
        print("OK  .env exists")

    # 2) DB connection and tables
    try:
        from sqlalchemy import inspect

        from speetto_monitor.db.session import engine
        from speetto_monitor.db.tables import ALL_TABLE_NAMES

        existing = set(inspect(engine).get_table_names())
        missing = [t for t in ALL_TABLE_NAMES if t not in existing]
        if missing:
            errors.append(f"Missing tables {missing}. Run: alembic upgrade head")
            print("FAIL Tables missing:", ", ".join(missing))
        else:
            print("OK  Database tables (DATABASE_URL)")
    except Exception as e:
        errors.append(f"Database: {e}")
        print("FAIL Database:", e)

    # 3) SMS credentials (optional: readings are still stored without them)
    from speetto_monitor.config import settings

    if settings.sms_configured():
        print("OK  SOLAPI credentials set")
    else:
        print("WARN SOLAPI credentials not set; alerts will be recorded as errors")

    # 4) App import (catches missing deps, bad imports)
    try:
        from speetto_monitor.main import app  # noqa: F401
        print("OK  App import (speetto_monitor.main)")
    except Exception as e:
        errors.append(f"App import: {e}")
        print("FAIL App import:", e)

    if errors:
        print("\n---")
        for e in errors:
            print("•", e)
        return 1

    print("\nAll checks passed. Start with: uvicorn speetto_monitor.main:app --host 0.0.0.0 --port 8000")
    return 0


if __name__ == "__main__":
    sys.exit(main())
