#!/usr/bin/env python3
"""
Run one Speetto monitoring pass (same as POST /api/check-now) and print the summary.
Run: cd backend && python scripts/run_monitor_once.py
"""
import json
import sys
from pathlib import Path

# backend/scripts/ -> backend/
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from speetto_monitor.db.session import SessionLocal
from speetto_monitor.scheduler.monitor_job import run_monitor_once
from speetto_monitor.services.monitoring_service import RunOutcome


def main() -> int:
    db = SessionLocal()
    try:
        summary = run_monitor_once(db)
    finally:
        db.close()
    print(json.dumps(summary.to_dict(), ensure_ascii=False, indent=2))
    if summary.used_fallback:
        print("NOTE: source page unavailable or unparseable; fallback readings were used.")
    return 1 if summary.outcome == RunOutcome.FATAL else 0


if __name__ == "__main__":
    sys.exit(main())
