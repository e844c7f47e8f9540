"""Wall clock in the configured calendar timezone (dedup day, default as-of date)."""
from datetime import datetime
from zoneinfo import ZoneInfo


def local_now(tz_name: str) -> datetime:
    return datetime.now(ZoneInfo(tz_name))
