from speetto_monitor.db.base import Base
from speetto_monitor.db.session import get_db, engine, SessionLocal
from speetto_monitor.db.tables import ALL_TABLE_NAMES, READING_TABLE_NAMES

__all__ = ["get_db", "engine", "SessionLocal", "Base", "ALL_TABLE_NAMES", "READING_TABLE_NAMES"]
