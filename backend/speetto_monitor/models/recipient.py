"""SMS recipient and the games it subscribes to.

target_games_json: JSON list of game names, e.g. ["speetto1000", "speetto2000"].
"""
from sqlalchemy import Boolean, Column, DateTime, Integer, String, Text, true
from sqlalchemy.sql import func

from speetto_monitor.db.base import Base


class RecipientRow(Base):
    __tablename__ = "recipients"

    id = Column(Integer, primary_key=True, autoincrement=True)
    phone_number = Column(String(32), nullable=False, unique=True, index=True)
    target_games_json = Column(Text, nullable=False, server_default="[]")
    is_active = Column(Boolean, nullable=False, server_default=true(), default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
