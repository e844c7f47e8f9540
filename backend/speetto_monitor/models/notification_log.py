"""Append-only SMS delivery attempts. Audit log and source of truth for the daily dedup check.

status: 'sent' | 'failed'. Only 'sent' rows block another alert for the same
(phone_number, game_name, round, sent_on).
"""
from sqlalchemy import Column, Date, DateTime, Index, Integer, String, Text

from speetto_monitor.db.base import Base


class NotificationLog(Base):
    __tablename__ = "notification_logs"
    __table_args__ = (
        Index("ix_notification_logs_dedup", "phone_number", "game_name", "round", "sent_on", "status"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    phone_number = Column(String(32), nullable=False)
    game_name = Column(String(32), nullable=False)
    round = Column(Integer, nullable=False)
    message = Column(Text, nullable=False)
    sent_at = Column(DateTime(timezone=True), nullable=False, index=True)
    sent_on = Column(Date, nullable=False)  # calendar day of sent_at in the configured timezone
    status = Column(String(16), nullable=False)
    provider_message_id = Column(String(64), nullable=True)
    error = Column(Text, nullable=True)
