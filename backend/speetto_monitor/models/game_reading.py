"""Latest reading for a game round. Replaced in place on every fetch of the same round (no history)."""
from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, String

from speetto_monitor.db.base import Base


class GameReadingRow(Base):
    __tablename__ = "game_readings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    game_id = Column(Integer, ForeignKey("games.id", ondelete="CASCADE"), nullable=False, unique=True)
    as_of_date = Column(Date, nullable=False)
    store_instock_rate = Column(Integer, nullable=False)  # not clamped; source has reported >100
    first_prize_amount = Column(String(32), nullable=False)
    first_prize_remaining = Column(Integer, nullable=False)
    second_prize_amount = Column(String(32), nullable=False)
    second_prize_remaining = Column(Integer, nullable=False)
    third_prize_amount = Column(String(32), nullable=False)
    third_prize_remaining = Column(Integer, nullable=False)
    recorded_at = Column(DateTime(timezone=True), nullable=False, index=True)  # set by the caller's clock
