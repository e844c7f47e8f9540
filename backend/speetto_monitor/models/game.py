"""One row per (game name, round). Created on first sighting of a round."""
from sqlalchemy import Column, DateTime, Integer, String, UniqueConstraint
from sqlalchemy.sql import func

from speetto_monitor.db.base import Base


class GameRound(Base):
    __tablename__ = "games"
    __table_args__ = (UniqueConstraint("name", "round", name="uq_games_name_round"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(32), nullable=False, index=True)  # speetto1000 | speetto2000
    round = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
