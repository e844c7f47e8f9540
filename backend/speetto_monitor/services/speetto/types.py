"""
Typed definitions for Speetto game readings.

A reading is one snapshot of a game round as published on the source page:
store in-stock rate (판매점 입고율) and remaining tickets per prize tier.
"""
from dataclasses import asdict, dataclass, field
from datetime import date
from typing import Any

from speetto_monitor.core.constants import Game


@dataclass(frozen=True)
class PrizeTier:
    amount: str  # e.g. "5억원"; fixed per game
    remaining: int


@dataclass(frozen=True)
class GameReading:
    game: Game
    round: int
    as_of: date
    store_instock_rate: int  # percent; may exceed 100
    first: PrizeTier
    second: PrizeTier
    third: PrizeTier

    def to_dict(self) -> dict[str, Any]:
        """JSON-friendly shape used by the status route."""
        out = asdict(self)
        out["game"] = self.game.value
        out["display_name"] = self.game.display_name
        out["as_of"] = self.as_of.isoformat()
        return out


@dataclass
class FetchResult:
    """Readings from one fetch. used_fallback is True when the hard-coded set was substituted."""

    readings: list[GameReading] = field(default_factory=list)
    used_fallback: bool = False
    error: str | None = None
