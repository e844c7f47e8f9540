"""
Speetto (스피또) scratch lottery: source page fetch, extraction and the alert rule.

- extractor: raw HTML -> list[GameReading], pure, never raises.
- client: GET the 동행복권 game-info page; fallback readings when it fails.
- is_eligible: alert when the store in-stock rate reached the threshold and a 1st prize is left.
"""

from speetto_monitor.services.speetto.client import SpeettoClient
from speetto_monitor.services.speetto.extractor import extract
from speetto_monitor.services.speetto.fallback import fallback_readings
from speetto_monitor.services.speetto.types import FetchResult, GameReading, PrizeTier

DEFAULT_STOCK_THRESHOLD = 100


def is_eligible(reading: GameReading, stock_threshold: int = DEFAULT_STOCK_THRESHOLD) -> bool:
    return reading.store_instock_rate >= stock_threshold and reading.first.remaining > 0


__all__ = [
    "DEFAULT_STOCK_THRESHOLD",
    "FetchResult",
    "GameReading",
    "PrizeTier",
    "SpeettoClient",
    "extract",
    "fallback_readings",
    "is_eligible",
]
