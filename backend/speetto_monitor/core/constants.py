"""
Centralized constants for the scheduler and the tracked games.

Change job IDs, game labels or prize tiers here instead of scattering literals
across the extractor, notifier and routes.
"""
from enum import Enum

# Scheduler job ID (must match the id used in main.py add_job)
MONITOR_JOB_ID = "speetto_monitor"

# Section window when the next "회 안내사항" heading is missing
SECTION_WINDOW_CHARS = 2000

# Bounded history for GET /api/notification-logs
NOTIFICATION_LOGS_DEFAULT_LIMIT = 10
NOTIFICATION_LOGS_MAX_LIMIT = 100


class Game(str, Enum):
    SPEETTO1000 = "speetto1000"
    SPEETTO2000 = "speetto2000"

    @property
    def display_name(self) -> str:
        return GAME_DISPLAY_NAMES[self]

    @property
    def prize_labels(self) -> tuple[str, str, str]:
        return GAME_PRIZE_LABELS[self]


# Labels as they appear on the source page ("스피또1000 99회 안내사항")
GAME_DISPLAY_NAMES: dict[Game, str] = {
    Game.SPEETTO1000: "스피또1000",
    Game.SPEETTO2000: "스피또2000",
}

# 1st / 2nd / 3rd prize amounts; fixed per game, not parsed from the page
GAME_PRIZE_LABELS: dict[Game, tuple[str, str, str]] = {
    Game.SPEETTO1000: ("5억원", "2천만원", "1만원"),
    Game.SPEETTO2000: ("10억원", "1억원", "1천만원"),
}

# Extraction order = order of readings in a run
TRACKED_GAMES: tuple[Game, ...] = (Game.SPEETTO1000, Game.SPEETTO2000)
