from speetto_monitor.models.game import GameRound
from speetto_monitor.models.game_reading import GameReadingRow
from speetto_monitor.models.notification_log import NotificationLog
from speetto_monitor.models.recipient import RecipientRow

__all__ = [
    "GameRound",
    "GameReadingRow",
    "NotificationLog",
    "RecipientRow",
]
