"""Alert text. Fixed template; only the reading figures and the timestamp vary."""
from datetime import datetime

from speetto_monitor.core.constants import Game


def render_alert_message(
    game: Game,
    round_no: int,
    store_instock_rate: int,
    first_prize_remaining: int,
    now: datetime,
) -> str:
    return (
        "🚨 스피또 알림 🚨\n\n"
        f"{game.display_name} {round_no}회\n"
        f"📊 출고율: {store_instock_rate}%\n"
        f"🎰 1등 잔여: {first_prize_remaining}매\n\n"
        "출고율 100%에 1등이 남아있습니다!\n"
        "지금이 구매 기회입니다! 🍀\n\n"
        f"시간: {now:%Y-%m-%d %H:%M:%S}"
    )
