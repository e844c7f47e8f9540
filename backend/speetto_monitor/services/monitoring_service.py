"""
One monitoring run: fetch readings, then per game persist -> evaluate -> notify -> record.

Games are processed one after another. A failure in one game (or one recipient)
is collected into the run summary and the loop moves on; only a failure before
the loop (fetch or recipient lookup) ends the run as fatal.
"""
import logging
from dataclasses import asdict, dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Callable, Protocol

from sqlalchemy.orm import Session

from speetto_monitor.config import Settings
from speetto_monitor.core.clock import local_now
from speetto_monitor.core.constants import Game
from speetto_monitor.core.errors import MSG_SMS_NOT_CONFIGURED, ConfigError, NotifyError, PersistenceError
from speetto_monitor.services import alert_state_service
from speetto_monitor.services.alert_state_service import (
    STATUS_FAILED,
    STATUS_SENT,
    NotificationRecord,
    Recipient,
)
from speetto_monitor.services.sms import SendResult, create_sms_client, render_alert_message
from speetto_monitor.services.speetto import FetchResult, GameReading, SpeettoClient, is_eligible

logger = logging.getLogger(__name__)


class RunOutcome(str, Enum):
    SUCCESS = "success"
    PARTIAL = "partial"
    FATAL = "fatal"


@dataclass
class RunSummary:
    outcome: RunOutcome = RunOutcome.SUCCESS
    games_checked: int = 0
    alerts_sent: int = 0
    errors: list[str] = field(default_factory=list)
    used_fallback: bool = False
    message: str = ""

    @classmethod
    def fatal(cls, error: str) -> "RunSummary":
        return cls(outcome=RunOutcome.FATAL, errors=[error], message=f"Monitoring run failed: {error}")

    def to_dict(self) -> dict:
        out = asdict(self)
        out["outcome"] = self.outcome.value
        return out


class Notifier(Protocol):
    def send(self, to: str, from_: str, text: str, type_: str = "LMS") -> SendResult: ...


Fetcher = Callable[[date], FetchResult]
Clock = Callable[[], datetime]


class MonitoringService:
    """Runs the pipeline against one DB session. notifier=None means SMS is not configured."""

    def __init__(
        self,
        db: Session,
        settings: Settings,
        *,
        fetcher: Fetcher,
        notifier: Notifier | None = None,
        clock: Clock | None = None,
    ) -> None:
        self._db = db
        self._settings = settings
        self._fetcher = fetcher
        self._notifier = notifier
        self._clock = clock or (lambda: local_now(settings.timezone))

    def run(self) -> RunSummary:
        now = self._clock()
        logger.info("Speetto monitoring run started at %s", now.isoformat())
        try:
            fetched = self._fetcher(now.date())
            recipients = self._load_recipients(fetched.readings)
        except Exception as e:
            logger.exception("Monitoring run failed before processing games: %s", e)
            self._db.rollback()
            return RunSummary.fatal(str(e))

        summary = RunSummary(games_checked=len(fetched.readings), used_fallback=fetched.used_fallback)
        if fetched.used_fallback:
            logger.warning("Run is using fallback readings (%s)", fetched.error)

        for reading in fetched.readings:
            try:
                self._process(reading, recipients.get(reading.game, []), now, summary)
            except Exception as e:
                error = f"{reading.game.value} round {reading.round}: {e}"
                logger.error("Processing failed for %s", error)
                summary.errors.append(error)

        if summary.errors:
            summary.outcome = RunOutcome.PARTIAL
            summary.message = (
                f"Monitoring finished with {len(summary.errors)} error(s). "
                f"{summary.alerts_sent} alert(s) sent"
            )
        else:
            summary.message = (
                f"Monitoring finished. {summary.games_checked} game(s) checked, "
                f"{summary.alerts_sent} alert(s) sent"
            )
        logger.info("Speetto monitoring run done: %s", summary.message)
        return summary

    def _load_recipients(self, readings: list[GameReading]) -> dict[Game, list[Recipient]]:
        games = {r.game for r in readings}
        return {g: alert_state_service.get_recipients_for(self._db, g) for g in games}

    def _process(
        self,
        reading: GameReading,
        recipients: list[Recipient],
        now: datetime,
        summary: RunSummary,
    ) -> None:
        # PersistenceError propagates: the game is counted as an error and not notified
        alert_state_service.record_reading(self._db, reading, now)

        if not is_eligible(reading, self._settings.stock_threshold):
            logger.info(
                "%s round %s: no alert (in-stock %s%%, 1st prize left %s)",
                reading.game.value,
                reading.round,
                reading.store_instock_rate,
                reading.first.remaining,
            )
            return

        logger.info("%s round %s meets the alert rule; notifying %s recipient(s)",
                    reading.game.value, reading.round, len(recipients))
        for recipient in recipients:
            try:
                if self._notify(recipient, reading, now):
                    summary.alerts_sent += 1
            except Exception as e:
                error = f"SMS to {recipient.phone_number} for {reading.game.value} round {reading.round} failed: {e}"
                logger.error(error)
                summary.errors.append(error)

    def _notify(self, recipient: Recipient, reading: GameReading, now: datetime) -> bool:
        """Send one alert unless already sent today. Returns True when a message went out."""
        day = now.date()
        if alert_state_service.has_sent_today(self._db, recipient.phone_number, reading.game, reading.round, day):
            logger.info("Already alerted %s today for %s round %s",
                        recipient.phone_number, reading.game.value, reading.round)
            return False
        if self._notifier is None:
            raise ConfigError(MSG_SMS_NOT_CONFIGURED)

        message = render_alert_message(
            reading.game,
            reading.round,
            reading.store_instock_rate,
            reading.first.remaining,
            now,
        )
        result = self._notifier.send(
            recipient.phone_number,
            self._settings.sms_sender,
            message,
            self._settings.sms_type,
        )
        record = NotificationRecord(
            phone_number=recipient.phone_number,
            game=reading.game,
            round=reading.round,
            message=message,
            sent_at=now,
            sent_on=day,
            status=STATUS_SENT if result.success else STATUS_FAILED,
            provider_message_id=result.message_id,
            error=result.error,
        )
        try:
            alert_state_service.append_notification(self._db, record)
        except PersistenceError:
            if result.success:
                # No 'sent' row, so the next run will text this recipient again
                logger.error(
                    "SMS delivered but not recorded: %s for %s round %s (message id %s)",
                    recipient.phone_number,
                    reading.game.value,
                    reading.round,
                    result.message_id,
                )
            raise
        if not result.success:
            raise NotifyError(result.error or "SMS send failed")
        logger.info("Alerted %s for %s round %s", recipient.phone_number, reading.game.value, reading.round)
        return True


def build_monitoring_service(db: Session, settings: Settings) -> MonitoringService:
    """Service wired to the live source page and SOLAPI (None when credentials are missing)."""
    return MonitoringService(
        db,
        settings,
        fetcher=SpeettoClient(settings).fetch_readings,
        notifier=create_sms_client(settings),
    )
