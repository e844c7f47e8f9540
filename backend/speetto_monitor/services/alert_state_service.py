"""
Alert state: latest reading per game round, recipients, and the append-only notification log.

The daily dedup check reads notification_logs through the same session the
monitoring run writes to, so a 'sent' row appended earlier in a run is visible
to every later check in that run.
"""
import json
import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from speetto_monitor.core.constants import NOTIFICATION_LOGS_DEFAULT_LIMIT, Game
from speetto_monitor.core.errors import PersistenceError
from speetto_monitor.core.phone import normalize_phone_number
from speetto_monitor.models.game import GameRound
from speetto_monitor.models.game_reading import GameReadingRow
from speetto_monitor.models.notification_log import NotificationLog
from speetto_monitor.models.recipient import RecipientRow
from speetto_monitor.services.speetto.types import GameReading, PrizeTier

logger = logging.getLogger(__name__)

STATUS_SENT = "sent"
STATUS_FAILED = "failed"


@dataclass(frozen=True)
class Recipient:
    phone_number: str
    target_games: frozenset[Game]
    is_active: bool = True


@dataclass(frozen=True)
class NotificationRecord:
    """One delivery attempt. sent_on is the calendar day used for dedup."""

    phone_number: str
    game: Game
    round: int
    message: str
    sent_at: datetime
    sent_on: date
    status: str  # STATUS_SENT | STATUS_FAILED
    provider_message_id: str | None = None
    error: str | None = None


# --- Readings ---


def record_reading(db: Session, reading: GameReading, now: datetime) -> None:
    """Upsert the game round, then replace its latest reading. Raises PersistenceError on DB failure."""
    try:
        game_row = (
            db.query(GameRound)
            .filter(GameRound.name == reading.game.value, GameRound.round == reading.round)
            .first()
        )
        if game_row is None:
            game_row = GameRound(name=reading.game.value, round=reading.round)
            db.add(game_row)
            db.flush()
        else:
            game_row.updated_at = now

        row = db.query(GameReadingRow).filter(GameReadingRow.game_id == game_row.id).first()
        if row is None:
            row = GameReadingRow(game_id=game_row.id)
            db.add(row)
        row.as_of_date = reading.as_of
        row.store_instock_rate = reading.store_instock_rate
        row.first_prize_amount = reading.first.amount
        row.first_prize_remaining = reading.first.remaining
        row.second_prize_amount = reading.second.amount
        row.second_prize_remaining = reading.second.remaining
        row.third_prize_amount = reading.third.amount
        row.third_prize_remaining = reading.third.remaining
        row.recorded_at = now
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise PersistenceError(f"Saving {reading.game.value} round {reading.round} failed: {e}") from e


def _to_reading(game: Game, game_row: GameRound, row: GameReadingRow) -> GameReading:
    return GameReading(
        game=game,
        round=game_row.round,
        as_of=row.as_of_date,
        store_instock_rate=row.store_instock_rate,
        first=PrizeTier(row.first_prize_amount, row.first_prize_remaining),
        second=PrizeTier(row.second_prize_amount, row.second_prize_remaining),
        third=PrizeTier(row.third_prize_amount, row.third_prize_remaining),
    )


def latest_status(db: Session) -> dict[Game, GameReading]:
    """Most recently recorded reading per game. DB errors propagate to the caller."""
    rows = (
        db.query(GameRound, GameReadingRow)
        .join(GameReadingRow, GameReadingRow.game_id == GameRound.id)
        .order_by(GameReadingRow.recorded_at.desc(), GameReadingRow.id.desc())
        .all()
    )
    status: dict[Game, GameReading] = {}
    for game_row, row in rows:
        try:
            game = Game(game_row.name)
        except ValueError:
            continue
        if game not in status:
            status[game] = _to_reading(game, game_row, row)
    return status


# --- Recipients ---


def _parse_target_games(raw: str | None) -> frozenset[Game]:
    names = json.loads(raw or "[]")
    if not isinstance(names, list):
        raise ValueError(f"target_games must be a list, got {type(names).__name__}")
    known = {g.value for g in Game}
    return frozenset(Game(n) for n in names if n in known)


def get_recipients_for(db: Session, game: Game) -> list[Recipient]:
    """
    Active recipients subscribed to this game, one per handset (digits-only number).
    Rows with unreadable target_games or no digits are skipped.
    """
    rows = (
        db.query(RecipientRow)
        .filter(RecipientRow.is_active.is_(True))
        .order_by(RecipientRow.id.asc())
        .all()
    )
    out: list[Recipient] = []
    seen: set[str] = set()
    for r in rows:
        try:
            games = _parse_target_games(r.target_games_json)
        except (TypeError, ValueError) as e:
            logger.error("Recipient %s has unreadable target_games %r: %s", r.id, r.target_games_json, e)
            continue
        phone = normalize_phone_number(r.phone_number)
        if not phone or phone in seen or game not in games:
            continue
        seen.add(phone)
        out.append(Recipient(phone_number=phone, target_games=games, is_active=True))
    return out


def ensure_recipient(db: Session, phone_number: str, games: Iterable[Game]) -> RecipientRow:
    """
    Create the recipient if missing (active, subscribed to games). Existing rows are left untouched.
    The number is stored digits-only, so "010-1111-2222" and "01011112222" are the same recipient.
    """
    phone = normalize_phone_number(phone_number)
    if not phone:
        raise ValueError(f"Phone number {phone_number!r} has no digits")
    row = db.query(RecipientRow).filter(RecipientRow.phone_number == phone).first()
    if row is not None:
        return row
    row = RecipientRow(
        phone_number=phone,
        target_games_json=json.dumps([g.value for g in games]),
        is_active=True,
    )
    db.add(row)
    db.commit()
    db.refresh(row)
    logger.info("Added recipient %s", phone)
    return row


def list_recipients(db: Session) -> list[dict]:
    rows = db.query(RecipientRow).order_by(RecipientRow.id.asc()).all()
    return [
        {
            "id": r.id,
            "phone_number": r.phone_number,
            "target_games": r.target_games_json,
            "is_active": bool(r.is_active),
        }
        for r in rows
    ]


def set_recipient_active(db: Session, phone_number: str, active: bool) -> dict:
    """Enable or disable a recipient. Returns {ok: true} or {error: ...}."""
    row = (
        db.query(RecipientRow)
        .filter(RecipientRow.phone_number == normalize_phone_number(phone_number))
        .first()
    )
    if not row:
        return {"error": "Recipient not found."}
    row.is_active = active
    db.commit()
    return {"ok": True, "phone_number": row.phone_number, "is_active": active}


# --- Notification log ---


def has_sent_today(db: Session, phone_number: str, game: Game, round_no: int, day: date) -> bool:
    """True iff a 'sent' record exists for (phone_number, game, round, day). 'failed' rows do not count."""
    hit = (
        db.query(NotificationLog.id)
        .filter(
            NotificationLog.phone_number == normalize_phone_number(phone_number),
            NotificationLog.game_name == game.value,
            NotificationLog.round == round_no,
            NotificationLog.sent_on == day,
            NotificationLog.status == STATUS_SENT,
        )
        .first()
    )
    return hit is not None


def append_notification(db: Session, record: NotificationRecord) -> NotificationLog:
    """Append one delivery attempt and commit. Raises PersistenceError on DB failure."""
    row = NotificationLog(
        phone_number=normalize_phone_number(record.phone_number),
        game_name=record.game.value,
        round=record.round,
        message=record.message,
        sent_at=record.sent_at,
        sent_on=record.sent_on,
        status=record.status,
        provider_message_id=record.provider_message_id,
        error=record.error,
    )
    try:
        db.add(row)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise PersistenceError(f"Saving notification log for {record.phone_number} failed: {e}") from e
    return row


def recent_notifications(db: Session, limit: int = NOTIFICATION_LOGS_DEFAULT_LIMIT) -> list[dict]:
    """Most recent delivery attempts, newest first."""
    rows = (
        db.query(NotificationLog)
        .order_by(NotificationLog.sent_at.desc(), NotificationLog.id.desc())
        .limit(limit)
        .all()
    )
    return [
        {
            "id": r.id,
            "phone_number": r.phone_number,
            "game_name": r.game_name,
            "round": r.round,
            "message": r.message,
            "sent_at": r.sent_at.isoformat() if r.sent_at else None,
            "status": r.status,
            "provider_message_id": r.provider_message_id,
            "error": r.error,
        }
        for r in rows
    ]
