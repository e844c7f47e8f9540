"""
Runs every MONITOR_INTERVAL_MINUTES (and on POST /api/check-now): one Speetto monitoring pass.

Runs in this process are serialized by _RUN_LOCK so the dedup check-then-send
never races between the scheduled tick and a manual trigger. Separate processes
are not coordinated.
"""
import logging
import threading

from sqlalchemy.orm import Session

from speetto_monitor.config import Settings, settings
from speetto_monitor.core.constants import TRACKED_GAMES
from speetto_monitor.db.session import SessionLocal
from speetto_monitor.services.alert_state_service import ensure_recipient
from speetto_monitor.services.monitoring_service import RunOutcome, RunSummary, build_monitoring_service

logger = logging.getLogger(__name__)

_RUN_LOCK = threading.Lock()


def ensure_default_recipient(db: Session, cfg: Settings) -> None:
    """Seed ALERT_RECIPIENT subscribed to every tracked game, if it is set and missing."""
    if cfg.alert_recipient:
        ensure_recipient(db, cfg.alert_recipient, TRACKED_GAMES)


def run_monitor_once(db: Session, cfg: Settings | None = None) -> RunSummary:
    cfg = cfg or settings
    with _RUN_LOCK:
        try:
            ensure_default_recipient(db, cfg)
        except Exception as e:
            logger.exception("Could not seed default recipient: %s", e)
            db.rollback()
            return RunSummary.fatal(str(e))
        return build_monitoring_service(db, cfg).run()


def run_monitor_job() -> None:
    db = SessionLocal()
    try:
        summary = run_monitor_once(db)
        if summary.outcome != RunOutcome.SUCCESS:
            logger.warning("Monitor job %s: %s", summary.outcome.value, summary.errors)
    except Exception as e:
        logger.exception("Monitor job failed: %s", e)
        db.rollback()
    finally:
        db.close()
