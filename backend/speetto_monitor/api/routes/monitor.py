"""
Speetto monitor API: run now, latest status, recent notification logs.
"""
import logging
from typing import Any

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from speetto_monitor.config import settings
from speetto_monitor.core.clock import local_now
from speetto_monitor.core.constants import NOTIFICATION_LOGS_DEFAULT_LIMIT, NOTIFICATION_LOGS_MAX_LIMIT
from speetto_monitor.core.errors import monitor_error_to_http
from speetto_monitor.db.session import get_db
from speetto_monitor.scheduler.monitor_job import run_monitor_once
from speetto_monitor.services.alert_state_service import latest_status, recent_notifications
from speetto_monitor.services.monitoring_service import RunOutcome
from speetto_monitor.services.speetto import fallback_readings

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/hello")
def hello() -> dict[str, Any]:
    return {
        "success": True,
        "message": "Hello from Speetto monitor",
        "timestamp": local_now(settings.timezone).isoformat(),
    }


@router.get("/status")
def get_status(db: Session = Depends(get_db)) -> dict[str, Any]:
    """
    Latest persisted reading per game.
    When nothing has been recorded yet, returns the fallback readings with fallback=true.
    """
    try:
        status = latest_status(db)
    except Exception as e:
        logger.error("Status query failed: %s", e, exc_info=True)
        raise monitor_error_to_http(e)
    if status:
        return {"success": True, "fallback": False, "data": {g.value: r.to_dict() for g, r in status.items()}}

    data: dict[str, Any] = {}
    for r in fallback_readings(local_now(settings.timezone).date()):
        data.setdefault(r.game.value, r.to_dict())
    return {"success": True, "fallback": True, "data": data}


@router.post("/check-now")
def check_now(db: Session = Depends(get_db)) -> dict[str, Any]:
    """Run one monitoring pass now. Alerts already sent today are not repeated."""
    summary = run_monitor_once(db)
    return {
        "success": summary.outcome == RunOutcome.SUCCESS,
        "message": summary.message,
        "details": summary.to_dict(),
    }


@router.get("/notification-logs")
def notification_logs(
    db: Session = Depends(get_db),
    limit: int = Query(NOTIFICATION_LOGS_DEFAULT_LIMIT, ge=1, le=NOTIFICATION_LOGS_MAX_LIMIT),
) -> dict[str, Any]:
    """Recent SMS delivery attempts, newest first."""
    try:
        rows = recent_notifications(db, limit=limit)
    except Exception as e:
        logger.error("Notification log query failed: %s", e, exc_info=True)
        raise monitor_error_to_http(e)
    return {"success": True, "data": rows}
