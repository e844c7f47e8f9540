"""
FastAPI app entrypoint.

Speetto monitor: scheduled scrape of the 동행복권 game-info page with SMS alerts.
"""
import logging
from contextlib import asynccontextmanager
from pathlib import Path

from apscheduler.schedulers.background import BackgroundScheduler
from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Load .env from backend/ before any app code
load_dotenv(Path(__file__).resolve().parent.parent / ".env")

from speetto_monitor.api.routes import monitor
from speetto_monitor.config import settings
from speetto_monitor.core.constants import MONITOR_JOB_ID
from speetto_monitor.scheduler.monitor_job import run_monitor_job

logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
)
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)
logging.getLogger("apscheduler").setLevel(logging.WARNING)

logger = logging.getLogger(__name__)

_scheduler = BackgroundScheduler(timezone=settings.timezone)


@asynccontextmanager
async def lifespan(app: FastAPI):
    _scheduler.add_job(
        run_monitor_job,
        "interval",
        minutes=settings.monitor_interval_minutes,
        id=MONITOR_JOB_ID,
        max_instances=1,
        coalesce=True,
    )
    _scheduler.start()
    app.state.scheduler = _scheduler
    logger.info("Speetto monitor ready; checking every %s min", settings.monitor_interval_minutes)
    yield
    _scheduler.shutdown(wait=False)


app = FastAPI(title="Speetto Monitor", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(monitor.router, prefix="/api", tags=["monitor"])


@app.get("/", include_in_schema=False)
def root():
    """Root: point to API docs and health."""
    return {"message": "Speetto Monitor API", "docs": "/docs", "health": "/health"}


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
