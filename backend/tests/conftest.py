"""
Speetto monitor test configuration.

Shared fixtures:
- db_session: isolated in-memory SQLite session with all tables created
- test_settings: Settings that never read backend/.env
- FakeNotifier / StaticFetcher: stand-ins for SOLAPI and the source page
- sample markup for the extractor and the end-to-end run

Run:
    pytest backend/tests -v
"""
import os
import sys
from dataclasses import dataclass, field
from datetime import date, datetime
from zoneinfo import ZoneInfo

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# ============================================
# PATH SETUP
# ============================================

backend_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if backend_root not in sys.path:
    sys.path.insert(0, backend_root)

from speetto_monitor.config import Settings  # noqa: E402
from speetto_monitor.core.constants import Game  # noqa: E402
from speetto_monitor.db.base import Base  # noqa: E402
import speetto_monitor.models  # noqa: E402,F401  (registers tables on Base.metadata)
from speetto_monitor.services.sms import SendResult  # noqa: E402
from speetto_monitor.services.speetto import FetchResult, GameReading, PrizeTier  # noqa: E402

SEOUL = ZoneInfo("Asia/Seoul")
RECIPIENT = "010-1111-2222"
RECIPIENT_DIGITS = "01011112222"
SENDER = "010-0000-0000"


# ============================================
# SAMPLE MARKUP
# ============================================

# Both games, laid out the way the game-info page renders them
SAMPLE_HTML = """
<div class="gameInfo">
  <h3 class="tit">스피또1000 99회 안내사항</h3>
  <p class="date">25-09-17 기준</p>
  <table>
    <tr><th>판매점 입고율</th><td>100%</td></tr>
    <tr><th>1등</th><td>5억원</td><td><strong>3</strong>매</td></tr>
    <tr><th>2등</th><td>2천만원</td><td><strong>15</strong>매</td></tr>
    <tr><th>3등</th><td>1만원</td><td><strong>25,000</strong>매</td></tr>
  </table>
</div>
<div class="gameInfo">
  <h3 class="tit">스피또2000 61회 안내사항</h3>
  <p class="date">25-09-18 기준</p>
  <table>
    <tr><th>판매점 입고율</th><td>95%</td></tr>
    <tr><th>1등</th><td>10억원</td><td><strong>0</strong>매</td></tr>
    <tr><th>2등</th><td>1억원</td><td><strong>5</strong>매</td></tr>
    <tr><th>3등</th><td>1천만원</td><td><strong>12,000</strong>매</td></tr>
  </table>
</div>
"""

# Minimal markup from the alert walkthrough: speetto1000 round 99, 100%, 3 / 15 / 25000
E2E_HTML = (
    "스피또1000 99회 안내사항...판매점 입고율...100%..."
    "<strong>3</strong>...<strong>15</strong>...<strong>25000</strong>...25-09-17 기준"
)
E2E_HTML_LOW_STOCK = E2E_HTML.replace("100%", "14%")


# ============================================
# HELPERS
# ============================================

def make_reading(
    game: Game = Game.SPEETTO1000,
    round_no: int = 99,
    rate: int = 100,
    first: int = 3,
    second: int = 15,
    third: int = 25000,
    as_of: date = date(2025, 9, 17),
) -> GameReading:
    a, b, c = game.prize_labels
    return GameReading(
        game=game,
        round=round_no,
        as_of=as_of,
        store_instock_rate=rate,
        first=PrizeTier(a, first),
        second=PrizeTier(b, second),
        third=PrizeTier(c, third),
    )


def fixed_clock(moment: datetime):
    return lambda: moment


@dataclass
class StaticFetcher:
    """Returns the same readings on every call; records the day it was asked for."""

    readings: list[GameReading]
    used_fallback: bool = False
    calls: list[date] = field(default_factory=list)

    def __call__(self, today: date) -> FetchResult:
        self.calls.append(today)
        return FetchResult(readings=list(self.readings), used_fallback=self.used_fallback)


@dataclass
class FakeNotifier:
    """Records sends; returns scripted results in order, then success."""

    results: list[SendResult] = field(default_factory=list)
    sent: list[dict] = field(default_factory=list)

    def send(self, to: str, from_: str, text: str, type_: str = "LMS") -> SendResult:
        self.sent.append({"to": to, "from": from_, "text": text, "type": type_})
        if self.results:
            return self.results.pop(0)
        return SendResult(success=True, message_id=f"M{len(self.sent)}")


# ============================================
# FIXTURES
# ============================================

@pytest.fixture
def db_session():
    """Isolated in-memory database; shared across threads for TestClient."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    Session = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = Session()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(engine)
        engine.dispose()


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        _env_file=None,
        database_url="sqlite://",
        solapi_api_key="test-key",
        solapi_secret_key="test-secret",
        solapi_base_url="https://sms.test",
        sms_sender=SENDER,
        alert_recipient=RECIPIENT,
        source_url="https://lottery.test/gameInfoAll",
        timezone="Asia/Seoul",
        stock_threshold=100,
    )


@pytest.fixture
def morning() -> datetime:
    return datetime(2025, 9, 17, 10, 0, tzinfo=SEOUL)
