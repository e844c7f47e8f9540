"""
Application settings (Pydantic Settings).
"""
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings

# .env next to backend/ (parent of speetto_monitor/)
_env_path = Path(__file__).resolve().parent.parent / ".env"

DEFAULT_SOURCE_URL = "https://dhlottery.co.kr/common.do?method=gameInfoAll&wiselog=M_A_1_7"


class Settings(BaseSettings):
    database_url: str = "sqlite:///./speetto.db"
    log_level: str = "INFO"
    # Calendar day for the daily dedup window and default as-of dates
    timezone: str = "Asia/Seoul"

    # Source page (동행복권 game info)
    source_url: str = DEFAULT_SOURCE_URL
    fetch_timeout_seconds: float = 10.0

    # SOLAPI: SOLAPI_API_KEY and SOLAPI_SECRET_KEY in .env
    solapi_api_key: str = ""
    solapi_secret_key: str = ""
    solapi_base_url: str = "https://api.solapi.com"
    sms_timeout_seconds: float = 10.0
    sms_sender: str = "01067790104"
    sms_type: str = "LMS"  # alert text is longer than a single SMS

    # Single configured recipient, seeded into the recipients table when missing
    alert_recipient: str = "01067790104"

    # Alert rule: stock >= threshold AND first prize remaining > 0
    stock_threshold: int = 100
    monitor_interval_minutes: int = 30

    class Config:
        env_file = _env_path
        extra = "ignore"

    @field_validator("solapi_api_key", "solapi_secret_key", "sms_sender", "alert_recipient", mode="after")
    @classmethod
    def strip_credentials(cls, v: str) -> str:
        return (v or "").strip()

    def sms_configured(self) -> bool:
        return bool(self.solapi_api_key and self.solapi_secret_key)


settings = Settings()
