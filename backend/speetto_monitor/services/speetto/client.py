"""Source page client: one GET of the game-info page, then extraction. Falls back to fixed readings."""
import logging
from datetime import date

import httpx

from speetto_monitor.config import Settings
from speetto_monitor.core.errors import FetchError
from speetto_monitor.services.speetto.extractor import extract
from speetto_monitor.services.speetto.fallback import fallback_readings
from speetto_monitor.services.speetto.types import FetchResult

logger = logging.getLogger(__name__)

BROWSER_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
    "Accept-Language": "ko-KR,ko;q=0.9,en;q=0.8",
    "Connection": "keep-alive",
    "Upgrade-Insecure-Requests": "1",
    "Cache-Control": "no-cache",
}


class SpeettoClient:
    """Fetches the source page. Pass a transport in tests (httpx.MockTransport)."""

    def __init__(self, settings: Settings, *, transport: httpx.BaseTransport | None = None) -> None:
        self._url = settings.source_url
        self._timeout = settings.fetch_timeout_seconds
        self._transport = transport

    def fetch_html(self) -> str:
        """GET the page once. Raises FetchError on transport errors or non-2xx."""
        try:
            with httpx.Client(timeout=self._timeout, transport=self._transport, follow_redirects=True) as c:
                r = c.get(self._url, headers=BROWSER_HEADERS)
        except httpx.HTTPError as e:
            raise FetchError(f"Source request failed: {e}") from e
        if not r.is_success:
            raise FetchError(f"Source page returned HTTP {r.status_code}")
        return r.text

    def fetch_readings(self, today: date) -> FetchResult:
        """Live readings, or the fallback set (used_fallback=True) when the fetch fails or nothing parses."""
        try:
            html = self.fetch_html()
        except FetchError as e:
            logger.warning("Fetch failed, using fallback readings: %s", e)
            return FetchResult(readings=fallback_readings(today), used_fallback=True, error=str(e))

        readings = extract(html, today=today)
        if not readings:
            logger.warning("No games found in source page, using fallback readings")
            return FetchResult(
                readings=fallback_readings(today),
                used_fallback=True,
                error="No games found in source page",
            )
        logger.info("Fetched %s live readings from %s", len(readings), self._url)
        return FetchResult(readings=readings)
